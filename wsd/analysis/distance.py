"""
Distance to the transmitter from RSSI, by inverting the ITU-R P.1238 indoor
path loss model:

    L = 20·log10(f) + N·log10(d) + Pf(n) - 28

so that

    d = 10 ^ ((L - 20·log10(f) + 28 - Pf(n)) / N)

with L = tx power - RSSI, f in MHz, N the environment's distance power loss
coefficient and Pf(n) the floor penetration loss.
"""

from __future__ import annotations

import math
from typing import Mapping, Optional

from wsd.analysis.config import (
    DISTANCE_ERROR_HIGH,
    DISTANCE_ERROR_LOW,
    PATH_LOSS_EXPONENTS,
    TX_POWER_DBM,
    recommended_environment,
)
from wsd.analysis.errors import InvalidMeasurement
from wsd.analysis.types import DistanceEstimate, Environment
from wsd.utils.log import get_logger
from wsd.utils.stats import clamp

logger = get_logger(__name__)

MODEL_NAME = "ITU-R P.1238"
MIN_DISTANCE_M = 0.5
MAX_DISTANCE_M = 100.0


def path_loss_exponent(
    environment: Environment,
    exponents: Optional[Mapping[Environment, float]] = None,
) -> float:
    table = exponents if exponents is not None else PATH_LOSS_EXPONENTS
    return table.get(environment, PATH_LOSS_EXPONENTS[environment])


def _rssi_confidence(rssi: float) -> float:
    if rssi >= -50:
        return 0.9
    if rssi >= -60:
        return 0.8
    if rssi >= -70:
        return 0.7
    if rssi >= -80:
        return 0.5
    return 0.3


def _path_loss_confidence(path_loss: float) -> float:
    if path_loss < 40:
        return 0.7
    if path_loss > 90:
        return 0.5
    return 1.0


def _environment_confidence(n: float) -> float:
    if n <= 2.2:
        return 0.9
    if n <= 2.8:
        return 0.85
    if n <= 3.0:
        return 0.8
    return 0.7


def estimate(
    rssi: float,
    frequency_mhz: float,
    environment: Environment = Environment.RESIDENTIAL,
    tx_power_dbm: float = TX_POWER_DBM,
    floor_penetration_loss_db: float = 0.0,
    path_loss_exponents: Optional[Mapping[Environment, float]] = None,
    error_low: float = DISTANCE_ERROR_LOW,
    error_high: float = DISTANCE_ERROR_HIGH,
) -> DistanceEstimate:
    """
    Estimate the distance to the transmitter.

    Parameters
    ----------
    rssi
        Received signal strength in dBm.
    frequency_mhz
        Carrier frequency in MHz, must be positive.
    environment
        Indoor environment selecting the path loss exponent.
    tx_power_dbm
        Transmit power of the access point.
    floor_penetration_loss_db
        Extra loss for floors crossed by the path.
    path_loss_exponents
        Overrides for the per-environment exponents.
    error_low, error_high
        Fractional error envelope around the estimate.

    Returns
    -------
    DistanceEstimate
        Estimate clamped to [0.5, 100] m with min ≤ estimate ≤ max.

    Raises
    ------
    InvalidMeasurement
        If `frequency_mhz` is not positive.
    """
    if frequency_mhz <= 0:
        raise InvalidMeasurement(f"frequency must be positive, got {frequency_mhz} MHz")

    n = path_loss_exponent(environment, path_loss_exponents)
    if n <= 0:
        raise InvalidMeasurement(f"path loss exponent must be positive, got {n}")

    path_loss = tx_power_dbm - rssi
    exponent = (path_loss - 20 * math.log10(frequency_mhz) + 28 - floor_penetration_loss_db) / n
    # cap the exponent so absurd inputs clamp instead of overflowing
    raw = 10 ** min(exponent, 10.0)
    distance = clamp(raw, MIN_DISTANCE_M, MAX_DISTANCE_M)

    confidence = clamp(
        _rssi_confidence(rssi) * _path_loss_confidence(path_loss) * _environment_confidence(n),
        0.0, 1.0,
    )
    logger.debug(
        "Distance: path_loss=%.1f dB, N=%.2f, raw=%.2f m, clamped=%.2f m",
        path_loss, n, raw, distance,
    )
    return DistanceEstimate(
        estimated_meters=distance,
        min_meters=max(MIN_DISTANCE_M, distance * (1 - error_low)),
        max_meters=distance * (1 + error_high),
        confidence=confidence,
        model=MODEL_NAME,
    )


def estimate_for_frequency(rssi: float, frequency_mhz: float, **kwargs) -> DistanceEstimate:
    """
    Estimate distance using the environment recommended for the band.
    """
    return estimate(rssi, frequency_mhz, recommended_environment(frequency_mhz), **kwargs)
