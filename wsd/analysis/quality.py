"""
Map raw RSSI readings to a normalized quality score and SNR.
"""

from wsd.analysis.config import NOISE_FLOOR_DBM
from wsd.analysis.types import Measurement, SignalQuality
from wsd.utils.log import get_logger
from wsd.utils.stats import clamp

logger = get_logger(__name__)

RSSI_MIN = -100
RSSI_MAX = 0

# (rssi dBm, quality) knots, ascending; linear in between, flat outside
QUALITY_KNOTS: tuple[tuple[int, float], ...] = (
    (-90, 0.0),
    (-80, 0.25),
    (-70, 0.5),
    (-60, 0.75),
    (-50, 0.9),
    (-30, 1.0),
)


def quality(rssi: float) -> float:
    """
    Piecewise-linear quality in [0, 1], non-decreasing in `rssi`.

    Parameters
    ----------
    rssi
        Received signal strength in dBm. Any finite value is accepted.

    Returns
    -------
    float
        0.0 at or below -90 dBm, 1.0 at or above -30 dBm.
    """
    lo_rssi, lo_q = QUALITY_KNOTS[0]
    if rssi <= lo_rssi:
        return lo_q
    for hi_rssi, hi_q in QUALITY_KNOTS[1:]:
        if rssi == hi_rssi:
            return hi_q
        if rssi < hi_rssi:
            frac = (rssi - lo_rssi) / (hi_rssi - lo_rssi)
            return clamp(lo_q + frac * (hi_q - lo_q), 0.0, 1.0)
        lo_rssi, lo_q = hi_rssi, hi_q
    return QUALITY_KNOTS[-1][1]


def snr(rssi: float, noise_floor: float = NOISE_FLOOR_DBM) -> float:
    """
    SNR in dB against an assumed noise floor, never negative.
    """
    return float(max(0.0, rssi - noise_floor))


def clamp_rssi(rssi: int) -> int:
    """
    Constrain an RSSI reading to the plausible [-100, 0] dBm range.
    """
    clamped = int(clamp(rssi, RSSI_MIN, RSSI_MAX))
    if clamped != rssi:
        logger.warning("RSSI %s dBm out of range, clamped to %s dBm", rssi, clamped)
    return clamped


def rssi_to_percentage(rssi: float) -> int:
    return int(quality(rssi) * 100)


def signal_quality(measurement: Measurement, noise_floor: float = NOISE_FLOOR_DBM) -> SignalQuality:
    """
    Quality and SNR of a single measurement.
    """
    return SignalQuality(
        quality=quality(measurement.rssi),
        snr_db=snr(measurement.rssi, noise_floor),
    )
