"""
Throughput prediction from SNR: Shannon-Hartley capacity as the theoretical
ceiling, and IEEE 802.11 MCS tables for what a real radio would negotiate.

    C = B · log2(1 + SNR_linear)
"""

from __future__ import annotations

import math
from typing import Optional

from wsd.analysis.config import MCS_STABILITY_MARGIN, NOISE_FLOOR_DBM, PROTOCOL_OVERHEAD
from wsd.analysis.errors import InvalidMeasurement
from wsd.analysis.types import McsEntry, ThroughputPrediction, WifiStandard
from wsd.utils.stats import db_to_linear

# 1 spatial stream, 20 MHz, long GI (0.8 us)
MCS_TABLE_11AX: tuple[McsEntry, ...] = (
    McsEntry(0,  "BPSK",     "1/2", 5.0,  8.6),
    McsEntry(1,  "QPSK",     "1/2", 8.0,  17.2),
    McsEntry(2,  "QPSK",     "3/4", 11.0, 25.8),
    McsEntry(3,  "16-QAM",   "1/2", 14.0, 34.4),
    McsEntry(4,  "16-QAM",   "3/4", 17.0, 51.6),
    McsEntry(5,  "64-QAM",   "2/3", 20.0, 68.8),
    McsEntry(6,  "64-QAM",   "3/4", 23.0, 77.4),
    McsEntry(7,  "64-QAM",   "5/6", 26.0, 86.0),
    McsEntry(8,  "256-QAM",  "3/4", 29.0, 103.2),
    McsEntry(9,  "256-QAM",  "5/6", 32.0, 114.7),
    McsEntry(10, "1024-QAM", "3/4", 35.0, 129.0),
    McsEntry(11, "1024-QAM", "5/6", 38.0, 143.4),
)

MCS_TABLE_11AC: tuple[McsEntry, ...] = (
    McsEntry(0, "BPSK",    "1/2", 5.0,  6.5),
    McsEntry(1, "QPSK",    "1/2", 8.0,  13.0),
    McsEntry(2, "QPSK",    "3/4", 11.0, 19.5),
    McsEntry(3, "16-QAM",  "1/2", 14.0, 26.0),
    McsEntry(4, "16-QAM",  "3/4", 17.0, 39.0),
    McsEntry(5, "64-QAM",  "2/3", 20.0, 52.0),
    McsEntry(6, "64-QAM",  "3/4", 23.0, 58.5),
    McsEntry(7, "64-QAM",  "5/6", 26.0, 65.0),
    McsEntry(8, "256-QAM", "3/4", 29.0, 78.0),
    McsEntry(9, "256-QAM", "5/6", 32.0, 86.7),
)

MCS_TABLE_11N: tuple[McsEntry, ...] = MCS_TABLE_11AC[:8]

# channel bonding gain, slightly under n× to account for guard bands
WIDTH_MULTIPLIER: dict[int, float] = {40: 2.1, 80: 4.2, 160: 8.3}


def mcs_table(standard: WifiStandard) -> tuple[McsEntry, ...]:
    match standard:
        case WifiStandard.WIFI6 | WifiStandard.WIFI6E:
            return MCS_TABLE_11AX
        case WifiStandard.WIFI5:
            return MCS_TABLE_11AC
        case WifiStandard.WIFI4 | WifiStandard.UNKNOWN:
            return MCS_TABLE_11N


def mcs_details(index: int, standard: WifiStandard) -> Optional[McsEntry]:
    table = mcs_table(standard)
    if 0 <= index < len(table):
        return table[index]
    return None


def shannon_capacity(bandwidth_mhz: float, snr_db: float) -> float:
    """
    Shannon-Hartley channel capacity.

    Parameters
    ----------
    bandwidth_mhz
        Channel bandwidth in MHz, must be positive.
    snr_db
        Signal-to-noise ratio in dB.

    Returns
    -------
    float
        Capacity in Mbps.

    Raises
    ------
    InvalidMeasurement
        If `bandwidth_mhz` is not positive.
    """
    if bandwidth_mhz <= 0:
        raise InvalidMeasurement(f"bandwidth must be positive, got {bandwidth_mhz} MHz")
    capacity_bps = bandwidth_mhz * 1e6 * math.log2(1 + db_to_linear(snr_db))
    return capacity_bps / 1e6


def estimate_mcs_index(
    snr_db: float,
    standard: WifiStandard,
    stability_margin_db: float = MCS_STABILITY_MARGIN,
) -> int:
    """
    Highest MCS index the SNR can hold after a stability margin.

    Walks the table in ascending SNR order and stops at the first entry the
    margined SNR fails; index 0 when nothing passes.
    """
    effective = snr_db - stability_margin_db
    best = 0
    for entry in mcs_table(standard):
        if effective < entry.min_snr_db:
            break
        best = entry.index
    return best


def _confidence(snr_margin_db: float) -> float:
    if snr_margin_db >= 10:
        return 0.95
    if snr_margin_db >= 5:
        return 0.85
    if snr_margin_db >= 3:
        return 0.75
    if snr_margin_db >= 0:
        return 0.6
    return 0.4


def predict(
    snr_db: float,
    standard: WifiStandard,
    channel_width_mhz: int,
    spatial_streams: int = 1,
    overhead: float = PROTOCOL_OVERHEAD,
    stability_margin_db: float = MCS_STABILITY_MARGIN,
) -> ThroughputPrediction:
    """
    Predict throughput for a link.

    Parameters
    ----------
    snr_db
        Signal-to-noise ratio in dB.
    standard
        Selects the MCS table.
    channel_width_mhz
        Channel width in MHz.
    spatial_streams
        Number of MIMO streams.
    overhead
        Fraction of PHY rate left for payload.
    stability_margin_db
        SNR held back when picking the MCS index.

    Returns
    -------
    ThroughputPrediction
        Shannon ceiling, MCS PHY rate, real-world estimate and confidence.
    """
    capacity = shannon_capacity(channel_width_mhz, snr_db)
    table = mcs_table(standard)
    index = estimate_mcs_index(snr_db, standard, stability_margin_db)
    entry = table[index] if index < len(table) else table[0]

    phy_rate = entry.data_rate_mbps_20mhz * WIDTH_MULTIPLIER.get(channel_width_mhz, 1.0) * max(spatial_streams, 1)
    return ThroughputPrediction(
        shannon_capacity_mbps=max(0.0, capacity),
        mcs_throughput_mbps=phy_rate,
        real_world_mbps=phy_rate * overhead,
        mcs_index=index,
        modulation_label=entry.label,
        confidence=_confidence(snr_db - entry.min_snr_db),
    )


def predict_from_rssi(
    rssi: float,
    standard: WifiStandard,
    channel_width_mhz: int,
    noise_floor_dbm: float = NOISE_FLOOR_DBM,
    spatial_streams: int = 1,
) -> ThroughputPrediction:
    return predict(rssi - noise_floor_dbm, standard, channel_width_mhz, spatial_streams)
