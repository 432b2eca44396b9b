"""
Heuristic real-world throughput from link speed, quality and interference.
"""

from wsd.analysis.config import PROTOCOL_OVERHEAD
from wsd.analysis.types import FrequencyBand, Measurement, WifiStandard
from wsd.utils.stats import clamp

# Typical single-stream PHY rates, Mbps
BASE_SPEED_MBPS: dict[WifiStandard, int] = {
    WifiStandard.WIFI4:   150,
    WifiStandard.WIFI5:   433,
    WifiStandard.WIFI6:   600,
    WifiStandard.WIFI6E:  600,
    WifiStandard.UNKNOWN: 72,
}

WIDTH_MULTIPLIER: dict[int, float] = {20: 1.0, 40: 2.0, 80: 4.0, 160: 8.0, 320: 16.0}

BAND_MULTIPLIER: dict[FrequencyBand, float] = {
    FrequencyBand.BAND_2_4_GHZ: 0.85,
    FrequencyBand.BAND_5_GHZ:   1.0,
    FrequencyBand.BAND_6_GHZ:   1.1,
}


def estimate(
    link_speed_mbps: float,
    quality: float,
    interference: float,
    overhead: float = PROTOCOL_OVERHEAD,
) -> float:
    """
    Real-world throughput in Mbps.

    Parameters
    ----------
    link_speed_mbps
        Negotiated or theoretical PHY rate.
    quality
        Signal quality in [0, 1].
    interference
        Interference score in [0, 1].
    overhead
        Fraction of PHY rate left after protocol overhead and retransmissions.

    Returns
    -------
    float
        link_speed × quality × (1 - interference) × overhead, never negative.
    """
    q = clamp(quality, 0.0, 1.0)
    i = clamp(interference, 0.0, 1.0)
    return max(0.0, link_speed_mbps * q * (1.0 - i) * overhead)


def theoretical_link_speed(measurement: Measurement) -> int:
    """
    Baseline PHY rate for the standard, scaled by channel width and band.
    """
    base = BASE_SPEED_MBPS[measurement.standard]
    width = WIDTH_MULTIPLIER.get(measurement.channel_width_mhz, 1.0)
    band = BAND_MULTIPLIER[measurement.band]
    return int(base * width * band)


def estimate_for_network(
    measurement: Measurement,
    quality: float,
    interference: float,
    overhead: float = PROTOCOL_OVERHEAD,
) -> float:
    return estimate(theoretical_link_speed(measurement), quality, interference, overhead)
