"""
Link budget margin and stability classification.

Link margin is RSSI minus the receiver sensitivity of the MCS in use: how many
dB the signal can lose before the link drops at that rate.
"""

from __future__ import annotations

from typing import Optional

from wsd.analysis.config import FADE_MARGIN_DB
from wsd.analysis.types import LinkMarginResult, StabilityLevel, WifiStandard
from wsd.utils.log import get_logger
from wsd.utils.stats import clamp

logger = get_logger(__name__)

EXCELLENT_MARGIN_DB = 20.0
GOOD_MARGIN_DB      = 12.0
MARGINAL_MARGIN_DB  = 6.0

# Typical 20 MHz receiver sensitivity (dBm) by MCS index
_SENSITIVITY_11AX: tuple[int, ...] = (-82, -79, -77, -74, -70, -66, -65, -64, -59, -57, -54, -52)

SENSITIVITY_TABLES: dict[WifiStandard, tuple[int, ...]] = {
    WifiStandard.WIFI6:  _SENSITIVITY_11AX,
    WifiStandard.WIFI6E: _SENSITIVITY_11AX,
    WifiStandard.WIFI5:  _SENSITIVITY_11AX[:10],
    WifiStandard.WIFI4:  _SENSITIVITY_11AX[:8],
}

HEADROOM_LABELS: tuple[tuple[float, str], ...] = (
    (25.0, "plenty"),
    (15.0, "good"),
    (8.0,  "adequate"),
    (3.0,  "limited"),
)

REC_GOOD_LOW_FADE = "Consider moving closer to the router for better stability"
REC_MARGINAL = "Connection may experience occasional drops. Move closer to the router or reduce obstacles"
REC_UNSTABLE = "Connection is unstable. Significantly reduce distance to the router or check for interference"


def _generic_sensitivity(mcs_index: int) -> int:
    """Conservative sensitivity keyed on MCS index alone."""
    if mcs_index >= 10:
        return -54
    if mcs_index >= 8:
        return -59
    if mcs_index >= 5:
        return -66
    if mcs_index >= 3:
        return -74
    return -82


def receiver_sensitivity(standard: WifiStandard, mcs_index: int) -> int:
    """
    Receiver sensitivity in dBm for a standard and MCS index.

    Falls back to the nearest MCS index of the same standard when the index is
    outside its table, and to a generic table when the standard has none.
    """
    table = SENSITIVITY_TABLES.get(standard)
    if table is None:
        logger.debug("No sensitivity table for %s, using generic", standard.name)
        return _generic_sensitivity(mcs_index)
    if 0 <= mcs_index < len(table):
        return table[mcs_index]
    nearest = min(range(len(table)), key=lambda i: abs(i - mcs_index))
    logger.debug("MCS %d not in %s table, using nearest MCS %d", mcs_index, standard.name, nearest)
    return table[nearest]


def classify_stability(margin_db: float) -> StabilityLevel:
    if margin_db >= EXCELLENT_MARGIN_DB:
        return StabilityLevel.EXCELLENT
    if margin_db >= GOOD_MARGIN_DB:
        return StabilityLevel.GOOD
    if margin_db >= MARGINAL_MARGIN_DB:
        return StabilityLevel.MARGINAL
    return StabilityLevel.UNSTABLE


def headroom_label(margin_db: float) -> str:
    for threshold, label in HEADROOM_LABELS:
        if margin_db >= threshold:
            return label
    return "none"


def _recommendation(stability: StabilityLevel, fade_margin_db: float) -> Optional[str]:
    match stability:
        case StabilityLevel.EXCELLENT:
            return None
        case StabilityLevel.GOOD:
            return None if fade_margin_db >= 0 else REC_GOOD_LOW_FADE
        case StabilityLevel.MARGINAL:
            return REC_MARGINAL
        case StabilityLevel.UNSTABLE:
            return REC_UNSTABLE


def analyze(
    rssi: float,
    standard: WifiStandard,
    mcs_index: int,
    fade_margin_db: float = FADE_MARGIN_DB,
) -> LinkMarginResult:
    """
    Link margin for the current connection.

    Parameters
    ----------
    rssi
        Received signal strength in dBm.
    standard
        Wi-Fi standard of the link.
    mcs_index
        MCS index in use (estimated or reported).
    fade_margin_db
        Recommended buffer for transient dips.

    Returns
    -------
    LinkMarginResult
        Margin, stability class, fade margin, headroom label and an optional
        recommendation.
    """
    margin = float(rssi - receiver_sensitivity(standard, mcs_index))
    stability = classify_stability(margin)
    fade = margin - fade_margin_db
    return LinkMarginResult(
        margin_db=margin,
        stability=stability,
        fade_margin_db=fade,
        headroom_label=headroom_label(margin),
        recommendation=_recommendation(stability, fade),
    )


def estimate_max_range(
    current_rssi: float,
    current_distance_m: float,
    standard: WifiStandard,
    mcs_index: int,
) -> float:
    """
    Distance at which the margin would reach zero, by inverse-square
    extrapolation (20 dB per decade of distance), clamped to [1, 1000] m.
    """
    current_margin = current_rssi - receiver_sensitivity(standard, mcs_index)
    # cap the exponent so very large margins clamp instead of overflowing
    ratio = 10 ** min(current_margin / 20.0, 10.0)
    return clamp(current_distance_m * ratio, 1.0, 1000.0)
