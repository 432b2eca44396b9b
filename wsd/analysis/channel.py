"""
Co-channel and adjacent-channel interference between networks seen in one scan.

2.4 GHz channels are 5 MHz apart but ~22 MHz wide, so overlap is a fixed table
keyed by channel separation. In the 5 and 6 GHz bands each network occupies
`channel ± width/10` channel numbers (channel numbers are 5 MHz apart), and
overlap is the intersection of the two spans relative to the target's span.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from wsd.analysis.config import MAX_EXPECTED_NETWORKS
from wsd.analysis.types import ChannelInfo, FrequencyBand, InterferenceResult, Measurement
from wsd.utils.log import get_logger
from wsd.utils.stats import clamp, db_to_linear

logger = get_logger(__name__)

OVERLAP_2_4_GHZ: dict[int, float] = {0: 1.0, 1: 0.75, 2: 0.5, 3: 0.25, 4: 0.1}

CHANNELS_2_4_GHZ: tuple[int, ...] = tuple(range(1, 12))
NON_OVERLAPPING_2_4_GHZ: tuple[int, ...] = (1, 6, 11)
CHANNELS_5_GHZ: tuple[int, ...] = (
    36, 40, 44, 48, 52, 56, 60, 64,
    100, 104, 108, 112, 116, 120, 124, 128, 132, 136, 140, 144,
    149, 153, 157, 161, 165,
)
CHANNELS_6_GHZ: tuple[int, ...] = tuple(range(1, 234, 4))

DEFAULT_QUERY_WIDTH_MHZ = 20


def band_for_frequency(frequency_mhz: int) -> FrequencyBand:
    return FrequencyBand.from_frequency(frequency_mhz)


def frequency_to_channel(frequency_mhz: int) -> Optional[int]:
    """
    Convert a centre frequency in MHz to a Wi-Fi channel number.

    Parameters
    ----------
    frequency_mhz : int
        Frequency in MHz.

    Returns
    -------
    Optional[int]
        Channel number, or None if outside the known bands.
    """
    if frequency_mhz == 2484:
        return 14
    if 2412 <= frequency_mhz <= 2472:
        return (frequency_mhz - 2412) // 5 + 1
    if 5170 <= frequency_mhz <= 5825:
        return (frequency_mhz - 5000) // 5
    if 5955 <= frequency_mhz <= 7115:
        return (frequency_mhz - 5950) // 5
    return None


def channel_to_frequency(channel: int, band: FrequencyBand) -> int:
    match band:
        case FrequencyBand.BAND_2_4_GHZ:
            return 2484 if channel == 14 else 2412 + (channel - 1) * 5
        case FrequencyBand.BAND_5_GHZ:
            return 5000 + channel * 5
        case FrequencyBand.BAND_6_GHZ:
            return 5950 + channel * 5


def band_channels(band: FrequencyBand) -> tuple[int, ...]:
    match band:
        case FrequencyBand.BAND_2_4_GHZ:
            return CHANNELS_2_4_GHZ
        case FrequencyBand.BAND_5_GHZ:
            return CHANNELS_5_GHZ
        case FrequencyBand.BAND_6_GHZ:
            return CHANNELS_6_GHZ


def channel_overlap(
    target_channel: int,
    target_width_mhz: int,
    other_channel: int,
    other_width_mhz: int,
    band: FrequencyBand,
) -> float:
    """
    Fraction of the target's spectrum that the other network occupies.

    Parameters
    ----------
    target_channel, target_width_mhz
        Channel number and width of the network being interfered with.
    other_channel, other_width_mhz
        Channel number and width of the potential interferer.
    band
        Band whose overlap rule applies.

    Returns
    -------
    float
        Overlap in [0, 1]; 0 when the spans do not intersect.
    """
    if band is FrequencyBand.BAND_2_4_GHZ:
        return OVERLAP_2_4_GHZ.get(abs(target_channel - other_channel), 0.0)

    target_start = target_channel - target_width_mhz // 10
    target_end = target_channel + target_width_mhz // 10
    other_start = other_channel - other_width_mhz // 10
    other_end = other_channel + other_width_mhz // 10

    overlap_start = max(target_start, other_start)
    overlap_end = min(target_end, other_end)
    span = target_end - target_start
    if overlap_end <= overlap_start or span <= 0:
        return 0.0
    return (overlap_end - overlap_start) / span


def _sigmoid(x: float) -> float:
    """Zero-centred logistic mapping [0, inf) onto [0, 1)."""
    return 2.0 / (1.0 + math.exp(-x)) - 1.0


def _neighbors_of(target: Measurement, networks: Iterable[Measurement]) -> list[Measurement]:
    return [
        n for n in networks
        if not (target.bssid and n.bssid == target.bssid) and n is not target
    ]


def interference(target: Measurement, neighbors: Iterable[Measurement]) -> float:
    """
    Interference score of `target` caused by `neighbors`.

    Each overlapping neighbor contributes overlap × (linear power ratio to the
    target); the sum is squashed through a zero-centred sigmoid. Neighbors in a
    different band, or sharing the target's bssid, are ignored.

    Returns
    -------
    float
        Score in [0, 1); exactly 0.0 with no neighbors.
    """
    band = target.band
    target_power = db_to_linear(target.rssi)
    total = 0.0
    for n in _neighbors_of(target, neighbors):
        if n.band is not band:
            continue
        overlap = channel_overlap(
            target.channel, target.channel_width_mhz,
            n.channel, n.channel_width_mhz,
            band,
        )
        if overlap > 0:
            total += overlap * (db_to_linear(n.rssi) / target_power)
    if total == 0.0:
        return 0.0
    return clamp(_sigmoid(total), 0.0, 1.0)


def _overlaps_channel(channel: int, network: Measurement, band: FrequencyBand) -> bool:
    return channel_overlap(
        channel, DEFAULT_QUERY_WIDTH_MHZ,
        network.channel, network.channel_width_mhz,
        band,
    ) > 0


def channel_utilization(
    channel: int,
    networks: Iterable[Measurement],
    band: Optional[FrequencyBand] = None,
    max_expected_networks: int = MAX_EXPECTED_NETWORKS,
) -> float:
    """
    Share of the "max expected co-channel networks" overlapping `channel`.

    When `band` is None each network is judged by the overlap rule of its own
    band; otherwise only networks in `band` count.
    """
    count = 0
    for n in networks:
        if band is not None and n.band is not band:
            continue
        if _overlaps_channel(channel, n, band or n.band):
            count += 1
    if count == 0:
        return 0.0
    return clamp(count / max_expected_networks, 0.0, 1.0)


def interference_result(
    target: Measurement,
    neighbors: Sequence[Measurement],
    max_expected_networks: int = MAX_EXPECTED_NETWORKS,
) -> InterferenceResult:
    """
    Interference score plus utilization of the target's channel, computed
    over the target and its neighbors.
    """
    return InterferenceResult(
        score=interference(target, neighbors),
        channel_utilization=channel_utilization(
            target.channel,
            [target, *_neighbors_of(target, neighbors)],
            band=target.band,
            max_expected_networks=max_expected_networks,
        ),
    )


def analyze_all_channels(
    networks: Sequence[Measurement],
    band: FrequencyBand,
    max_expected_networks: int = MAX_EXPECTED_NETWORKS,
) -> list[ChannelInfo]:
    """
    Occupancy summary for every standard channel of `band`.
    """
    in_band = [n for n in networks if n.band is band]
    infos: list[ChannelInfo] = []
    for ch in band_channels(band):
        on_channel = [n for n in in_band if _overlaps_channel(ch, n, band)]
        avg_rssi = int(sum(n.rssi for n in on_channel) / len(on_channel)) if on_channel else -100
        infos.append(ChannelInfo(
            channel=ch,
            frequency_mhz=channel_to_frequency(ch, band),
            band=band,
            network_count=len(on_channel),
            utilization=channel_utilization(ch, in_band, band, max_expected_networks),
            average_rssi=avg_rssi,
        ))
    return infos


def find_least_congested_channel(networks: Sequence[Measurement], band: FrequencyBand) -> int:
    """
    Channel of `band` with the fewest overlapping networks.

    On 2.4 GHz only the non-overlapping channels 1/6/11 are candidates. Ties
    go to the first candidate in channel order.
    """
    infos = analyze_all_channels(networks, band)
    if band is FrequencyBand.BAND_2_4_GHZ:
        candidates = [c for c in infos if c.channel in NON_OVERLAPPING_2_4_GHZ]
    else:
        candidates = infos
    best = min(candidates, key=lambda c: c.network_count)
    logger.debug("Least congested %s channel: %d (%d networks)", band.value, best.channel, best.network_count)
    return best.channel
