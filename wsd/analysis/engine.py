"""
Scan-level metrics: quality, interference and throughput for every network in
a scan, and picking the best one to join.
"""

from __future__ import annotations

from typing import Optional, Sequence

from wsd.analysis import channel, quality, throughput
from wsd.analysis.config import NOISE_FLOOR_DBM, PROTOCOL_OVERHEAD
from wsd.analysis.types import Measurement, SignalMetrics
from wsd.utils.stats import clamp

QUALITY_WEIGHT      = 0.4
INTERFERENCE_WEIGHT = 0.3
THROUGHPUT_WEIGHT   = 0.3
THROUGHPUT_SCALE_MBPS = 1000.0


def analyze_network(
    target: Measurement,
    all_networks: Sequence[Measurement],
    noise_floor_dbm: float = NOISE_FLOOR_DBM,
    overhead: float = PROTOCOL_OVERHEAD,
) -> SignalMetrics:
    """
    Metrics for `target` against every other network in the same scan.
    """
    q = quality.quality(target.rssi)
    score = channel.interference(target, all_networks)
    link_speed = throughput.theoretical_link_speed(target)
    return SignalMetrics(
        rssi=target.rssi,
        signal_quality=q,
        link_speed_mbps=link_speed,
        interference_score=score,
        estimated_throughput_mbps=throughput.estimate(link_speed, q, score, overhead),
        snr_db=quality.snr(target.rssi, noise_floor_dbm),
        channel_utilization=channel.channel_utilization(target.channel, all_networks),
    )


def analyze_all(networks: Sequence[Measurement]) -> dict[str, SignalMetrics]:
    return {n.bssid: analyze_network(n, networks) for n in networks}


def network_score(metrics: SignalMetrics) -> float:
    normalized = clamp(metrics.estimated_throughput_mbps / THROUGHPUT_SCALE_MBPS, 0.0, 1.0)
    return (
        metrics.signal_quality * QUALITY_WEIGHT
        + (1 - metrics.interference_score) * INTERFERENCE_WEIGHT
        + normalized * THROUGHPUT_WEIGHT
    )


def find_best_network(networks: Sequence[Measurement]) -> Optional[Measurement]:
    """
    Network with the highest combined quality/interference/throughput score,
    None for an empty scan. Ties go to the first network in scan order.
    """
    if not networks:
        return None
    return max(networks, key=lambda n: network_score(analyze_network(n, networks)))
