import math

import pytest

from wsd.analysis.channel import (
    analyze_all_channels,
    band_for_frequency,
    channel_overlap,
    channel_to_frequency,
    channel_utilization,
    find_least_congested_channel,
    frequency_to_channel,
    interference,
    interference_result,
)
from wsd.analysis.types import FrequencyBand


@pytest.mark.parametrize(
    "freq, channel",
    [(2412, 1), (2437, 6), (2462, 11), (2484, 14), (5180, 36), (5745, 149), (5955, 1), (1000, None)],
)
def test_frequency_to_channel(freq, channel):
    assert frequency_to_channel(freq) == channel


def test_channel_to_frequency():
    assert channel_to_frequency(6, FrequencyBand.BAND_2_4_GHZ) == 2437
    assert channel_to_frequency(14, FrequencyBand.BAND_2_4_GHZ) == 2484
    assert channel_to_frequency(36, FrequencyBand.BAND_5_GHZ) == 5180
    assert channel_to_frequency(5, FrequencyBand.BAND_6_GHZ) == 5975


@pytest.mark.parametrize(
    "other, expected",
    [(1, 1.0), (2, 0.75), (3, 0.5), (4, 0.25), (5, 0.1), (6, 0.0), (11, 0.0)],
)
def test_2_4ghz_overlap_by_separation(other, expected):
    assert channel_overlap(1, 20, other, 20, FrequencyBand.BAND_2_4_GHZ) == expected


def test_5ghz_overlap_is_relative_to_target_span():
    band = FrequencyBand.BAND_5_GHZ
    # 36/20 spans 34..38, 40/80 spans 32..48
    assert channel_overlap(36, 20, 40, 80, band) == 1.0
    # 36/80 spans 28..44, 36/20 covers a quarter of it
    assert channel_overlap(36, 80, 36, 20, band) == 0.25
    # 38 is a shared edge, not an overlap
    assert channel_overlap(36, 20, 40, 20, band) == 0.0
    assert channel_overlap(36, 20, 149, 80, band) == 0.0


def test_no_neighbors_means_no_interference(make_measurement):
    assert interference(make_measurement(), []) == 0.0


def test_equal_power_co_channel_neighbor(make_24ghz):
    target = make_24ghz(6, rssi=-60)
    neighbor = make_24ghz(6, rssi=-60, bssid="other")
    assert interference(target, [neighbor]) == pytest.approx(math.tanh(0.5))


def test_adjacent_channel_neighbor_is_weighted_by_overlap(make_24ghz):
    target = make_24ghz(1, rssi=-60)
    neighbor = make_24ghz(2, rssi=-60)
    assert interference(target, [neighbor]) == pytest.approx(math.tanh(0.375))


def test_non_overlapping_neighbor_is_ignored(make_24ghz):
    assert interference(make_24ghz(1), [make_24ghz(6), make_24ghz(11)]) == 0.0


def test_strong_neighbor_saturates_below_one(make_24ghz):
    target = make_24ghz(6, rssi=-80)
    neighbor = make_24ghz(6, rssi=-40, bssid="loud")
    score = interference(target, [neighbor])
    assert 0.99 < score <= 1.0


def test_other_band_and_same_bssid_are_ignored(make_measurement, make_24ghz):
    target = make_measurement()
    same_ap = make_measurement(rssi=-40)
    other_band = make_24ghz(6, rssi=-30)
    assert interference(target, [target, same_ap, other_band]) == 0.0


def test_interference_score_is_bounded(make_24ghz):
    target = make_24ghz(6, rssi=-90)
    neighbors = [make_24ghz(c, rssi=-20, bssid=f"n{c}") for c in range(1, 12)]
    assert 0.0 <= interference(target, neighbors) <= 1.0


def test_channel_utilization(make_24ghz):
    networks = [make_24ghz(6, bssid=f"n{i}") for i in range(3)]
    assert channel_utilization(6, networks) == pytest.approx(0.3)
    assert channel_utilization(6, []) == 0.0

    crowded = [make_24ghz(6, bssid=f"n{i}") for i in range(12)]
    assert channel_utilization(6, crowded) == 1.0


def test_interference_result_counts_target_in_utilization(make_24ghz):
    target = make_24ghz(6, rssi=-60, bssid="me")
    neighbors = [make_24ghz(6, rssi=-60, bssid="a"), make_24ghz(6, rssi=-60, bssid="b")]
    result = interference_result(target, neighbors)
    assert result.channel_utilization == pytest.approx(0.3)
    assert result.score == pytest.approx(math.tanh(1.0))


def test_analyze_all_channels_2_4ghz(make_24ghz):
    networks = [make_24ghz(6, rssi=-50, bssid="a"), make_24ghz(6, rssi=-61, bssid="b")]
    infos = analyze_all_channels(networks, FrequencyBand.BAND_2_4_GHZ)
    assert [i.channel for i in infos] == list(range(1, 12))

    ch6 = infos[5]
    assert ch6.frequency_mhz == 2437
    assert ch6.network_count == 2
    assert ch6.average_rssi == -55
    assert ch6.utilization == pytest.approx(0.2)
    assert ch6.is_recommended is False

    ch11 = infos[10]
    assert ch11.network_count == 0
    assert ch11.average_rssi == -100
    assert ch11.is_recommended is True


def test_least_congested_2_4ghz_uses_non_overlapping_channels(make_24ghz):
    networks = [make_24ghz(1, bssid="a"), make_24ghz(6, bssid="b")]
    assert find_least_congested_channel(networks, FrequencyBand.BAND_2_4_GHZ) == 11
    assert find_least_congested_channel([], FrequencyBand.BAND_2_4_GHZ) == 1


def test_least_congested_5ghz(make_measurement):
    networks = [make_measurement(channel=36, channel_width_mhz=20)]
    assert find_least_congested_channel(networks, FrequencyBand.BAND_5_GHZ) == 40


@pytest.mark.parametrize(
    "freq, band",
    [(2437, FrequencyBand.BAND_2_4_GHZ), (5180, FrequencyBand.BAND_5_GHZ),
     (5885, FrequencyBand.BAND_5_GHZ), (5975, FrequencyBand.BAND_6_GHZ)],
)
def test_band_for_frequency(freq, band):
    assert band_for_frequency(freq) is band


def test_crowded_channel_is_congested(make_24ghz):
    networks = [make_24ghz(6, bssid=f"n{i}") for i in range(4)]
    ch6 = analyze_all_channels(networks, FrequencyBand.BAND_2_4_GHZ)[5]
    assert ch6.network_count == 4
    assert ch6.is_congested is True
