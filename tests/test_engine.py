import pytest

from wsd.analysis.engine import analyze_all, analyze_network, find_best_network
from wsd.analysis.types import InterferenceLevel, MeasurementSet, QualityLevel, WifiStandard


def test_single_network_scan(make_measurement):
    m = make_measurement()
    metrics = analyze_network(m, [m])
    assert metrics.rssi == -55
    assert metrics.interference_score == 0.0
    assert metrics.link_speed_mbps == 2400
    assert metrics.estimated_throughput_mbps == pytest.approx(2400 * 0.825 * 0.65)
    assert metrics.snr_db == 40.0
    # the network itself occupies its channel
    assert metrics.channel_utilization == pytest.approx(0.1)
    assert metrics.quality_level is QualityLevel.EXCELLENT
    assert metrics.interference_level is InterferenceLevel.NONE


def test_crowded_channel_raises_interference(make_24ghz):
    networks = [make_24ghz(6, rssi=-50, bssid=f"n{i}") for i in range(4)]
    metrics = analyze_network(networks[0], networks)
    assert metrics.interference_score > 0.9
    assert metrics.interference_level is InterferenceLevel.SEVERE
    assert metrics.channel_utilization == pytest.approx(0.4)


def test_analyze_all_is_keyed_by_bssid(make_measurement, make_24ghz):
    networks = [make_measurement(), make_24ghz(1), make_24ghz(6)]
    result = analyze_all(networks)
    assert set(result) == {n.bssid for n in networks}


def test_find_best_network(make_measurement, make_24ghz):
    strong = make_measurement(rssi=-50, standard=WifiStandard.WIFI6)
    weak = make_24ghz(6, rssi=-80)
    assert find_best_network([weak, strong]) is strong
    assert find_best_network([]) is None


def test_measurement_set_scan(make_measurement, make_24ghz):
    scan = MeasurementSet(target=make_measurement(), neighbors=(make_24ghz(1), make_24ghz(6)))
    assert scan.all_networks[0] is scan.target
    result = analyze_all(scan.all_networks)
    assert result[scan.target.bssid].interference_score == 0.0
