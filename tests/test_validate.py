import json

import pytest

from wsd.analysis.diagnostics import analyze
from wsd.analysis.errors import InvalidMeasurement
from wsd.analysis.types import Environment, WifiStandard
from wsd.utils.validate import parse_history, parse_measurement, report_json, to_report


def make_record(**kwargs):
    record = {
        "rssi": -55,
        "frequency_mhz": 5180,
        "channel": 36,
        "channel_width_mhz": 80,
        "standard": "802.11ax",
        "bssid": "AA:11:22:33:44:01",
        "ssid": "HOME-5G",
    }
    record.update(kwargs)
    return record


def test_parse_measurement():
    m = parse_measurement(make_record())
    assert m.rssi == -55
    assert m.standard is WifiStandard.WIFI6
    assert m.ssid == "HOME-5G"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("WIFI6", WifiStandard.WIFI6),
        ("wifi_5", WifiStandard.WIFI5),
        ("802.11ac", WifiStandard.WIFI5),
        ("802.11n", WifiStandard.WIFI4),
        ("802.11ax-6GHz", WifiStandard.WIFI6E),
        ("token ring", WifiStandard.UNKNOWN),
    ],
)
def test_standard_aliases(raw, expected):
    assert parse_measurement(make_record(standard=raw)).standard is expected


def test_optional_fields_default():
    m = parse_measurement({"rssi": -60, "frequency_mhz": 2437, "channel": 6, "ssid": None})
    assert m.channel_width_mhz == 20
    assert m.standard is WifiStandard.UNKNOWN
    assert m.ssid == ""


@pytest.mark.parametrize("rssi, expected", [(12, 0), (-130, -100), (-60.7, -60)])
def test_rssi_is_clamped(rssi, expected):
    assert parse_measurement(make_record(rssi=rssi)).rssi == expected


@pytest.mark.parametrize(
    "overrides",
    [{"frequency_mhz": 0}, {"channel_width_mhz": -20}, {"rssi": None}, {"rssi": "loud"}],
)
def test_invalid_records_raise(overrides):
    with pytest.raises(InvalidMeasurement):
        parse_measurement(make_record(**overrides))


def test_missing_field_raises():
    record = make_record()
    del record["channel"]
    with pytest.raises(InvalidMeasurement):
        parse_measurement(record)


def test_parse_history():
    assert parse_history([-50, 5, -150.0, -61.9]) == (-50, 0, -100, -61)


def test_report_serializes_enums_as_values():
    diag = analyze(parse_measurement(make_record()), [-50, -52, -55, -53, -55, -58, -55],
                   Environment.RESIDENTIAL)
    report = to_report(diag)
    assert report.overall_level == "good"
    assert report.link_margin.stability == "unstable"
    assert report.signal_trend.direction == "degrading"

    payload = json.loads(report_json(diag))
    assert payload["measurement"]["standard"] == "802.11ax"
    assert payload["overall_level"] == "good"
    assert payload["distance_estimate"]["model"] == "ITU-R P.1238"
    assert payload["recommendations"] == list(diag.recommendations)
    assert payload["quality_prediction"]["warning"] is None
