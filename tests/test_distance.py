import math

import pytest

from wsd.analysis import distance
from wsd.analysis.config import PATH_LOSS_EXPONENTS, recommended_environment
from wsd.analysis.errors import InvalidMeasurement
from wsd.analysis.types import Environment


def test_estimate_inverts_path_loss_model():
    est = distance.estimate(-30, 5000, Environment.OFFICE)
    expected = 10 ** ((50 - 20 * math.log10(5000) + 28) / 3.0)
    assert est.estimated_meters == pytest.approx(expected)
    assert est.min_meters == pytest.approx(expected * 0.7)
    assert est.max_meters == pytest.approx(expected * 1.5)
    assert est.confidence == pytest.approx(0.9 * 1.0 * 0.8)
    assert est.model == "ITU-R P.1238"


def test_short_path_clamps_to_minimum():
    est = distance.estimate(-10, 5000, Environment.OPEN_SPACE)
    assert est.estimated_meters == 0.5
    assert est.min_meters == 0.5
    assert est.max_meters == pytest.approx(0.75)
    assert est.confidence == pytest.approx(0.9 * 0.7 * 0.9)


def test_weak_signal_clamps_to_maximum():
    est = distance.estimate(-100, 2437, Environment.RESIDENTIAL)
    assert est.estimated_meters == 100.0
    assert est.max_meters == pytest.approx(150.0)
    assert est.confidence == pytest.approx(0.3 * 0.5 * 0.85)


@pytest.mark.parametrize("env", list(Environment))
@pytest.mark.parametrize("freq", [2412, 2437, 5180, 5745, 5975, 7115])
def test_estimate_always_within_bounds(env, freq):
    for rssi in range(-100, 1, 5):
        est = distance.estimate(rssi, freq, env)
        assert 0.5 <= est.estimated_meters <= 100.0
        assert est.min_meters <= est.estimated_meters <= est.max_meters
        assert 0.0 <= est.confidence <= 1.0


@pytest.mark.parametrize("freq", [0, -2437])
def test_non_positive_frequency_is_rejected(freq):
    with pytest.raises(InvalidMeasurement):
        distance.estimate(-60, freq)


def test_non_positive_exponent_is_rejected():
    with pytest.raises(InvalidMeasurement):
        distance.estimate(-60, 2437, Environment.OFFICE,
                          path_loss_exponents={Environment.OFFICE: 0.0})


def test_floor_penetration_shortens_estimate():
    open_floor = distance.estimate(-40, 5180, Environment.OFFICE)
    two_floors = distance.estimate(-40, 5180, Environment.OFFICE, floor_penetration_loss_db=15.0)
    assert two_floors.estimated_meters < open_floor.estimated_meters


def test_exponent_overrides_fall_back_per_environment():
    overrides = {Environment.OFFICE: 4.0}
    assert distance.path_loss_exponent(Environment.OFFICE, overrides) == 4.0
    assert distance.path_loss_exponent(Environment.COMMERCIAL, overrides) == PATH_LOSS_EXPONENTS[Environment.COMMERCIAL]
    assert distance.path_loss_exponent(Environment.RESIDENTIAL) == 2.8


def test_estimate_for_frequency_uses_band_environment():
    assert recommended_environment(2437) is Environment.RESIDENTIAL
    assert recommended_environment(5180) is Environment.OFFICE
    assert distance.estimate_for_frequency(-60, 5180) == distance.estimate(-60, 5180, Environment.OFFICE)
