import pytest

from wsd.utils.stats import clamp, db_to_linear, mean, ols_slope, sample_std, sample_variance


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-5, 0, 10) == 0
    assert clamp(15, 0, 10) == 10


def test_mean():
    assert mean([]) == 0.0
    assert mean([-50, -60]) == -55.0


def test_sample_variance_uses_bessel_correction():
    assert sample_variance([]) == 0.0
    assert sample_variance([-60]) == 0.0
    assert sample_variance([1, 2, 3, 4]) == pytest.approx(5 / 3)
    assert sample_std([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx((32 / 7) ** 0.5)


def test_ols_slope():
    assert ols_slope([]) == 0.0
    assert ols_slope([3]) == 0.0
    assert ols_slope([0, 2, 4, 6]) == pytest.approx(2.0)
    assert ols_slope([-60, -60, -60]) == 0.0


def test_db_to_linear():
    assert db_to_linear(0) == 1.0
    assert db_to_linear(10) == pytest.approx(10.0)
    assert db_to_linear(-30) == pytest.approx(0.001)
