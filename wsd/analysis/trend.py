"""
Trend analysis and short-horizon forecasting over an RSSI history.

The history is a plain oldest-first sequence supplied by the caller, assumed
to hold one sample per second. It is only read, never mutated or retained.
"""

from __future__ import annotations

from typing import Optional, Sequence

from wsd.analysis.config import HIGH_VARIANCE_DB2, SECONDS_AHEAD, WINDOW_SIZE
from wsd.analysis.quality import quality
from wsd.analysis.types import QualityPrediction, SignalTrend, TrendDirection
from wsd.utils.stats import clamp, mean, ols_slope, sample_std, sample_variance

MIN_SAMPLES_FOR_PREDICTION = 5
FULL_CONFIDENCE_SAMPLES = 50
DEFAULT_RSSI = -70

IMPROVING_THRESHOLD = 0.5
DEGRADING_THRESHOLD = -0.5
RAPID_CHANGE_DB = 1.5
MAX_PREDICTED_CHANGE_DB = 10.0
LOW_VARIANCE_DB2 = 4.0

WARN_INSUFFICIENT = "Insufficient data for prediction"
WARN_RAPID_DEGRADATION = "Signal is degrading rapidly"
WARN_QUALITY_DROP = "Signal quality may become poor soon"
WARN_UNSTABLE = "Signal is unstable"
WARN_IMPROVING = "Signal is improving"

# (max std dev dB, score), ascending
STABILITY_STEPS: tuple[tuple[float, float], ...] = (
    (1.0, 1.0),
    (2.0, 0.9),
    (3.0, 0.7),
    (4.0, 0.5),
    (5.0, 0.3),
)


def _direction(rate: float) -> TrendDirection:
    if rate >= IMPROVING_THRESHOLD:
        return TrendDirection.IMPROVING
    if rate <= DEGRADING_THRESHOLD:
        return TrendDirection.DEGRADING
    return TrendDirection.STABLE


def trend(history: Sequence[int], window_size: int = WINDOW_SIZE) -> SignalTrend:
    """
    Direction, slope, mean and variance of the most recent samples.

    Parameters
    ----------
    history
        RSSI samples in dBm, oldest first.
    window_size
        Number of most recent samples to analyze.

    Returns
    -------
    SignalTrend
        STABLE with all-zero statistics for an empty history.
    """
    if not history:
        return SignalTrend(TrendDirection.STABLE, 0.0, 0.0, 0.0)

    recent = list(history)[-max(window_size, 1):]
    rate = ols_slope(recent)
    return SignalTrend(
        direction=_direction(rate),
        rate_of_change_db_per_sample=rate,
        moving_average=mean(recent),
        variance=sample_variance(recent),
    )


def _warning(t: SignalTrend, predicted_quality: float, high_variance_db2: float) -> Optional[str]:
    rate = t.rate_of_change_db_per_sample
    if t.direction is TrendDirection.DEGRADING and rate < -RAPID_CHANGE_DB:
        return WARN_RAPID_DEGRADATION
    if t.direction is TrendDirection.DEGRADING and predicted_quality < 0.3:
        return WARN_QUALITY_DROP
    if t.variance > high_variance_db2:
        return WARN_UNSTABLE
    if t.direction is TrendDirection.IMPROVING and rate > RAPID_CHANGE_DB:
        return WARN_IMPROVING
    return None


def predict_future_quality(
    history: Sequence[int],
    seconds_ahead: int = SECONDS_AHEAD,
    window_size: int = WINDOW_SIZE,
    high_variance_db2: float = HIGH_VARIANCE_DB2,
) -> QualityPrediction:
    """
    Extrapolate the RSSI trend `seconds_ahead` samples into the future.

    With fewer than five samples no extrapolation is attempted: the last
    sample, clamped to [-100, -20] dBm, is returned with confidence 0.3 and
    an insufficient-data warning.
    """
    if len(history) < MIN_SAMPLES_FOR_PREDICTION:
        current = int(clamp(history[-1] if history else DEFAULT_RSSI, -100, -20))
        return QualityPrediction(
            predicted_rssi=current,
            predicted_quality=quality(current),
            confidence=0.3,
            warning=WARN_INSUFFICIENT,
        )

    t = trend(history, window_size)
    change = clamp(t.rate_of_change_db_per_sample * seconds_ahead,
                   -MAX_PREDICTED_CHANGE_DB, MAX_PREDICTED_CHANGE_DB)
    predicted_rssi = int(clamp(int(t.moving_average + change), -100, -20))
    predicted_quality = quality(predicted_rssi)

    sample_factor = clamp(len(history) / FULL_CONFIDENCE_SAMPLES, 0.3, 1.0)
    if t.variance < LOW_VARIANCE_DB2:
        variance_factor = 0.9
    elif t.variance < high_variance_db2:
        variance_factor = 0.7
    else:
        variance_factor = 0.5

    return QualityPrediction(
        predicted_rssi=predicted_rssi,
        predicted_quality=predicted_quality,
        confidence=clamp(sample_factor * variance_factor, 0.3, 0.95),
        warning=_warning(t, predicted_quality, high_variance_db2),
    )


def stability_score(history: Sequence[int], window_size: int = WINDOW_SIZE) -> float:
    """
    Stability in [0, 1] from the standard deviation of recent samples.
    Histories too short to judge score a neutral 0.5.
    """
    if len(history) < MIN_SAMPLES_FOR_PREDICTION:
        return 0.5
    std = sample_std(list(history)[-max(window_size, 1):])
    for max_std, score in STABILITY_STEPS:
        if std <= max_std:
            return score
    return 0.2


def is_signal_stable(
    history: Sequence[int],
    max_variance: float = LOW_VARIANCE_DB2,
    window_size: int = WINDOW_SIZE,
) -> bool:
    if len(history) < MIN_SAMPLES_FOR_PREDICTION:
        return True
    return sample_variance(list(history)[-max(window_size, 1):]) < max_variance
