"""
Compose the individual analyzers into one network health assessment.

Pipeline, per call:
- distance estimation (ITU-R P.1238)
- SNR against the configured noise floor
- Shannon / MCS throughput prediction (single stream unless configured)
- link margin for the predicted MCS
- trend and short-horizon forecast over the RSSI history
- weighted overall score, level and recommendations
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from wsd.analysis import channel, distance, margin, mcs, quality, trend
from wsd.analysis.config import HIGH_VARIANCE_DB2, DiagnosticsConfig
from wsd.analysis.types import (
    DiagnosticLevel,
    DistanceEstimate,
    Environment,
    FrequencyBand,
    InterferenceResult,
    LinkMarginResult,
    Measurement,
    MeasurementSet,
    NetworkDiagnostics,
    SignalTrend,
    StabilityLevel,
    ThroughputPrediction,
    TrendDirection,
)
from wsd.utils.log import get_logger
from wsd.utils.stats import clamp

logger = get_logger(__name__)

SIGNAL_WEIGHT     = 0.35
THROUGHPUT_WEIGHT = 0.25
STABILITY_WEIGHT  = 0.25
TREND_WEIGHT      = 0.15
VARIANCE_PENALTY  = 0.1

STABILITY_SCORES: dict[StabilityLevel, float] = {
    StabilityLevel.EXCELLENT: 1.0,
    StabilityLevel.GOOD:      0.75,
    StabilityLevel.MARGINAL:  0.5,
    StabilityLevel.UNSTABLE:  0.25,
}

TREND_SCORES: dict[TrendDirection, float] = {
    TrendDirection.IMPROVING: 1.0,
    TrendDirection.STABLE:    0.75,
    TrendDirection.DEGRADING: 0.4,
}

LEVEL_STEPS: tuple[tuple[float, DiagnosticLevel], ...] = (
    (0.8, DiagnosticLevel.EXCELLENT),
    (0.6, DiagnosticLevel.GOOD),
    (0.4, DiagnosticLevel.FAIR),
    (0.2, DiagnosticLevel.POOR),
)

REC_UNSTABLE = "Connection is unstable. Reduce distance or obstacles to the router"
REC_MARGINAL = "Connection has limited headroom. Minor interference may cause drops"
REC_DEGRADING = "Signal is degrading. Check if you are moving away from the router"
REC_FLUCTUATING = "Signal is fluctuating. Check for moving obstacles or interference sources"
REC_SWITCH_5GHZ = "Consider switching to the 5GHz band for better performance if available"
REC_HEALTHY = "Network connection is healthy. No issues detected"


def overall_score(
    signal_quality: float,
    throughput_confidence: float,
    stability: StabilityLevel,
    direction: TrendDirection,
    variance: float,
    high_variance_db2: float = HIGH_VARIANCE_DB2,
) -> float:
    """
    Weighted health score in [0, 1].

    signal 0.35 + throughput confidence 0.25 + link stability 0.25 + trend
    0.15, minus a flat 0.1 when the RSSI variance is high.
    """
    raw = (
        signal_quality * SIGNAL_WEIGHT
        + throughput_confidence * THROUGHPUT_WEIGHT
        + STABILITY_SCORES[stability] * STABILITY_WEIGHT
        + TREND_SCORES[direction] * TREND_WEIGHT
    )
    penalty = VARIANCE_PENALTY if variance > high_variance_db2 else 0.0
    return clamp(raw - penalty, 0.0, 1.0)


def overall_level(score: float) -> DiagnosticLevel:
    for threshold, level in LEVEL_STEPS:
        if score >= threshold:
            return level
    return DiagnosticLevel.CRITICAL


class DiagnosticsPipeline:
    """
    Stateless pipeline turning one measurement and its RSSI history into a
    NetworkDiagnostics value. Safe to share between threads.
    """
    def __init__(self, cfg: Optional[DiagnosticsConfig] = None) -> None:
        self.cfg = cfg or DiagnosticsConfig()

    def analyze(
        self,
        measurement: Measurement,
        rssi_history: Sequence[int] = (),
        environment: Optional[Environment] = None,
        neighbors: Sequence[Measurement] = (),
    ) -> NetworkDiagnostics:
        cfg = self.cfg
        env = environment or cfg.environment
        rssi = quality.clamp_rssi(measurement.rssi)
        if rssi != measurement.rssi:
            measurement = replace(measurement, rssi=rssi)
        logger.debug("Diagnosing %s (rssi=%d dBm, %d MHz, env=%s)",
                     measurement.bssid or "<unknown>", rssi, measurement.frequency_mhz, env.name)

        dist = distance.estimate(
            rssi,
            measurement.frequency_mhz,
            environment=env,
            tx_power_dbm=cfg.tx_power_dbm,
            floor_penetration_loss_db=cfg.floor_penetration_loss_db,
            path_loss_exponents=cfg.exponent_table(),
            error_low=cfg.distance_error_low,
            error_high=cfg.distance_error_high,
        )

        snr_db = float(rssi - cfg.noise_floor_dbm)
        tput = mcs.predict(
            snr_db,
            measurement.standard,
            measurement.channel_width_mhz,
            spatial_streams=cfg.spatial_streams,
            overhead=cfg.protocol_overhead,
            stability_margin_db=cfg.mcs_stability_margin_db,
        )

        link = margin.analyze(
            rssi,
            measurement.standard,
            tput.mcs_index,
            fade_margin_db=cfg.recommended_fade_margin_db,
        )

        history = [quality.clamp_rssi(s) for s in rssi_history] or [rssi]
        sig_trend = trend.trend(history, cfg.window_size)
        forecast = trend.predict_future_quality(
            history,
            seconds_ahead=cfg.seconds_ahead,
            window_size=cfg.window_size,
            high_variance_db2=cfg.high_variance_db2,
        )

        sig_quality = quality.signal_quality(measurement, cfg.noise_floor_dbm)
        if neighbors:
            interference = channel.interference_result(
                measurement, neighbors, cfg.max_expected_networks
            )
        else:
            interference = InterferenceResult(score=0.0, channel_utilization=0.0)

        score = overall_score(
            sig_quality.quality,
            tput.confidence,
            link.stability,
            sig_trend.direction,
            sig_trend.variance,
            cfg.high_variance_db2,
        )
        level = overall_level(score)
        recs = self._recommendations(measurement, dist, link, sig_trend, tput)
        logger.debug("Diagnosis complete: score=%.3f level=%s, %d recommendations",
                     score, level.name, len(recs))

        return NetworkDiagnostics(
            measurement=measurement,
            signal_quality=sig_quality,
            interference=interference,
            distance_estimate=dist,
            throughput_prediction=tput,
            link_margin=link,
            signal_trend=sig_trend,
            quality_prediction=forecast,
            overall_score=score,
            overall_level=level,
            recommendations=tuple(recs),
        )

    def analyze_scan(
        self,
        scan: MeasurementSet,
        rssi_history: Sequence[int] = (),
        environment: Optional[Environment] = None,
    ) -> NetworkDiagnostics:
        """Diagnose the target of a scan against the scan's other networks."""
        return self.analyze(scan.target, rssi_history, environment, scan.neighbors)

    def _recommendations(
        self,
        measurement: Measurement,
        dist: DistanceEstimate,
        link: LinkMarginResult,
        sig_trend: SignalTrend,
        tput: ThroughputPrediction,
    ) -> list[str]:
        """
        One message per triggered rule, in rule order; a single healthy
        message when nothing triggers.
        """
        cfg = self.cfg
        recs: list[str] = []

        if dist.estimated_meters > cfg.far_distance_m:
            recs.append(
                f"Consider moving closer to the router (estimated {dist.estimated_meters:.1f}m away)"
            )

        if link.stability is StabilityLevel.UNSTABLE:
            recs.append(REC_UNSTABLE)
        elif link.stability is StabilityLevel.MARGINAL:
            recs.append(REC_MARGINAL)

        if (sig_trend.direction is TrendDirection.DEGRADING
                and sig_trend.rate_of_change_db_per_sample < -1.0):
            recs.append(REC_DEGRADING)

        if sig_trend.variance > cfg.high_variance_db2:
            recs.append(REC_FLUCTUATING)

        band = measurement.band
        if band is FrequencyBand.BAND_2_4_GHZ and tput.mcs_index < 5:
            recs.append(REC_SWITCH_5GHZ)

        if band is not FrequencyBand.BAND_2_4_GHZ and measurement.channel_width_mhz < 40:
            recs.append(
                f"Using narrow channel ({measurement.channel_width_mhz}MHz). "
                "Wider channel could improve speed"
            )

        if not recs:
            recs.append(REC_HEALTHY)
        return recs


def analyze(
    measurement: Measurement,
    rssi_history: Sequence[int] = (),
    environment: Optional[Environment] = None,
    cfg: Optional[DiagnosticsConfig] = None,
    neighbors: Sequence[Measurement] = (),
) -> NetworkDiagnostics:
    """
    Run the full diagnostics pipeline once.

    Parameters
    ----------
    measurement
        Reading for the network being diagnosed.
    rssi_history
        Recent RSSI samples for the same connection, oldest first. An empty
        history is treated as a single sample of the current RSSI. Samples
        outside [-100, 0] dBm are clamped like the measurement itself.
    environment
        Indoor environment for distance estimation; the configured one
        when omitted.
    cfg
        Calibration overrides; defaults otherwise.
    neighbors
        Other networks from the same scan, for the interference figures.

    Returns
    -------
    NetworkDiagnostics
        A fresh value; the same inputs always give the same result.
    """
    return DiagnosticsPipeline(cfg).analyze(measurement, rssi_history, environment, neighbors)


def analyze_scan(
    scan: MeasurementSet,
    rssi_history: Sequence[int] = (),
    environment: Optional[Environment] = None,
    cfg: Optional[DiagnosticsConfig] = None,
) -> NetworkDiagnostics:
    return DiagnosticsPipeline(cfg).analyze_scan(scan, rssi_history, environment)
