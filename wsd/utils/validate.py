"""
Pydantic schemas validating raw measurement records on the way in and
serializing diagnostics on the way out.
"""

from dataclasses import asdict
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wsd.analysis.errors import InvalidMeasurement
from wsd.analysis.types import (
    DiagnosticLevel,
    Measurement,
    NetworkDiagnostics,
    StabilityLevel,
    TrendDirection,
    WifiStandard,
)
from wsd.utils.stats import clamp

_STANDARD_ALIASES: dict[str, WifiStandard] = {
    "wifi4": WifiStandard.WIFI4,
    "wifi5": WifiStandard.WIFI5,
    "wifi6": WifiStandard.WIFI6,
    "wifi6e": WifiStandard.WIFI6E,
    "unknown": WifiStandard.UNKNOWN,
    **{s.value: s for s in WifiStandard},
}


def _clamp_rssi(value: Any) -> int:
    try:
        rssi = int(value)
    except (TypeError, OverflowError) as e:
        raise ValueError(f"rssi must be numeric, got {value!r}") from e
    return int(clamp(rssi, -100, 0))


class MeasurementRecord(BaseModel):
    """
    Normalized record for a single access point reading.
    """
    rssi: int
    frequency_mhz: int = Field(gt=0)
    channel: int
    channel_width_mhz: int = Field(default=20, gt=0)
    standard: WifiStandard = WifiStandard.UNKNOWN
    bssid: str = ""
    ssid: Optional[str] = None

    @field_validator("rssi", mode="before")
    @classmethod
    def clamp_rssi(cls, v: Any) -> int:
        return _clamp_rssi(v)

    @field_validator("standard", mode="before")
    @classmethod
    def parse_standard(cls, v: Any) -> Any:
        if isinstance(v, str):
            key = v.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
            if key in _STANDARD_ALIASES:
                return _STANDARD_ALIASES[key]
            return _STANDARD_ALIASES.get(v.strip(), WifiStandard.UNKNOWN)
        return v

    def to_measurement(self) -> Measurement:
        return Measurement(
            rssi=self.rssi,
            frequency_mhz=self.frequency_mhz,
            channel=self.channel,
            channel_width_mhz=self.channel_width_mhz,
            standard=self.standard,
            bssid=self.bssid,
            ssid=self.ssid or "",
        )


def parse_measurement(raw: dict[str, Any]) -> Measurement:
    """
    Validate a raw record into a Measurement.

    Raises
    ------
    InvalidMeasurement
        If the record fails validation, e.g. a non-positive frequency.
    """
    try:
        return MeasurementRecord.model_validate(raw).to_measurement()
    except ValidationError as e:
        raise InvalidMeasurement(str(e)) from e


def parse_history(raw: Iterable[Any]) -> tuple[int, ...]:
    """
    Normalize an RSSI history to a tuple of clamped integer samples.
    """
    return tuple(_clamp_rssi(v) for v in raw)


class SignalQualityOut(BaseModel):
    quality: float
    snr_db: float


class InterferenceOut(BaseModel):
    score: float
    channel_utilization: float


class DistanceOut(BaseModel):
    estimated_meters: float
    min_meters: float
    max_meters: float
    confidence: float
    model: str


class ThroughputOut(BaseModel):
    shannon_capacity_mbps: float
    mcs_throughput_mbps: float
    real_world_mbps: float
    mcs_index: int
    modulation_label: str
    confidence: float


class LinkMarginOut(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    margin_db: float
    stability: StabilityLevel
    fade_margin_db: float
    headroom_label: str
    recommendation: Optional[str]


class SignalTrendOut(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    direction: TrendDirection
    rate_of_change_db_per_sample: float
    moving_average: float
    variance: float


class QualityPredictionOut(BaseModel):
    predicted_rssi: int
    predicted_quality: float
    confidence: float
    warning: Optional[str]


class DiagnosticsReport(BaseModel):
    """
    JSON-safe mirror of NetworkDiagnostics.
    """
    model_config = ConfigDict(use_enum_values=True)

    measurement: MeasurementRecord
    signal_quality: SignalQualityOut
    interference: InterferenceOut
    distance_estimate: DistanceOut
    throughput_prediction: ThroughputOut
    link_margin: LinkMarginOut
    signal_trend: SignalTrendOut
    quality_prediction: QualityPredictionOut
    overall_score: float
    overall_level: DiagnosticLevel
    recommendations: list[str]


def to_report(diagnostics: NetworkDiagnostics) -> DiagnosticsReport:
    return DiagnosticsReport.model_validate(asdict(diagnostics))


def report_json(diagnostics: NetworkDiagnostics, indent: Optional[int] = None) -> str:
    return to_report(diagnostics).model_dump_json(indent=indent)
