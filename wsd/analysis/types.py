# wsd/analysis/types.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class WifiStandard(Enum):
    """IEEE 802.11 generation advertised by an access point."""
    WIFI4 = "802.11n"
    WIFI5 = "802.11ac"
    WIFI6 = "802.11ax"
    WIFI6E = "802.11ax-6GHz"
    UNKNOWN = "unknown"


class FrequencyBand(Enum):
    BAND_2_4_GHZ = "2.4GHz"
    BAND_5_GHZ = "5GHz"
    BAND_6_GHZ = "6GHz"

    @classmethod
    def from_frequency(cls, frequency_mhz: int) -> FrequencyBand:
        """Band of a centre frequency; 6 GHz starts at the 5925 MHz band edge."""
        if frequency_mhz < 3000:
            return cls.BAND_2_4_GHZ
        if frequency_mhz < 5925:
            return cls.BAND_5_GHZ
        return cls.BAND_6_GHZ


class Environment(Enum):
    """Indoor environment classes of the ITU-R P.1238 model."""
    RESIDENTIAL = "residential"
    OFFICE = "office"
    COMMERCIAL = "commercial"
    OPEN_SPACE = "open_space"


class StabilityLevel(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MARGINAL = "marginal"
    UNSTABLE = "unstable"


class TrendDirection(Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DEGRADING = "degrading"


class DiagnosticLevel(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


class QualityLevel(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    WEAK = "weak"


class InterferenceLevel(Enum):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


@dataclass(frozen=True)
class Measurement:
    """
    Single access point reading taken at one scan instant.

    Parameters
    ----------
    rssi : int
        Received signal strength in dBm, expected in [-100, 0].
    frequency_mhz : int
        Centre frequency of the primary channel in MHz.
    channel : int
        Channel number within its band.
    channel_width_mhz : int
        Occupied channel width (20/40/80/160/320).
    standard : WifiStandard
        Advertised 802.11 generation.
    bssid : str
        Opaque identifier of the transmitter.
    ssid : str
        Network name, informational only.
    """
    rssi: int
    frequency_mhz: int
    channel: int
    channel_width_mhz: int = 20
    standard: WifiStandard = WifiStandard.UNKNOWN
    bssid: str = ""
    ssid: str = ""

    @property
    def band(self) -> FrequencyBand:
        return FrequencyBand.from_frequency(self.frequency_mhz)


@dataclass(frozen=True)
class MeasurementSet:
    """
    Measurements observed at one scan instant.

    Parameters
    ----------
    target : Measurement
        The network being diagnosed.
    neighbors : tuple[Measurement, ...]
        Every other network seen in the same scan.
    """
    target: Measurement
    neighbors: tuple[Measurement, ...] = ()

    @property
    def all_networks(self) -> tuple[Measurement, ...]:
        return (self.target,) + tuple(self.neighbors)


@dataclass(frozen=True)
class SignalQuality:
    quality: float
    snr_db: float


@dataclass(frozen=True)
class InterferenceResult:
    score: float
    channel_utilization: float


@dataclass(frozen=True)
class ChannelInfo:
    """
    Occupancy summary for one channel of a band.

    Parameters
    ----------
    channel : int
        Channel number.
    frequency_mhz : int
        Centre frequency of the channel.
    band : FrequencyBand
        Band the channel belongs to.
    network_count : int
        Networks of the same band whose span overlaps this channel.
    utilization : float
        Normalized utilization in [0, 1].
    average_rssi : int
        Mean RSSI of the overlapping networks, -100 when there are none.
    """
    channel: int
    frequency_mhz: int
    band: FrequencyBand
    network_count: int
    utilization: float
    average_rssi: int

    @property
    def is_congested(self) -> bool:
        return self.network_count > 3 or self.utilization > 0.6

    @property
    def is_recommended(self) -> bool:
        return self.network_count <= 1 and self.utilization < 0.3


@dataclass(frozen=True)
class SignalMetrics:
    """Scan-level metrics for one network against everything else in the scan."""
    rssi: int
    signal_quality: float
    link_speed_mbps: int
    interference_score: float
    estimated_throughput_mbps: float
    snr_db: float
    channel_utilization: float

    @property
    def quality_level(self) -> QualityLevel:
        if self.signal_quality >= 0.8:
            return QualityLevel.EXCELLENT
        if self.signal_quality >= 0.6:
            return QualityLevel.GOOD
        if self.signal_quality >= 0.4:
            return QualityLevel.FAIR
        if self.signal_quality >= 0.2:
            return QualityLevel.POOR
        return QualityLevel.WEAK

    @property
    def interference_level(self) -> InterferenceLevel:
        if self.interference_score >= 0.7:
            return InterferenceLevel.SEVERE
        if self.interference_score >= 0.5:
            return InterferenceLevel.HIGH
        if self.interference_score >= 0.3:
            return InterferenceLevel.MODERATE
        if self.interference_score >= 0.1:
            return InterferenceLevel.LOW
        return InterferenceLevel.NONE


@dataclass(frozen=True)
class DistanceEstimate:
    estimated_meters: float
    min_meters: float
    max_meters: float
    confidence: float
    model: str = "ITU-R P.1238"


@dataclass(frozen=True)
class McsEntry:
    """
    One row of an 802.11 MCS table.

    Parameters
    ----------
    index : int
        MCS index.
    modulation : str
        Constellation, e.g. "64-QAM".
    coding_rate : str
        FEC coding rate, e.g. "3/4".
    min_snr_db : float
        Minimum SNR needed to hold this MCS.
    data_rate_mbps_20mhz : float
        PHY rate for one spatial stream on a 20 MHz channel, long GI.
    """
    index: int
    modulation: str
    coding_rate: str
    min_snr_db: float
    data_rate_mbps_20mhz: float

    @property
    def label(self) -> str:
        return f"{self.modulation} {self.coding_rate}"


@dataclass(frozen=True)
class ThroughputPrediction:
    shannon_capacity_mbps: float
    mcs_throughput_mbps: float
    real_world_mbps: float
    mcs_index: int
    modulation_label: str
    confidence: float


@dataclass(frozen=True)
class LinkMarginResult:
    margin_db: float
    stability: StabilityLevel
    fade_margin_db: float
    headroom_label: str
    recommendation: Optional[str] = None


@dataclass(frozen=True)
class SignalTrend:
    direction: TrendDirection
    rate_of_change_db_per_sample: float
    moving_average: float
    variance: float


@dataclass(frozen=True)
class QualityPrediction:
    predicted_rssi: int
    predicted_quality: float
    confidence: float
    warning: Optional[str] = None


@dataclass(frozen=True)
class NetworkDiagnostics:
    """
    Full diagnostic result for one network, built fresh on every call.

    Parameters
    ----------
    measurement : Measurement
        The reading that was diagnosed (after RSSI clamping).
    signal_quality : SignalQuality
        Normalized quality and SNR.
    interference : InterferenceResult
        Interference against the supplied neighbors, zero when none were given.
    distance_estimate : DistanceEstimate
        ITU-R P.1238 distance to the transmitter.
    throughput_prediction : ThroughputPrediction
        Shannon and MCS based throughput.
    link_margin : LinkMarginResult
        Margin over receiver sensitivity for the predicted MCS.
    signal_trend : SignalTrend
        Regression over the RSSI history.
    quality_prediction : QualityPrediction
        Short-horizon forecast.
    overall_score : float
        Weighted score in [0, 1].
    overall_level : DiagnosticLevel
        Level stepped from `overall_score`.
    recommendations : tuple[str, ...]
        Ordered, never empty.
    """
    measurement: Measurement
    signal_quality: SignalQuality
    interference: InterferenceResult
    distance_estimate: DistanceEstimate
    throughput_prediction: ThroughputPrediction
    link_margin: LinkMarginResult
    signal_trend: SignalTrend
    quality_prediction: QualityPrediction
    overall_score: float
    overall_level: DiagnosticLevel
    recommendations: tuple[str, ...] = field(default_factory=tuple)
