# wsd/analysis/config.py

from dataclasses import dataclass, replace
from typing import Mapping

from wsd.analysis.types import Environment

# -----------------------------------------------------------------------------
# Calibrated defaults (dBm, dB, metres)
TX_POWER_DBM          = 20
NOISE_FLOOR_DBM       = -95
PROTOCOL_OVERHEAD     = 0.65
WINDOW_SIZE           = 10
SECONDS_AHEAD         = 5
MCS_STABILITY_MARGIN  = 3.0
FADE_MARGIN_DB        = 6.0
DISTANCE_ERROR_LOW    = 0.3   # -30%
DISTANCE_ERROR_HIGH   = 0.5   # +50%
MAX_EXPECTED_NETWORKS = 10
FAR_DISTANCE_M        = 15.0
HIGH_VARIANCE_DB2     = 25.0

PATH_LOSS_EXPONENTS: dict[Environment, float] = {
    Environment.RESIDENTIAL: 2.8,
    Environment.OFFICE:      3.0,
    Environment.COMMERCIAL:  2.2,
    Environment.OPEN_SPACE:  2.0,
}
# -----------------------------------------------------------------------------


def recommended_environment(frequency_mhz: int) -> Environment:
    """
    Default environment for a frequency: 2.4 GHz deployments are usually
    residential, higher bands are treated as office.
    """
    if frequency_mhz < 3000:
        return Environment.RESIDENTIAL
    return Environment.OFFICE


@dataclass(frozen=True)
class DiagnosticsConfig:
    """
    Per-call configuration for the diagnostics pipeline.

    Attributes
    ----------
    environment
        Indoor environment used for distance estimation.
    tx_power_dbm
        Assumed transmit power of the access point.
    noise_floor_dbm
        Assumed noise floor used to derive SNR from RSSI.
    protocol_overhead
        Fraction of PHY rate left after MAC/IP overhead and retransmissions.
    window_size
        Number of most recent samples used for trend analysis.
    seconds_ahead
        Prediction horizon, in samples (one sample per second).
    spatial_streams
        Streams assumed for throughput prediction.
    floor_penetration_loss_db
        Extra loss for floors between transmitter and receiver.
    mcs_stability_margin_db
        SNR held back when selecting an MCS index.
    recommended_fade_margin_db
        Buffer subtracted from the link margin to get the fade margin.
    distance_error_low
        Lower error envelope of the distance estimate, as a fraction.
    distance_error_high
        Upper error envelope of the distance estimate, as a fraction.
    path_loss_exponents
        ITU-R P.1238 distance power loss coefficient per environment, held as
        (environment, exponent) pairs. A mapping is accepted and converted.
    max_expected_networks
        Co-channel network count that saturates channel utilization.
    far_distance_m
        Distance above which moving closer is recommended.
    high_variance_db2
        RSSI variance above which the signal counts as fluctuating.
    """
    environment:                Environment = Environment.RESIDENTIAL
    tx_power_dbm:               int   = TX_POWER_DBM
    noise_floor_dbm:            int   = NOISE_FLOOR_DBM
    protocol_overhead:          float = PROTOCOL_OVERHEAD
    window_size:                int   = WINDOW_SIZE
    seconds_ahead:              int   = SECONDS_AHEAD
    spatial_streams:            int   = 1
    floor_penetration_loss_db:  float = 0.0
    mcs_stability_margin_db:    float = MCS_STABILITY_MARGIN
    recommended_fade_margin_db: float = FADE_MARGIN_DB
    distance_error_low:         float = DISTANCE_ERROR_LOW
    distance_error_high:        float = DISTANCE_ERROR_HIGH
    path_loss_exponents:        tuple[tuple[Environment, float], ...] = tuple(PATH_LOSS_EXPONENTS.items())
    max_expected_networks:      int   = MAX_EXPECTED_NETWORKS
    far_distance_m:             float = FAR_DISTANCE_M
    high_variance_db2:          float = HIGH_VARIANCE_DB2

    def __post_init__(self) -> None:
        if isinstance(self.path_loss_exponents, Mapping):
            object.__setattr__(self, "path_loss_exponents", tuple(self.path_loss_exponents.items()))

    def exponent_table(self) -> dict[Environment, float]:
        return dict(self.path_loss_exponents)

    def with_environment(self, environment: Environment) -> "DiagnosticsConfig":
        return replace(self, environment=environment)

    @classmethod
    def residential(cls):
        """Preset for homes (default thresholds)."""
        return cls()

    @classmethod
    def office(cls):
        """Preset for offices: more multipath, cubicle walls."""
        return cls(environment=Environment.OFFICE)

    @classmethod
    def open_space(cls):
        """Preset for halls and open floors with near free-space propagation."""
        return cls(environment=Environment.OPEN_SPACE)

    @classmethod
    def for_frequency(cls, frequency_mhz: int):
        """Preset picking the environment from the operating band."""
        return cls(environment=recommended_environment(frequency_mhz))
