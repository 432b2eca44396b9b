import pytest

from wsd.analysis.types import Measurement, WifiStandard


@pytest.fixture
def make_measurement():
    def _make(**kwargs) -> Measurement:
        defaults = dict(
            rssi=-55,
            frequency_mhz=5180,
            channel=36,
            channel_width_mhz=80,
            standard=WifiStandard.WIFI6,
            bssid="AA:11:22:33:44:01",
            ssid="HOME-5G",
        )
        defaults.update(kwargs)
        return Measurement(**defaults)
    return _make


@pytest.fixture
def make_24ghz(make_measurement):
    def _make(channel: int, rssi: int = -60, bssid: str = "", width: int = 20) -> Measurement:
        return make_measurement(
            rssi=rssi,
            frequency_mhz=2412 + (channel - 1) * 5,
            channel=channel,
            channel_width_mhz=width,
            standard=WifiStandard.WIFI4,
            bssid=bssid or f"24:00:00:00:00:{channel:02d}",
        )
    return _make
