from __future__ import annotations

import pytest

from fakes import FACTORY_BYTES, FakePeripheral, backend_with

from goproctl import api
from goproctl.api import Client, DeviceConnectError, DeviceDiscoveryError, FactoryInfo, Settings
from goproctl.core.model import DetectedDevice, Field


def test_public_client_factory_info() -> None:
    camera = FakePeripheral("D4:D9:19:00:00:01", "GoPro HERO9", FACTORY_BYTES)
    client = Client(Settings(), backend=backend_with(camera))

    info = client.get_factory_info()
    assert isinstance(info, FactoryInfo)
    assert info.fw_revision == "HD9.01.01.72.00"


def test_public_client_wifi_info_discovery_failure() -> None:
    client = Client(Settings(), backend=backend_with(FakePeripheral("AA", "Speaker")))
    with pytest.raises(DeviceDiscoveryError):
        client.get_wifi_info()


def test_public_client_status_info_connect_timeout() -> None:
    camera = FakePeripheral("D4:D9:19:00:00:01", "GoPro HERO9", connect_delay_s=1.0)
    client = Client(Settings(connect_timeout_s=0.05), backend=backend_with(camera))

    with pytest.raises(DeviceConnectError):
        client.get_status_info()
    assert camera.connect_calls == 1


def test_public_client_list_devices() -> None:
    client = Client(Settings(), backend=backend_with(FakePeripheral("AA", None), FakePeripheral("BB", "GoPro 1")))
    assert client.list_devices() == [
        DetectedDevice(address="AA", name=None),
        DetectedDevice(address="BB", name="GoPro 1"),
    ]


def test_client_loads_settings_from_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("match:\n  name_contains: [\"HERO\"]\n", encoding="utf-8")
    monkeypatch.setenv("GOPROCTL_CONFIG", str(config))

    camera = FakePeripheral("D4:D9:19:00:00:01", "HERO9 Black", {Field.BATTERY_LEVEL: b"\x10"})
    client = Client(backend=backend_with(camera))

    assert client.settings.match.name_contains == ("HERO",)
    assert client.get_status_info().battery_level == 16


def test_module_level_functions_delegate_to_client(monkeypatch: pytest.MonkeyPatch) -> None:
    camera = FakePeripheral("D4:D9:19:00:00:01", "GoPro HERO9", FACTORY_BYTES)
    original = api.CameraService

    def _service(settings, *, backend=None):
        return original(settings, backend=backend_with(camera))

    monkeypatch.setattr(api, "CameraService", _service)

    assert api.get_factory_info(Settings()).model_number == "HERO9 Black"
    assert camera.disconnect_calls == 1
