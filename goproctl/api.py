"""Stable public API for building tooling on top of goproctl.

This module is the supported integration surface for third-party callers.
The `Client` methods and module-level `get_*` functions are synchronous and
run one BLE session per call. Async callers wanting several records from one
connection should use `CameraService.session()` directly.
"""

from __future__ import annotations

import asyncio

from goproctl.core.config import Settings, load_settings
from goproctl.core.errors import (
    ConfigError,
    DecodeError,
    DeviceConnectError,
    DeviceDiscoveryError,
    FieldConfigurationError,
    FieldReadError,
    GoproctlError,
    ServiceDiscoveryError,
    TransportError,
    TransportTimeoutError,
)
from goproctl.core.model import (
    NOT_AVAILABLE,
    CameraInfo,
    DetectedDevice,
    FactoryInfo,
    MatchRules,
    StatusInfo,
    WifiInfo,
)
from goproctl.core.service import CameraService, CameraSession
from goproctl.transports.base import Backend

__all__ = [
    "GoproctlError",
    "ConfigError",
    "DecodeError",
    "DeviceConnectError",
    "DeviceDiscoveryError",
    "FieldConfigurationError",
    "FieldReadError",
    "ServiceDiscoveryError",
    "TransportError",
    "TransportTimeoutError",
    "NOT_AVAILABLE",
    "CameraInfo",
    "DetectedDevice",
    "FactoryInfo",
    "MatchRules",
    "StatusInfo",
    "WifiInfo",
    "Settings",
    "CameraService",
    "CameraSession",
    "Client",
    "get_wifi_info",
    "get_factory_info",
    "get_status_info",
    "get_camera_info",
]


class Client:
    """Public client for reading camera information over BLE.

    Settings default to the user's config file (see `load_settings`). A custom
    `backend` replaces the bleak transport, which is how tests drive it.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        backend: Backend | None = None,
    ) -> None:
        self._service = CameraService(settings or load_settings(), backend=backend)

    @property
    def settings(self) -> Settings:
        return self._service.settings

    def list_devices(self) -> list[DetectedDevice]:
        return asyncio.run(self._service.list_devices())

    def get_wifi_info(self) -> WifiInfo:
        return asyncio.run(self._service.fetch_wifi_info())

    def get_factory_info(self) -> FactoryInfo:
        return asyncio.run(self._service.fetch_factory_info())

    def get_status_info(self) -> StatusInfo:
        return asyncio.run(self._service.fetch_status_info())

    def get_camera_info(self) -> CameraInfo:
        return asyncio.run(self._service.fetch_camera_info())


def get_wifi_info(settings: Settings | None = None) -> WifiInfo:
    return Client(settings).get_wifi_info()


def get_factory_info(settings: Settings | None = None) -> FactoryInfo:
    return Client(settings).get_factory_info()


def get_status_info(settings: Settings | None = None) -> StatusInfo:
    return Client(settings).get_status_info()


def get_camera_info(settings: Settings | None = None) -> CameraInfo:
    return Client(settings).get_camera_info()
