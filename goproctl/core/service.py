"""Service layer used by the public API and CLI."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from goproctl.core.catalog import lookup
from goproctl.core.config import Settings
from goproctl.core.connection import ConnectionManager
from goproctl.core.device_match import find_device, list_detected, rules_predicate, scan
from goproctl.core.errors import DeviceDiscoveryError, FieldReadError, ServiceDiscoveryError, TransportError
from goproctl.core.model import (
    NOT_AVAILABLE,
    CameraInfo,
    DetectedDevice,
    FactoryInfo,
    Field,
    FieldValue,
    StatusInfo,
    WifiInfo,
)
from goproctl.core.reader import read_field
from goproctl.transports.base import Adapter, Backend, Peripheral
from goproctl.transports.ble_gatt import BleakBackend

LOGGER = logging.getLogger(__name__)
RecordT = TypeVar("RecordT")

WIFI_LAYOUT: Mapping[str, Field] = {
    "ssid": Field.WIFI_SSID,
    "password": Field.WIFI_PASSWORD,
}

FACTORY_LAYOUT: Mapping[str, Field] = {
    "hw_revision": Field.HW_REVISION,
    "fw_revision": Field.FW_REVISION,
    "sw_revision": Field.SW_REVISION,
    "serial_number": Field.SERIAL_NUMBER,
    "model_number": Field.MODEL_NUMBER,
    "manufacturer_name": Field.MANUFACTURER_NAME,
}

STATUS_LAYOUT: Mapping[str, Field] = {
    "battery_level": Field.BATTERY_LEVEL,
    "tx_power_level": Field.TX_POWER_LEVEL,
}

CAMERA_LAYOUT: Mapping[str, Field] = {field.value: field for field in Field}


class CameraSession:
    """Reads info records from one ready peripheral."""

    def __init__(self, peripheral: Peripheral, *, concurrent_reads: bool = False) -> None:
        self.peripheral = peripheral
        self.concurrent_reads = concurrent_reads

    async def _read_or_sentinel(self, field: Field) -> FieldValue:
        try:
            return await read_field(self.peripheral, lookup(field))
        except FieldReadError as exc:
            LOGGER.warning("%s; recording '%s'", exc, NOT_AVAILABLE)
            return NOT_AVAILABLE

    async def assemble(self, record_cls: type[RecordT], layout: Mapping[str, Field]) -> RecordT:
        names = list(layout)
        if self.concurrent_reads:
            values = await asyncio.gather(*(self._read_or_sentinel(layout[n]) for n in names))
        else:
            values = [await self._read_or_sentinel(layout[n]) for n in names]
        return record_cls(**dict(zip(names, values)))

    async def wifi_info(self) -> WifiInfo:
        return await self.assemble(WifiInfo, WIFI_LAYOUT)

    async def factory_info(self) -> FactoryInfo:
        return await self.assemble(FactoryInfo, FACTORY_LAYOUT)

    async def status_info(self) -> StatusInfo:
        return await self.assemble(StatusInfo, STATUS_LAYOUT)

    async def camera_info(self) -> CameraInfo:
        return await self.assemble(CameraInfo, CAMERA_LAYOUT)


class CameraService:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        backend: Backend | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.backend = backend or BleakBackend(
            adapter=self.settings.adapter,
            scan_timeout_s=self.settings.scan_timeout_s,
            connect_timeout_s=self.settings.connect_timeout_s,
            read_timeout_s=self.settings.read_timeout_s,
        )

    def select_adapter(self) -> Adapter:
        adapters = self.backend.list_adapters()
        if not adapters:
            raise DeviceDiscoveryError("No Bluetooth adapter available")
        if self.settings.adapter:
            for adapter in adapters:
                if adapter.name == self.settings.adapter:
                    return adapter
            raise DeviceDiscoveryError(f"Bluetooth adapter '{self.settings.adapter}' not found")
        return adapters[0]

    def matches(self, device: DetectedDevice) -> bool:
        return rules_predicate(self.settings.match)(device)

    async def list_devices(self) -> list[DetectedDevice]:
        adapter = self.select_adapter()
        await scan(adapter, scan_timeout_s=self.settings.scan_timeout_s)
        return list_detected(adapter)

    async def locate(self) -> Peripheral:
        adapter = self.select_adapter()
        peripheral = await find_device(
            adapter,
            rules_predicate(self.settings.match),
            scan_timeout_s=self.settings.scan_timeout_s,
        )
        if peripheral is None:
            tokens = ", ".join(self.settings.match.name_contains)
            raise DeviceDiscoveryError(f"No camera advertising a name containing: {tokens}")
        return peripheral

    @asynccontextmanager
    async def session(self) -> AsyncIterator[CameraSession]:
        """Locate and connect to the camera for the duration of the block."""
        manager = ConnectionManager(
            await self.locate(),
            connect_timeout_s=self.settings.connect_timeout_s,
        )
        try:
            await manager.ensure_ready()
        except ServiceDiscoveryError:
            await _release(manager)
            raise
        try:
            yield CameraSession(manager.peripheral, concurrent_reads=self.settings.concurrent_reads)
        finally:
            await _release(manager)

    async def _fetch(self, record_cls: type[RecordT], layout: Mapping[str, Field]) -> RecordT:
        async with self.session() as session:
            return await session.assemble(record_cls, layout)

    async def fetch_wifi_info(self) -> WifiInfo:
        return await self._fetch(WifiInfo, WIFI_LAYOUT)

    async def fetch_factory_info(self) -> FactoryInfo:
        return await self._fetch(FactoryInfo, FACTORY_LAYOUT)

    async def fetch_status_info(self) -> StatusInfo:
        return await self._fetch(StatusInfo, STATUS_LAYOUT)

    async def fetch_camera_info(self) -> CameraInfo:
        return await self._fetch(CameraInfo, CAMERA_LAYOUT)


async def _release(manager: ConnectionManager) -> None:
    try:
        await manager.disconnect()
    except TransportError as exc:
        LOGGER.warning("Disconnect from %s failed: %s", manager.peripheral.address, exc)


def record_as_dict(record: Any) -> dict[str, FieldValue]:
    return dataclasses.asdict(record)
