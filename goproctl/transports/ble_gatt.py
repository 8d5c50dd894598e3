"""BLE GATT transport implementation backed by bleak."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError

from goproctl.core.errors import TransportError, TransportTimeoutError

LOGGER = logging.getLogger(__name__)
_SYSFS_BLUETOOTH = Path("/sys/class/bluetooth")


class BleakPeripheral:
    def __init__(
        self,
        device: BLEDevice,
        local_name: str | None,
        *,
        adapter: str | None = None,
        connect_timeout_s: float = 20.0,
        read_timeout_s: float = 5.0,
    ) -> None:
        self._device = device
        self._local_name = local_name
        self._read_timeout_s = read_timeout_s
        kwargs = {"adapter": adapter} if adapter else {}
        self._client = BleakClient(device, timeout=connect_timeout_s, **kwargs)

    @property
    def address(self) -> str:
        return self._device.address

    def advertised_name(self) -> str | None:
        return self._local_name

    def is_connected(self) -> bool:
        return self._client.is_connected

    async def connect(self) -> None:
        try:
            await self._client.connect()
        except asyncio.TimeoutError as exc:
            raise TransportTimeoutError(f"BLE connect timed out for {self.address}") from exc
        except (BleakError, OSError) as exc:
            raise TransportError(f"BLE connect failed for {self.address}: {exc}") from exc

    async def discover_services(self) -> None:
        # bleak resolves the GATT table while connecting; accessing it
        # confirms that step completed.
        try:
            services = self._client.services
        except BleakError as exc:
            raise TransportError(f"Service discovery failed for {self.address}: {exc}") from exc
        if services is None:
            raise TransportError(f"No GATT services resolved for {self.address}")

    async def read(
        self,
        service_uuid: str,
        char_uuid: str,
        required_properties: Sequence[str] = ("read",),
    ) -> bytes:
        try:
            service = self._client.services.get_service(service_uuid)
            characteristic = service.get_characteristic(char_uuid) if service is not None else None
        except (BleakError, OSError) as exc:
            raise TransportError(f"GATT lookup of {char_uuid} failed on {self.address}: {exc}") from exc
        if service is None:
            raise TransportError(f"Service {service_uuid} not found on {self.address}")
        if characteristic is None:
            raise TransportError(f"Characteristic {char_uuid} not found in service {service_uuid}")
        missing = [p for p in required_properties if p not in characteristic.properties]
        if missing:
            raise TransportError(
                f"Characteristic {char_uuid} lacks properties: {', '.join(missing)}"
            )

        try:
            data = await asyncio.wait_for(
                self._client.read_gatt_char(characteristic),
                timeout=self._read_timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise TransportTimeoutError(f"Timed out reading {char_uuid}") from exc
        except (BleakError, OSError) as exc:
            raise TransportError(f"BLE read of {char_uuid} failed: {exc}") from exc
        return bytes(data)

    async def disconnect(self) -> None:
        try:
            await self._client.disconnect()
        except (BleakError, OSError) as exc:
            raise TransportError(f"BLE disconnect failed for {self.address}: {exc}") from exc


class BleakAdapter:
    def __init__(
        self,
        name: str | None = None,
        *,
        scan_timeout_s: float = 10.0,
        connect_timeout_s: float = 20.0,
        read_timeout_s: float = 5.0,
    ) -> None:
        self._name = name
        self._scan_timeout_s = scan_timeout_s
        self._connect_timeout_s = connect_timeout_s
        self._read_timeout_s = read_timeout_s
        self._known: list[BleakPeripheral] = []

    @property
    def name(self) -> str | None:
        return self._name

    async def scan(self, service_uuids: Sequence[str] | None = None) -> None:
        kwargs: dict[str, object] = {}
        if self._name:
            kwargs["adapter"] = self._name
        if service_uuids:
            kwargs["service_uuids"] = list(service_uuids)
        try:
            found = await BleakScanner.discover(
                timeout=self._scan_timeout_s,
                return_adv=True,
                **kwargs,
            )
        except (BleakError, OSError) as exc:
            raise TransportError(f"BLE scan failed: {exc}") from exc

        self._known = [
            BleakPeripheral(
                device,
                adv.local_name or device.name,
                adapter=self._name,
                connect_timeout_s=self._connect_timeout_s,
                read_timeout_s=self._read_timeout_s,
            )
            for device, adv in found.values()
        ]
        LOGGER.debug("Scan on %s found %d peripherals", self._name or "<default>", len(self._known))

    def known_peripherals(self) -> list[BleakPeripheral]:
        return list(self._known)


class BleakBackend:
    def __init__(
        self,
        *,
        adapter: str | None = None,
        scan_timeout_s: float = 10.0,
        connect_timeout_s: float = 20.0,
        read_timeout_s: float = 5.0,
    ) -> None:
        self._adapter = adapter
        self._timeouts = {
            "scan_timeout_s": scan_timeout_s,
            "connect_timeout_s": connect_timeout_s,
            "read_timeout_s": read_timeout_s,
        }

    def list_adapters(self) -> list[BleakAdapter]:
        if self._adapter:
            names: list[str | None] = [self._adapter]
        elif sys.platform.startswith("linux"):
            names = _linux_adapter_names()
        else:
            # CoreBluetooth and WinRT only expose the default radio.
            names = [None]
        return [BleakAdapter(name, **self._timeouts) for name in names]


def _linux_adapter_names() -> list[str | None]:
    if not _SYSFS_BLUETOOTH.is_dir():
        return []
    return sorted(p.name for p in _SYSFS_BLUETOOTH.iterdir() if p.name.startswith("hci"))
