"""Connection lifecycle for a single located peripheral."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from goproctl.core.errors import DeviceConnectError, ServiceDiscoveryError, TransportError
from goproctl.transports.base import Peripheral

LOGGER = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    SERVICES_DISCOVERED = "services_discovered"
    FAILED = "failed"


class ConnectionManager:
    """Owns one peripheral for the length of a session.

    Nothing here disconnects on its own; callers end the session with
    `disconnect()`.
    """

    def __init__(
        self,
        peripheral: Peripheral,
        *,
        connect_timeout_s: float = 20.0,
        discover_timeout_s: float = 20.0,
    ) -> None:
        self.peripheral = peripheral
        self.connect_timeout_s = connect_timeout_s
        self.discover_timeout_s = discover_timeout_s
        self.state = ConnectionState.DISCONNECTED
        self.failure_reason: str | None = None
        self._lock = asyncio.Lock()

    def _fail(self, reason: str) -> None:
        self.state = ConnectionState.FAILED
        self.failure_reason = reason
        LOGGER.warning(reason)

    async def ensure_ready(self) -> Peripheral:
        async with self._lock:
            if self.state is ConnectionState.SERVICES_DISCOVERED and self.peripheral.is_connected():
                return self.peripheral

            address = self.peripheral.address
            if not self.peripheral.is_connected():
                self.state = ConnectionState.CONNECTING
                LOGGER.info("Connecting to %s", address)
                try:
                    await asyncio.wait_for(self.peripheral.connect(), timeout=self.connect_timeout_s)
                except asyncio.TimeoutError as exc:
                    self._fail(f"Connect to {address} timed out after {self.connect_timeout_s}s")
                    raise DeviceConnectError(self.failure_reason) from exc
                except TransportError as exc:
                    self._fail(f"Connect to {address} failed: {exc}")
                    raise DeviceConnectError(self.failure_reason) from exc
            self.state = ConnectionState.CONNECTED

            try:
                await asyncio.wait_for(self.peripheral.discover_services(), timeout=self.discover_timeout_s)
            except asyncio.TimeoutError as exc:
                self._fail(f"Service discovery on {address} timed out after {self.discover_timeout_s}s")
                raise ServiceDiscoveryError(self.failure_reason) from exc
            except TransportError as exc:
                self._fail(f"Service discovery on {address} failed: {exc}")
                raise ServiceDiscoveryError(self.failure_reason) from exc
            self.state = ConnectionState.SERVICES_DISCOVERED
            return self.peripheral

    async def disconnect(self) -> None:
        async with self._lock:
            if self.peripheral.is_connected():
                await self.peripheral.disconnect()
            self.state = ConnectionState.DISCONNECTED
            self.failure_reason = None
