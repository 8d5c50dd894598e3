from __future__ import annotations

import asyncio

import pytest

from fakes import FakePeripheral

from goproctl.core.connection import ConnectionManager, ConnectionState
from goproctl.core.errors import DeviceConnectError, ServiceDiscoveryError, TransportError


def test_ensure_ready_connects_then_discovers() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1")
    manager = ConnectionManager(peripheral)

    assert asyncio.run(manager.ensure_ready()) is peripheral
    assert manager.state is ConnectionState.SERVICES_DISCOVERED
    assert peripheral.connect_calls == 1
    assert peripheral.discover_calls == 1


def test_ensure_ready_is_idempotent() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1")
    manager = ConnectionManager(peripheral)

    async def _twice() -> None:
        await manager.ensure_ready()
        await manager.ensure_ready()

    asyncio.run(_twice())
    assert peripheral.connect_calls == 1
    assert peripheral.discover_calls == 1


def test_already_connected_peripheral_skips_connect_but_discovers() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1", connected=True)
    manager = ConnectionManager(peripheral)

    asyncio.run(manager.ensure_ready())
    assert peripheral.connect_calls == 0
    assert peripheral.discover_calls == 1


def test_connect_timeout_fails_without_retry() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1", connect_delay_s=1.0)
    manager = ConnectionManager(peripheral, connect_timeout_s=0.05)

    with pytest.raises(DeviceConnectError, match="timed out"):
        asyncio.run(manager.ensure_ready())
    assert peripheral.connect_calls == 1
    assert manager.state is ConnectionState.FAILED
    assert manager.failure_reason


def test_connect_refused_is_connect_error() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1", connect_error=TransportError("refused"))
    manager = ConnectionManager(peripheral)

    with pytest.raises(DeviceConnectError):
        asyncio.run(manager.ensure_ready())
    assert manager.state is ConnectionState.FAILED


def test_service_discovery_failure() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1", discover_error=TransportError("gatt"))
    manager = ConnectionManager(peripheral)

    with pytest.raises(ServiceDiscoveryError):
        asyncio.run(manager.ensure_ready())
    assert manager.state is ConnectionState.FAILED


def test_no_implicit_disconnect() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1")
    manager = ConnectionManager(peripheral)

    async def _session() -> None:
        await manager.ensure_ready()
        assert peripheral.disconnect_calls == 0
        assert peripheral.is_connected()
        await manager.disconnect()

    asyncio.run(_session())
    assert peripheral.disconnect_calls == 1
    assert manager.state is ConnectionState.DISCONNECTED


def test_service_discovery_timeout() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1", discover_delay_s=1.0)
    manager = ConnectionManager(peripheral, discover_timeout_s=0.05)

    with pytest.raises(ServiceDiscoveryError, match="timed out"):
        asyncio.run(manager.ensure_ready())
    assert peripheral.connect_calls == 1
    assert peripheral.discover_calls == 1
    assert manager.state is ConnectionState.FAILED
