"""Camera selection among scanned BLE peripherals."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from goproctl.core.errors import DeviceDiscoveryError, TransportError
from goproctl.core.model import DetectedDevice, MatchRules
from goproctl.transports.base import Adapter, Peripheral

DevicePredicate = Callable[[DetectedDevice], bool]

# Extra time granted on top of the scan window before the scan is cancelled.
_SCAN_GRACE_S = 5.0
LOGGER = logging.getLogger(__name__)


def _name_contains_match(device: DetectedDevice, rules: MatchRules) -> bool:
    if device.name is None:
        return False
    lower_name = device.name.lower()
    return any(token.lower() in lower_name for token in rules.name_contains)


def _address_match(device: DetectedDevice, rules: MatchRules) -> bool:
    if not rules.address:
        return True
    upper_address = device.address.upper()
    return any(upper_address == allowed.upper() for allowed in rules.address)


def matches(device: DetectedDevice, rules: MatchRules) -> bool:
    return _name_contains_match(device, rules) and _address_match(device, rules)


def rules_predicate(rules: MatchRules) -> DevicePredicate:
    return lambda device: matches(device, rules)


def _detected(peripheral: Peripheral) -> DetectedDevice:
    return DetectedDevice(address=peripheral.address, name=peripheral.advertised_name())


async def scan(adapter: Adapter, *, scan_timeout_s: float) -> None:
    """Run one scan on the adapter, bounded by scan_timeout_s plus a grace period."""
    try:
        await asyncio.wait_for(adapter.scan(), timeout=scan_timeout_s + _SCAN_GRACE_S)
    except asyncio.TimeoutError as exc:
        raise DeviceDiscoveryError(
            f"BLE scan on {adapter.name or 'default adapter'} timed out after {scan_timeout_s}s"
        ) from exc
    except TransportError as exc:
        raise DeviceDiscoveryError(f"BLE scan failed: {exc}") from exc


async def find_device(
    adapter: Adapter,
    predicate: DevicePredicate,
    *,
    scan_timeout_s: float = 10.0,
) -> Peripheral | None:
    await scan(adapter, scan_timeout_s=scan_timeout_s)

    for peripheral in adapter.known_peripherals():
        device = _detected(peripheral)
        if device.name is None:
            continue
        if predicate(device):
            LOGGER.info("Selected %s (%s)", device.address, device.name)
            return peripheral
    return None


def list_detected(adapter: Adapter) -> list[DetectedDevice]:
    return [_detected(p) for p in adapter.known_peripherals()]
