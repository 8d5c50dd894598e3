"""Static table of the GATT characteristics goproctl knows how to read."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from goproctl.core.model import Decode, Field, FieldDescriptor

DEVICE_INFORMATION_SERVICE = "0000180a-0000-1000-8000-00805f9b34fb"
GOPRO_WIFI_AP_SERVICE = "b5f90001-aa8d-11e3-9046-0002a5d5c51b"
BATTERY_SERVICE = "0000180f-0000-1000-8000-00805f9b34fb"
TX_POWER_SERVICE = "00001804-0000-1000-8000-00805f9b34fb"


def _sig(short: str) -> str:
    return f"0000{short}-0000-1000-8000-00805f9b34fb"


_DESCRIPTORS = (
    FieldDescriptor(Field.HW_REVISION, DEVICE_INFORMATION_SERVICE, _sig("2a27")),
    FieldDescriptor(Field.FW_REVISION, DEVICE_INFORMATION_SERVICE, _sig("2a26")),
    FieldDescriptor(Field.SW_REVISION, DEVICE_INFORMATION_SERVICE, _sig("2a28")),
    FieldDescriptor(Field.SERIAL_NUMBER, DEVICE_INFORMATION_SERVICE, _sig("2a25")),
    FieldDescriptor(Field.MODEL_NUMBER, DEVICE_INFORMATION_SERVICE, _sig("2a24")),
    FieldDescriptor(Field.MANUFACTURER_NAME, DEVICE_INFORMATION_SERVICE, _sig("2a29")),
    FieldDescriptor(Field.WIFI_SSID, GOPRO_WIFI_AP_SERVICE, "b5f90002-aa8d-11e3-9046-0002a5d5c51b"),
    FieldDescriptor(Field.WIFI_PASSWORD, GOPRO_WIFI_AP_SERVICE, "b5f90003-aa8d-11e3-9046-0002a5d5c51b"),
    FieldDescriptor(
        Field.CLIENT_CHARACTERISTIC_CONFIG,
        GOPRO_WIFI_AP_SERVICE,
        "b5f90005-aa8d-11e3-9046-0002a5d5c51b",
        decode=Decode.OPAQUE,
    ),
    # Meaning not documented by the vendor; surfaced as raw hex.
    FieldDescriptor(
        Field.UNKNOWN_FIELD,
        GOPRO_WIFI_AP_SERVICE,
        "b5f90006-aa8d-11e3-9046-0002a5d5c51b",
        decode=Decode.OPAQUE,
    ),
    FieldDescriptor(Field.BATTERY_LEVEL, BATTERY_SERVICE, _sig("2a19"), decode=Decode.UINT8),
    FieldDescriptor(Field.TX_POWER_LEVEL, TX_POWER_SERVICE, _sig("2a07"), decode=Decode.INT8),
)

FIELD_CATALOG: Mapping[Field, FieldDescriptor] = MappingProxyType({d.field: d for d in _DESCRIPTORS})


def lookup(field: Field) -> FieldDescriptor:
    return FIELD_CATALOG[field]
