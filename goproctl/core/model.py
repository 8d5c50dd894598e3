"""Core data models used across catalog, reader, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

NOT_AVAILABLE = "not available"


class Decode(str, Enum):
    TEXT = "text"
    UINT8 = "uint8"
    INT8 = "int8"
    OPAQUE = "opaque"


class Field(str, Enum):
    HW_REVISION = "hw_revision"
    FW_REVISION = "fw_revision"
    SW_REVISION = "sw_revision"
    SERIAL_NUMBER = "serial_number"
    MODEL_NUMBER = "model_number"
    MANUFACTURER_NAME = "manufacturer_name"
    WIFI_SSID = "wifi_ssid"
    WIFI_PASSWORD = "wifi_password"
    CLIENT_CHARACTERISTIC_CONFIG = "client_characteristic_config"
    UNKNOWN_FIELD = "unknown_field"
    BATTERY_LEVEL = "battery_level"
    TX_POWER_LEVEL = "tx_power_level"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldDescriptor:
    field: Field
    service_uuid: str
    char_uuid: str
    decode: Decode = Decode.TEXT
    properties: tuple[str, ...] = ("read",)


@dataclass(frozen=True)
class MatchRules:
    """Selects the target camera among scanned peripherals.

    Name fragments are matched case-insensitively as substrings of the
    advertised name. A non-empty address tuple acts as an allow-list on top.
    """

    name_contains: tuple[str, ...] = ("GoPro",)
    address: tuple[str, ...] = ()


@dataclass(frozen=True)
class DetectedDevice:
    address: str
    name: str | None


# A decoded field value: text, an integer, or the NOT_AVAILABLE sentinel.
FieldValue = str | int


@dataclass(frozen=True)
class WifiInfo:
    ssid: FieldValue
    password: FieldValue


@dataclass(frozen=True)
class FactoryInfo:
    hw_revision: FieldValue
    fw_revision: FieldValue
    sw_revision: FieldValue
    serial_number: FieldValue
    model_number: FieldValue
    manufacturer_name: FieldValue


@dataclass(frozen=True)
class StatusInfo:
    battery_level: FieldValue
    tx_power_level: FieldValue


@dataclass(frozen=True)
class CameraInfo:
    """Every catalogued field in one snapshot."""

    hw_revision: FieldValue
    fw_revision: FieldValue
    sw_revision: FieldValue
    serial_number: FieldValue
    model_number: FieldValue
    manufacturer_name: FieldValue
    wifi_ssid: FieldValue
    wifi_password: FieldValue
    battery_level: FieldValue
    tx_power_level: FieldValue
    client_characteristic_config: FieldValue
    unknown_field: FieldValue
