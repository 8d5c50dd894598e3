from __future__ import annotations

import asyncio
import dataclasses

import pytest

from fakes import FakePeripheral

from goproctl.core.catalog import lookup
from goproctl.core.errors import (
    DecodeError,
    FieldConfigurationError,
    FieldReadError,
    TransportError,
    TransportTimeoutError,
)
from goproctl.core.model import NOT_AVAILABLE, Field
from goproctl.core.reader import decode_value, read_field


def test_decode_text() -> None:
    assert decode_value(lookup(Field.WIFI_SSID), b"GP24500000") == "GP24500000"


def test_decode_invalid_utf8_raises() -> None:
    with pytest.raises(DecodeError):
        decode_value(lookup(Field.WIFI_SSID), b"\xff\xfe")


def test_decode_integers() -> None:
    assert decode_value(lookup(Field.BATTERY_LEVEL), b"\x55") == 85
    assert decode_value(lookup(Field.TX_POWER_LEVEL), b"\xf4") == -12
    assert decode_value(lookup(Field.TX_POWER_LEVEL), b"\x04") == 4


def test_decode_integer_wrong_length_raises() -> None:
    with pytest.raises(DecodeError):
        decode_value(lookup(Field.BATTERY_LEVEL), b"")
    with pytest.raises(DecodeError):
        decode_value(lookup(Field.BATTERY_LEVEL), b"\x01\x02")


def test_decode_opaque_is_hex() -> None:
    assert decode_value(lookup(Field.UNKNOWN_FIELD), b"\x00\xab") == "00ab"


def test_read_field_issues_single_read_only_access() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1234", {Field.MODEL_NUMBER: b"HERO9 Black"}, connected=True)

    value = asyncio.run(read_field(peripheral, lookup(Field.MODEL_NUMBER)))

    assert value == "HERO9 Black"
    descriptor = lookup(Field.MODEL_NUMBER)
    assert peripheral.reads == [(descriptor.service_uuid, descriptor.char_uuid, ("read",))]


def test_read_field_invalid_utf8_yields_sentinel() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1234", {Field.WIFI_PASSWORD: b"\xc3\x28"}, connected=True)
    assert asyncio.run(read_field(peripheral, lookup(Field.WIFI_PASSWORD))) == NOT_AVAILABLE


def test_read_field_transport_failure_is_distinct_error() -> None:
    cause = TransportTimeoutError("timed out")
    peripheral = FakePeripheral(
        "AA",
        "GoPro 1234",
        connected=True,
        read_errors={Field.BATTERY_LEVEL: cause},
    )

    with pytest.raises(FieldReadError) as exc:
        asyncio.run(read_field(peripheral, lookup(Field.BATTERY_LEVEL)))

    assert exc.value.field is Field.BATTERY_LEVEL
    assert exc.value.cause is cause


def test_read_field_missing_characteristic_is_field_read_error() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1234", connected=True)
    with pytest.raises(FieldReadError):
        asyncio.run(read_field(peripheral, lookup(Field.SERIAL_NUMBER)))


def test_read_field_rejects_non_read_descriptor_before_transport() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1234", connected=True)
    descriptor = dataclasses.replace(lookup(Field.WIFI_SSID), properties=("read", "notify"))

    with pytest.raises(FieldConfigurationError):
        asyncio.run(read_field(peripheral, descriptor))
    assert peripheral.reads == []


def test_read_field_on_disconnected_peripheral_is_field_read_error() -> None:
    peripheral = FakePeripheral("AA", "GoPro 1234", {Field.WIFI_SSID: b"x"})

    with pytest.raises(FieldReadError) as exc:
        asyncio.run(read_field(peripheral, lookup(Field.WIFI_SSID)))

    assert exc.value.field is Field.WIFI_SSID
    assert isinstance(exc.value.cause, TransportError)
    assert peripheral.reads == []
