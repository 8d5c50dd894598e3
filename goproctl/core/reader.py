"""Single-characteristic reads and their decode policies."""

from __future__ import annotations

import logging

from goproctl.core.errors import DecodeError, FieldConfigurationError, FieldReadError, TransportError
from goproctl.core.model import NOT_AVAILABLE, Decode, FieldDescriptor, FieldValue
from goproctl.transports.base import Peripheral

_READ_ONLY = ("read",)
LOGGER = logging.getLogger(__name__)


def decode_value(descriptor: FieldDescriptor, raw: bytes) -> FieldValue:
    if descriptor.decode is Decode.TEXT:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(descriptor.field, raw) from exc
    if descriptor.decode in (Decode.UINT8, Decode.INT8):
        if len(raw) != 1:
            raise DecodeError(descriptor.field, raw)
        return int.from_bytes(raw, "little", signed=descriptor.decode is Decode.INT8)
    return raw.hex()


async def read_field(peripheral: Peripheral, descriptor: FieldDescriptor) -> FieldValue:
    """Read and decode one catalogued field.

    The peripheral must already be connected with services discovered.
    Transport failures, including a dropped link, surface as FieldReadError;
    bytes that do not decode under the descriptor's policy yield
    NOT_AVAILABLE instead.
    """
    if tuple(descriptor.properties) != _READ_ONLY:
        raise FieldConfigurationError(
            f"Field '{descriptor.field}' requests {list(descriptor.properties)}; only read is supported"
        )
    if not peripheral.is_connected():
        raise FieldReadError(
            descriptor.field,
            TransportError(f"Peripheral {peripheral.address} is not connected"),
        )

    try:
        raw = await peripheral.read(
            descriptor.service_uuid,
            descriptor.char_uuid,
            required_properties=_READ_ONLY,
        )
    except TransportError as exc:
        raise FieldReadError(descriptor.field, exc) from exc

    try:
        return decode_value(descriptor, raw)
    except DecodeError as exc:
        LOGGER.debug("%s; using '%s'", exc, NOT_AVAILABLE)
        return NOT_AVAILABLE
