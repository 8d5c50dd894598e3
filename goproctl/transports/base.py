"""Transport interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class Peripheral(Protocol):
    @property
    def address(self) -> str:
        ...

    def advertised_name(self) -> str | None:
        """Local name from the last advertisement, or None if it carried none."""

    def is_connected(self) -> bool:
        ...

    async def connect(self) -> None:
        ...

    async def discover_services(self) -> None:
        ...

    async def read(
        self,
        service_uuid: str,
        char_uuid: str,
        required_properties: Sequence[str] = ("read",),
    ) -> bytes:
        """Read one characteristic value; raises TransportError on failure."""

    async def disconnect(self) -> None:
        ...


class Adapter(Protocol):
    @property
    def name(self) -> str | None:
        ...

    async def scan(self, service_uuids: Sequence[str] | None = None) -> None:
        """Refresh the set of known peripherals."""

    def known_peripherals(self) -> list[Peripheral]:
        ...


class Backend(Protocol):
    def list_adapters(self) -> list[Adapter]:
        ...
