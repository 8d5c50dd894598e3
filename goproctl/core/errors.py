"""Domain-specific errors for goproctl."""


class GoproctlError(Exception):
    """Base error for goproctl."""


class ConfigError(GoproctlError):
    """Raised when the settings file cannot be read or fails validation."""


class FieldConfigurationError(GoproctlError):
    """Raised when a field descriptor asks for anything other than a plain read."""


class DeviceDiscoveryError(GoproctlError):
    """Raised when no adapter is usable or no camera could be located."""


class DeviceConnectError(GoproctlError):
    """Raised when the transport refuses or times out a connect attempt."""


class ServiceDiscoveryError(GoproctlError):
    """Raised when GATT service discovery fails after connecting."""


class FieldReadError(GoproctlError):
    """Raised when a single characteristic read fails at the transport level."""

    def __init__(self, field: object, cause: BaseException) -> None:
        super().__init__(f"Reading {field} failed: {cause}")
        self.field = field
        self.cause = cause


class DecodeError(GoproctlError):
    """Raised when raw characteristic bytes do not fit the field's decode policy."""

    def __init__(self, field: object, raw: bytes) -> None:
        super().__init__(f"Could not decode {field} from {raw.hex() or '<empty>'}")
        self.field = field
        self.raw = raw


class TransportError(GoproctlError):
    """Base transport error."""


class TransportTimeoutError(TransportError):
    """Raised when a transport operation exceeds its deadline."""
