class KiikkuukoError(Exception):
    """Base exception for all recoverable failures in the unit pipeline."""


class AssetUnavailable(KiikkuukoError):
    """Raised when the bundled unit snapshot is missing or cannot be decoded."""


class NetworkFailure(KiikkuukoError):
    """Raised on transport errors, timeouts and non-2xx responses from the Service Map API."""


class DecodeFailure(KiikkuukoError):
    """Raised when a payload is not JSON or does not match the unit schema."""


class PersistenceReadFailure(KiikkuukoError):
    """Raised when a stored value exists but cannot be read back."""


class PersistenceWriteFailure(KiikkuukoError):
    """Raised when a value cannot be written to durable storage."""
