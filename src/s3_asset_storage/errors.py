"""
Error taxonomy for the storage adapter.

Configuration errors are fatal and raised once at construction. Operation errors
are raised per call and chain the underlying provider failure. Backends raise
only ObjectMissingError / BackendError; the adapter maps those to the
operation errors below.
"""

from __future__ import annotations

from collections.abc import Mapping


class StorageAdapterError(RuntimeError):
    """Base class for every error raised by this package."""


class ConfigurationError(StorageAdapterError):
    """Raised when required configuration is missing or malformed.

    ``fields`` maps each checked field (env var name) to SET, MISSING or INVALID.
    """

    def __init__(self, message: str, fields: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.fields: dict[str, str] = dict(fields or {})


class OperationError(StorageAdapterError):
    """An object-store operation failed for ``key``."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.key = key
        self.code = code


class UploadError(OperationError):
    """Put request failed (auth, missing bucket, network)."""


class LocalReadError(OperationError):
    """The staged upload could not be opened or read from local storage."""


class ExistsError(OperationError):
    """Existence probe failed for a reason other than not-found."""


class DeleteError(OperationError):
    """Delete request failed."""


class ReadError(OperationError):
    """Get request failed."""


class ObjectNotFoundError(ReadError):
    """Get request failed because the object does not exist."""


class CanceledError(OperationError):
    """The operation deadline passed before the store answered."""


# --- Backend boundary ---


class BackendError(StorageAdapterError):
    """Provider or transport failure reported by an ObjectBackend."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ObjectMissingError(BackendError):
    """The provider reported that the requested key does not exist."""
