"""S3-compatible object storage adapter for CMS uploaded assets."""

from .adapter import S3StorageAdapter
from .config import StorageSettings, get_settings, resolve_client_config
from .errors import (
    BackendError,
    CanceledError,
    ConfigurationError,
    DeleteError,
    ExistsError,
    LocalReadError,
    ObjectMissingError,
    ObjectNotFoundError,
    ReadError,
    StorageAdapterError,
    UploadError,
)
from .interfaces import ObjectBackend
from .keys import build_object_key, public_url_for
from .logging_config import configure_logging
from .models import (
    AdapterOptions,
    ClientConfig,
    Credentials,
    ObjectHead,
    ReadOptions,
    StagedFile,
)

__version__ = "0.1.0"
__all__ = [
    "AdapterOptions",
    "BackendError",
    "CanceledError",
    "ClientConfig",
    "ConfigurationError",
    "Credentials",
    "DeleteError",
    "ExistsError",
    "LocalReadError",
    "ObjectBackend",
    "ObjectHead",
    "ObjectMissingError",
    "ObjectNotFoundError",
    "ReadError",
    "ReadOptions",
    "S3StorageAdapter",
    "StagedFile",
    "StorageAdapterError",
    "StorageSettings",
    "UploadError",
    "build_object_key",
    "configure_logging",
    "get_settings",
    "public_url_for",
    "resolve_client_config",
]
