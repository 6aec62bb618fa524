"""
Backend facade: build an ObjectBackend by name (s3 | memory).

Implementations are imported lazily so choosing one never imports the other's
dependencies.
"""

from .interfaces import ObjectBackend
from .models import ClientConfig

BACKEND_S3 = "s3"
BACKEND_MEMORY = "memory"


def _backend_name(name: str | None) -> str:
    """Normalize a backend name; default s3."""
    return (name or BACKEND_S3).strip().lower()


def backend_from_config(config: ClientConfig, name: str | None = None) -> ObjectBackend:
    """Return the ObjectBackend implementation selected by name for this config."""
    backend = _backend_name(name)
    if backend == BACKEND_S3:
        from .s3_backend import S3ObjectBackend

        return S3ObjectBackend(config)
    if backend == BACKEND_MEMORY:
        from .memory_backend import MemoryObjectBackend

        return MemoryObjectBackend(buckets={config.bucket})
    raise NotImplementedError(
        f"S3_BACKEND={backend!r} is not implemented; use {BACKEND_S3!r} or {BACKEND_MEMORY!r}."
    )
