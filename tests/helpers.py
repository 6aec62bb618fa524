"""Shared test helpers for storage adapter tests."""

from __future__ import annotations

from typing import Any

from s3_asset_storage.config import StorageSettings

_RAW_FIELDS = (
    "bucket",
    "region",
    "endpoint",
    "public_url",
    "access_key",
    "secret_key",
)


def make_settings(**overrides: Any) -> StorageSettings:
    """StorageSettings with every raw input given explicitly (None unless overridden),
    so values from the surrounding environment never leak into a test."""
    values: dict[str, Any] = {name: None for name in _RAW_FIELDS}
    values.update(
        backend="memory",
        storage_path="content/images",
        cache_max_age_seconds=604800,
        object_acl="public-read",
        exists_check=True,
        operation_timeout_seconds=None,
    )
    values.update(overrides)
    return StorageSettings(**values)


def complete_settings(**overrides: Any) -> StorageSettings:
    """Settings for a MinIO-style deployment where only the public URL is set."""
    values: dict[str, Any] = {
        "bucket": "blog-images",
        "public_url": "http://localhost:9000/blog-images",
        "access_key": "minioadmin",
        "secret_key": "minioadmin-secret",
    }
    values.update(overrides)
    return make_settings(**values)
