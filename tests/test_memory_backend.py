"""Tests for the in-memory ObjectBackend."""

import io

import pytest

from s3_asset_storage.errors import BackendError, ObjectMissingError
from s3_asset_storage.interfaces import ObjectBackend
from s3_asset_storage.memory_backend import MemoryObjectBackend


def test_satisfies_object_backend_protocol(memory_backend) -> None:
    assert isinstance(memory_backend, ObjectBackend)


def test_put_head_get_delete(memory_backend) -> None:
    memory_backend.put_object(
        "test-assets", "a/b.png", io.BytesIO(b"png"), content_length=3, content_type="image/png"
    )
    head = memory_backend.head_object("test-assets", "a/b.png")
    assert head.size_bytes == 3
    assert head.content_type == "image/png"
    assert memory_backend.get_object("test-assets", "a/b.png").read() == b"png"
    memory_backend.delete_object("test-assets", "a/b.png")
    with pytest.raises(ObjectMissingError):
        memory_backend.head_object("test-assets", "a/b.png")


def test_get_missing_raises(memory_backend) -> None:
    with pytest.raises(ObjectMissingError):
        memory_backend.get_object("test-assets", "nope.png")


def test_unknown_bucket_is_backend_error(memory_backend) -> None:
    with pytest.raises(BackendError) as exc_info:
        memory_backend.head_object("other-bucket", "a.png")
    assert exc_info.value.code == "NoSuchBucket"
    assert not isinstance(exc_info.value, ObjectMissingError)


def test_short_body_rejected(memory_backend) -> None:
    with pytest.raises(BackendError, match="short body"):
        memory_backend.put_object(
            "test-assets", "a.png", io.BytesIO(b"ab"), content_length=5, content_type="image/png"
        )


def test_any_bucket_when_unrestricted() -> None:
    backend = MemoryObjectBackend()
    backend.put_object("x", "k", io.BytesIO(b"1"), content_length=1, content_type="text/plain")
    assert backend.get_object("x", "k").read() == b"1"
