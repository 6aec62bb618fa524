"""In-memory ObjectBackend for local development without an object store."""

from __future__ import annotations

import hashlib
import io
import logging
import threading
from typing import BinaryIO

from .errors import BackendError, ObjectMissingError
from .models import ObjectHead

logger = logging.getLogger(__name__)


class MemoryObjectBackend:
    """
    Stores objects in a dict keyed by (bucket, key).

    Buckets listed in ``buckets`` must exist before use, mirroring S3's
    NoSuchBucket behaviour; pass None to accept any bucket.
    Not suitable for production: contents live only as long as the process.
    """

    def __init__(self, buckets: set[str] | None = None) -> None:
        self._buckets = buckets
        self._objects: dict[tuple[str, str], tuple[bytes, ObjectHead]] = {}
        self._lock = threading.Lock()
        logger.info("Initialized in-memory object backend")

    def _check_bucket(self, bucket: str) -> None:
        if self._buckets is not None and bucket not in self._buckets:
            raise BackendError(f"bucket {bucket!r} does not exist", code="NoSuchBucket")

    def put_object(
        self,
        bucket: str,
        key: str,
        body: BinaryIO,
        *,
        content_length: int,
        content_type: str,
        cache_control: str | None = None,
        acl: str | None = None,
    ) -> None:
        self._check_bucket(bucket)
        data = body.read(content_length)
        if len(data) != content_length:
            raise BackendError(
                f"short body for {bucket}/{key}: {len(data)} of {content_length} bytes",
                code="IncompleteBody",
            )
        head = ObjectHead(
            size_bytes=len(data),
            etag=f'"{hashlib.md5(data).hexdigest()}"',
            content_type=content_type,
        )
        with self._lock:
            self._objects[(bucket, key)] = (data, head)

    def head_object(self, bucket: str, key: str) -> ObjectHead:
        self._check_bucket(bucket)
        with self._lock:
            entry = self._objects.get((bucket, key))
        if entry is None:
            raise ObjectMissingError(f"{bucket}/{key} not found", code="NotFound")
        return entry[1]

    def get_object(self, bucket: str, key: str) -> BinaryIO:
        self._check_bucket(bucket)
        with self._lock:
            entry = self._objects.get((bucket, key))
        if entry is None:
            raise ObjectMissingError(f"{bucket}/{key} not found", code="NoSuchKey")
        return io.BytesIO(entry[0])

    def delete_object(self, bucket: str, key: str) -> None:
        self._check_bucket(bucket)
        with self._lock:
            self._objects.pop((bucket, key), None)
