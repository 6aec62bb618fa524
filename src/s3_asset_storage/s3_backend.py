"""S3 implementation of ObjectBackend (AWS S3, MinIO, DigitalOcean Spaces, other S3-compatible stores)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, BinaryIO

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import BackendError, ObjectMissingError
from .models import ClientConfig, ObjectHead

logger = logging.getLogger(__name__)

# HEAD has no response body, so S3 reports a bare "404"; GET reports NoSuchKey
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _error_code(exc: ClientError) -> str | None:
    return exc.response.get("Error", {}).get("Code")


@contextmanager
def _provider_errors(action: str, bucket: str, key: str) -> Iterator[None]:
    """Translate botocore exceptions into backend-boundary errors."""
    try:
        yield
    except ClientError as e:
        code = _error_code(e)
        if code in NOT_FOUND_CODES:
            raise ObjectMissingError(f"{bucket}/{key} not found", code=code) from e
        raise BackendError(f"{action} {bucket}/{key} failed: {e}", code=code) from e
    except BotoCoreError as e:
        # Transport failures (connection refused, DNS, timeouts) carry no S3 error code
        raise BackendError(
            f"{action} {bucket}/{key} failed: {e}", code=type(e).__name__
        ) from e


def build_s3_client(config: ClientConfig) -> Any:
    """Create a boto3 S3 client for the resolved config (SigV4, path-style addressing)."""
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint,
        region_name=config.region,
        aws_access_key_id=config.credentials.access_key_id,
        aws_secret_access_key=config.credentials.secret_access_key.get_secret_value(),
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    )


class S3ObjectBackend:
    """ObjectBackend implementation using boto3."""

    def __init__(self, config: ClientConfig, *, client: Any = None) -> None:
        self._client = client if client is not None else build_s3_client(config)

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
        """Stream body to bucket/key in a single PUT."""
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": body,
            "ContentLength": content_length,
            "ContentType": content_type,
        }
        if cache_control:
            params["CacheControl"] = cache_control
        if acl:
            params["ACL"] = acl
        with _provider_errors("put", bucket, key):
            self._client.put_object(**params)

    def head_object(self, bucket: str, key: str) -> ObjectHead:
        with _provider_errors("head", bucket, key):
            response = self._client.head_object(Bucket=bucket, Key=key)
        size = response.get("ContentLength")
        return ObjectHead(
            size_bytes=int(size) if size is not None else 0,
            etag=response.get("ETag"),
            content_type=response.get("ContentType"),
        )

    def get_object(self, bucket: str, key: str) -> BinaryIO:
        """Return the botocore StreamingBody; nothing is read until the caller reads."""
        with _provider_errors("get", bucket, key):
            response = self._client.get_object(Bucket=bucket, Key=key)
        return response["Body"]

    def delete_object(self, bucket: str, key: str) -> None:
        try:
            with _provider_errors("delete", bucket, key):
                self._client.delete_object(Bucket=bucket, Key=key)
        except ObjectMissingError:
            logger.debug("delete: %s/%s already absent", bucket, key)
