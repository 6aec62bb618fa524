"""
CMS storage adapter backed by an S3-compatible object store.

Implements the host's fixed capability contract: save, exists, delete, read
(async) and serve (sync). Each call is an independent request against the
configured bucket; the adapter keeps no state between calls besides the
immutable ClientConfig and the shared backend client.

Backend calls are synchronous and run on a worker thread (asyncio.to_thread).
An operation deadline (AdapterOptions.operation_timeout_seconds or the per-call
``timeout``) raises CanceledError. Task cancellation propagates unchanged.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, BinaryIO, TypeVar, Union

from .backend_factory import backend_from_config
from .config import (
    StorageSettings,
    adapter_options_from_settings,
    get_settings,
    resolve_client_config,
)
from .errors import (
    BackendError,
    CanceledError,
    DeleteError,
    ExistsError,
    LocalReadError,
    ObjectMissingError,
    ObjectNotFoundError,
    ReadError,
    UploadError,
)
from .interfaces import ObjectBackend
from .keys import build_object_key, default_target_dir, default_unique_name, public_url_for
from .models import (
    DEFAULT_CONTENT_TYPE,
    AdapterOptions,
    ClientConfig,
    ReadOptions,
    StagedFile,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UniqueNameHook = Callable[[StagedFile, str], Union[str, Awaitable[str]]]
Middleware = Callable[[Any, Callable[[Any], Awaitable[Any]]], Awaitable[Any]]

_CREDENTIALS_HINT = (
    "check S3_ACCESS_KEY and S3_SECRET_KEY are correct, contain no stray whitespace, "
    "and are accepted by the store"
)
_UPLOAD_HINTS = {
    "InvalidAccessKeyId": _CREDENTIALS_HINT,
    "SignatureDoesNotMatch": _CREDENTIALS_HINT,
    "NoSuchBucket": "bucket {bucket!r} does not exist; create it in the store first",
    "AccessControlListNotSupported": (
        "bucket {bucket!r} has ACLs disabled; set S3_OBJECT_ACL to an empty value"
    ),
}


def _open_staged(path: str) -> tuple[BinaryIO, int]:
    handle = open(path, "rb")
    try:
        size = os.fstat(handle.fileno()).st_size
    except OSError:
        handle.close()
        raise
    return handle, size


class S3StorageAdapter:
    """Storage adapter for uploaded assets on S3, MinIO, Spaces and similar stores."""

    def __init__(
        self,
        config: ClientConfig,
        options: AdapterOptions | None = None,
        *,
        backend: ObjectBackend | None = None,
        unique_name: UniqueNameHook | None = None,
    ) -> None:
        self._config = config
        self._options = options or AdapterOptions()
        self._backend = backend if backend is not None else backend_from_config(config)
        self._unique_name = unique_name or default_unique_name
        logger.info(
            "S3 storage adapter ready: bucket=%s endpoint=%s region=%s aws=%s public_url=%s",
            config.bucket,
            config.endpoint,
            config.region,
            config.is_aws,
            config.public_url,
        )

    @classmethod
    def from_settings(
        cls,
        settings: StorageSettings | None = None,
        *,
        backend: ObjectBackend | None = None,
        unique_name: UniqueNameHook | None = None,
    ) -> S3StorageAdapter:
        """
        Resolve settings (environment when omitted) and build the adapter.

        Raises ConfigurationError before any backend is created if the
        configuration is incomplete.
        """
        settings = settings if settings is not None else get_settings()
        config = resolve_client_config(settings)
        options = adapter_options_from_settings(settings)
        if backend is None:
            backend = backend_from_config(config, settings.backend)
        return cls(config, options, backend=backend, unique_name=unique_name)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def options(self) -> AdapterOptions:
        return self._options

    async def _call(
        self,
        action: str,
        key: str,
        timeout: float | None,
        func: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run a backend call off the event loop, bounded by the operation deadline."""
        limit = timeout if timeout is not None else self._options.operation_timeout_seconds
        call = asyncio.to_thread(func, *args, **kwargs)
        if limit is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=limit)
        except asyncio.TimeoutError as e:
            raise CanceledError(
                f"{action} {key} exceeded its {limit}s deadline", key=key
            ) from e

    def _log_upload_failure(self, key: str, error: BackendError) -> None:
        logger.error("save: upload of %s failed (code=%s): %s", key, error.code, error)
        hint = _UPLOAD_HINTS.get(error.code or "")
        if hint:
            logger.error("save: %s", hint.format(bucket=self._config.bucket))

    def _upload(self, path: str, key: str, content_type: str) -> int:
        """Open, stream and close the staged file on the calling (worker) thread."""
        try:
            handle, size = _open_staged(path)
        except OSError as e:
            logger.error(
                "save: staged file %s is not readable (removed before upload?): %s", path, e
            )
            raise LocalReadError(f"Cannot read staged file {path!r}: {e}", key=key) from e
        with handle:
            self._backend.put_object(
                self._config.bucket,
                key,
                handle,
                content_length=size,
                content_type=content_type,
                cache_control=self._options.cache_control,
                acl=self._options.object_acl,
            )
        return size

    async def save(
        self,
        file: StagedFile | Mapping[str, Any],
        target_dir: str | None = None,
        *,
        timeout: float | None = None,
    ) -> str:
        """
        Upload a staged file and return its public URL.

        The object key is {target_dir}/{unique name}; target_dir defaults to
        {storage_path}/YYYY/MM. The file is streamed from disk, never buffered whole.
        The default unique name is the file's basename, so saving the same name
        into the same directory overwrites the earlier object; pass a
        ``unique_name`` hook that consults ``exists`` to keep both.

        Raises:
            LocalReadError: the staged file cannot be opened.
            UploadError: the put request failed.
            CanceledError: the deadline passed. The upload thread keeps the
                staged file open until its request completes.
        """
        staged = file if isinstance(file, StagedFile) else StagedFile.model_validate(file)
        target_dir = target_dir or default_target_dir(self._options.storage_path)
        name = self._unique_name(staged, target_dir)
        if inspect.isawaitable(name):
            name = await name
        key = build_object_key(target_dir, name)
        content_type = staged.content_type or DEFAULT_CONTENT_TYPE

        try:
            size = await self._call(
                "save", key, timeout, self._upload, staged.path, key, content_type
            )
        except BackendError as e:
            self._log_upload_failure(key, e)
            raise UploadError(f"Upload of {key} failed: {e}", key=key, code=e.code) from e

        url = public_url_for(self._config.public_url, key)
        logger.debug("save: uploaded %s (%d bytes, %s) -> %s", key, size, content_type, url)
        return url

    async def exists(
        self,
        filename: str,
        target_dir: str | None = None,
        *,
        timeout: float | None = None,
    ) -> bool:
        """
        Return True if {target_dir}/{filename} exists, False only when the store
        reports not-found. Any other failure raises ExistsError.
        """
        if not filename:
            raise ValueError("exists: filename is required")
        key = build_object_key(target_dir, filename)
        if not self._options.exists_check:
            logger.debug("exists: probe disabled, reporting %s as absent", key)
            return False
        try:
            await self._call(
                "exists", key, timeout, self._backend.head_object, self._config.bucket, key
            )
        except ObjectMissingError:
            logger.debug("exists: %s not found", key)
            return False
        except BackendError as e:
            logger.error("exists: probe for %s failed (code=%s): %s", key, e.code, e)
            raise ExistsError(
                f"Cannot determine whether {key} exists: {e}", key=key, code=e.code
            ) from e
        return True

    async def delete(
        self,
        filename: str,
        target_dir: str | None = None,
        *,
        timeout: float | None = None,
    ) -> bool:
        """Delete {target_dir}/{filename}. Deleting a missing object also returns True."""
        if not filename:
            raise ValueError("delete: filename is required")
        key = build_object_key(target_dir, filename)
        try:
            await self._call(
                "delete", key, timeout, self._backend.delete_object, self._config.bucket, key
            )
        except ObjectMissingError:
            logger.debug("delete: %s already absent", key)
        except BackendError as e:
            logger.error("delete: %s failed (code=%s): %s", key, e.code, e)
            raise DeleteError(f"Delete of {key} failed: {e}", key=key, code=e.code) from e
        else:
            logger.debug("delete: removed %s", key)
        return True

    async def read(
        self,
        options: ReadOptions | Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> BinaryIO:
        """
        Return a readable stream for the exact key options.path. Caller reads and closes it.

        Raises ObjectNotFoundError (a ReadError) when the key does not exist.
        """
        opts = options if isinstance(options, ReadOptions) else ReadOptions.model_validate(options)
        if not opts.path:
            raise ValueError("read: options.path is required")
        key = opts.path
        try:
            return await self._call(
                "read", key, timeout, self._backend.get_object, self._config.bucket, key
            )
        except ObjectMissingError as e:
            raise ObjectNotFoundError(f"{key} not found", key=key, code=e.code) from e
        except BackendError as e:
            logger.error("read: %s failed (code=%s): %s", key, e.code, e)
            raise ReadError(f"Read of {key} failed: {e}", key=key, code=e.code) from e

    def serve(self) -> Middleware:
        """Return a pass-through http middleware; objects are served from public_url."""

        async def passthrough(request: Any, call_next: Callable[[Any], Awaitable[Any]]) -> Any:
            return await call_next(request)

        return passthrough
