"""Pydantic models for resolved client configuration, adapter options, and host payloads."""

from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .keys import url_origin

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_STORAGE_PATH = "content/images"
DEFAULT_CACHE_MAX_AGE_SECONDS = 60 * 60 * 24 * 7
DEFAULT_OBJECT_ACL = "public-read"


class Credentials(BaseModel):
    """Static access key pair. The secret is never rendered by repr or str."""

    model_config = ConfigDict(frozen=True)

    access_key_id: str = Field(..., min_length=1)
    secret_access_key: SecretStr

    @field_validator("secret_access_key")
    @classmethod
    def secret_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("secret_access_key must be non-empty")
        return v


class ClientConfig(BaseModel):
    """Fully resolved, immutable object-store client configuration.

    Build it with config.resolve_client_config; direct construction validates the
    same invariants but does not derive defaults.
    """

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    endpoint: str = Field(..., description="API base, scheme://host[:port]")
    public_url: str = Field(..., description="Base URL end users fetch objects from")
    credentials: Credentials
    path_style_addressing: Literal[True] = True

    @field_validator("endpoint", "public_url")
    @classmethod
    def must_be_http_url(cls, v: str) -> str:
        if url_origin(v) is None:
            raise ValueError(f"not an http(s) URL with a host: {v!r}")
        return v

    @property
    def endpoint_host(self) -> str:
        return urlsplit(self.endpoint).hostname or ""

    @property
    def is_aws(self) -> bool:
        return self.endpoint_host.endswith("amazonaws.com")


class AdapterOptions(BaseModel):
    """Upload policy and operational knobs that are not part of the client identity."""

    model_config = ConfigDict(frozen=True)

    storage_path: str = DEFAULT_STORAGE_PATH
    cache_max_age_seconds: int = Field(DEFAULT_CACHE_MAX_AGE_SECONDS, ge=0)
    object_acl: str | None = DEFAULT_OBJECT_ACL
    exists_check: bool = True
    operation_timeout_seconds: float | None = Field(None, gt=0)

    @property
    def cache_control(self) -> str | None:
        if not self.cache_max_age_seconds:
            return None
        return f"max-age={self.cache_max_age_seconds}"


class StagedFile(BaseModel):
    """A host upload already written to local temp storage."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(..., min_length=1, description="Local temp file path")
    content_type: str | None = Field(None, alias="type", description="Declared MIME type")
    name: str | None = Field(None, description="Original or host-assigned file name")
    size: int | None = Field(None, ge=0)


class ReadOptions(BaseModel):
    """Arguments to read(): the full object key, used as given."""

    path: str


class ObjectHead(BaseModel):
    """Metadata returned by an existence probe."""

    size_bytes: int = 0
    etag: str | None = None
    content_type: str | None = None
