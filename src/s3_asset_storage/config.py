"""
Storage config from environment, and resolution into a validated ClientConfig.

StorageSettings holds the raw, possibly incomplete inputs (pydantic-settings,
S3_* env vars). resolve_client_config is a pure function of those inputs:

1. endpoint: S3_ENDPOINT verbatim, else scheme://host[:port] of S3_PUBLIC_URL,
   else the AWS regional endpoint when S3_REGION was given.
2. region: S3_REGION, else us-east-1.
3. every required field is checked and all problems are reported in one
   ConfigurationError. Secret values are never included.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .keys import url_origin
from .models import (
    DEFAULT_CACHE_MAX_AGE_SECONDS,
    DEFAULT_OBJECT_ACL,
    DEFAULT_STORAGE_PATH,
    AdapterOptions,
    ClientConfig,
    Credentials,
)

DEFAULT_REGION = "us-east-1"
AWS_ENDPOINT_TEMPLATE = "https://s3.{region}.amazonaws.com"

STATUS_SET = "SET"
STATUS_MISSING = "MISSING"
STATUS_INVALID = "INVALID"

ENDPOINT_EXPLICIT = "explicit"
ENDPOINT_FROM_PUBLIC_URL = "derived from S3_PUBLIC_URL"
ENDPOINT_AWS_DEFAULT = "AWS regional default"
ENDPOINT_UNRESOLVED = "unresolved"


class StorageSettings(BaseSettings):
    """
    All environment variables used by the storage adapter.
    Env vars are read from os.environ with the S3_ prefix (e.g. S3_BUCKET).
    Blank values count as unset.
    """

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=None,  # .env is loaded by bootstrap_env() so os.environ is the single source
        extra="ignore",
    )

    bucket: str | None = None
    region: str | None = None
    endpoint: str | None = None
    public_url: str | None = None
    access_key: str | None = None
    secret_key: SecretStr | None = None

    # Backend implementation: s3 | memory
    backend: str = "s3"

    storage_path: str = DEFAULT_STORAGE_PATH
    cache_max_age_seconds: int = DEFAULT_CACHE_MAX_AGE_SECONDS
    # Empty disables the ACL header (buckets with object ownership enforced)
    object_acl: str | None = DEFAULT_OBJECT_ACL
    # false: exists() answers False without probing, so the host always overwrites
    exists_check: bool = True
    operation_timeout_seconds: float | None = None

    @field_validator(
        "bucket",
        "region",
        "endpoint",
        "public_url",
        "access_key",
        "secret_key",
        "object_acl",
        "operation_timeout_seconds",
        mode="before",
    )
    @classmethod
    def blank_as_unset(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


def get_settings() -> StorageSettings:
    """Return validated settings from current environment."""
    return StorageSettings()


def bootstrap_env() -> None:
    """
    Load .env from path in S3_STORAGE_ENV_FILE if set.
    Call once at startup before get_settings(); existing env vars win over the file.
    """
    import os

    import dotenv

    path = os.environ.get("S3_STORAGE_ENV_FILE")
    if path:
        dotenv.load_dotenv(Path(path).resolve())


def _resolve_endpoint(settings: StorageSettings) -> tuple[str | None, str]:
    if settings.endpoint:
        return settings.endpoint, ENDPOINT_EXPLICIT
    derived = url_origin(settings.public_url or "")
    if derived:
        return derived, ENDPOINT_FROM_PUBLIC_URL
    if settings.region:
        return AWS_ENDPOINT_TEMPLATE.format(region=settings.region), ENDPOINT_AWS_DEFAULT
    return None, ENDPOINT_UNRESOLVED


def _presence(value: object) -> str:
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    return STATUS_SET if value else STATUS_MISSING


def _url_status(value: str | None) -> str:
    if not value:
        return STATUS_MISSING
    return STATUS_SET if url_origin(value) else STATUS_INVALID


def describe_fields(
    fields: dict[str, str], *, region: str, endpoint_source: str
) -> str:
    """Human-readable status table; used in errors and by the check-config command."""
    lines = []
    for name, status in fields.items():
        if name == "S3_REGION":
            lines.append(f"  {name}: {status} ({region})")
        elif name == "S3_ENDPOINT":
            lines.append(f"  {name}: {status} ({endpoint_source})")
        else:
            lines.append(f"  {name}: {status}")
    return "\n".join(lines)


def check_settings(settings: StorageSettings) -> tuple[dict[str, str], str, str | None, str]:
    """
    Resolve endpoint and region and return (field statuses, region, endpoint, endpoint source)
    without raising.
    """
    endpoint, source = _resolve_endpoint(settings)
    region = settings.region or DEFAULT_REGION
    fields = {
        "S3_BUCKET": _presence(settings.bucket),
        "S3_REGION": STATUS_SET,
        "S3_ENDPOINT": _url_status(endpoint),
        "S3_PUBLIC_URL": _url_status(settings.public_url),
        "S3_ACCESS_KEY": _presence(settings.access_key),
        "S3_SECRET_KEY": _presence(settings.secret_key),
    }
    return fields, region, endpoint, source


def resolve_client_config(settings: StorageSettings) -> ClientConfig:
    """
    Build a ClientConfig from raw settings or raise ConfigurationError naming
    every missing or invalid field.
    """
    fields, region, endpoint, source = check_settings(settings)
    if any(status != STATUS_SET for status in fields.values()):
        raise ConfigurationError(
            "Missing or invalid S3 configuration. Please check your environment variables:\n"
            + describe_fields(fields, region=region, endpoint_source=source),
            fields,
        )
    return ClientConfig(
        bucket=settings.bucket,
        region=region,
        endpoint=endpoint,
        public_url=settings.public_url.rstrip("/"),
        credentials=Credentials(
            access_key_id=settings.access_key,
            secret_access_key=settings.secret_key,
        ),
    )


def adapter_options_from_settings(settings: StorageSettings) -> AdapterOptions:
    """Build AdapterOptions (upload policy, exists policy, deadline) from settings."""
    return AdapterOptions(
        storage_path=settings.storage_path,
        cache_max_age_seconds=settings.cache_max_age_seconds,
        object_acl=settings.object_acl,
        exists_check=settings.exists_check,
        operation_timeout_seconds=settings.operation_timeout_seconds,
    )
