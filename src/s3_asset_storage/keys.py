"""
Object key and URL construction.

Key format: {target_dir}/{file_name}, forward slashes only, no leading slash,
no "." or ".." segments. Public URL format: {public_url}/{key}.

Builders raise ValueError for input that cannot form a valid key.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from .models import StagedFile


def url_origin(url: str) -> str | None:
    """
    Return scheme://host[:port] for an http(s) URL, dropping userinfo, path, query.

    Returns None when the URL has another scheme, no host, or an unparseable port.
    """
    if not url:
        return None
    parsed = urlsplit(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    try:
        parsed.port
    except ValueError:
        return None
    host = parsed.netloc.rpartition("@")[2]
    return f"{parsed.scheme}://{host}"


def _segments(path: str) -> list[str]:
    parts = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            raise ValueError(f"Object key may not contain '..' segments: {path!r}")
        parts.append(segment)
    return parts


def build_object_key(target_dir: str | None, file_name: str) -> str:
    """
    Join target_dir and file_name into a normalized object key.

    Backslashes are treated as separators so keys are identical on every platform.
    """
    if not file_name:
        raise ValueError("file_name is required to build an object key")
    parts = _segments(target_dir or "") + _segments(file_name)
    if not parts:
        raise ValueError(f"Object key is empty for {target_dir!r} + {file_name!r}")
    return "/".join(parts)


def default_target_dir(storage_path: str, now: datetime | None = None) -> str:
    """Date-partitioned directory under storage_path: {storage_path}/YYYY/MM (UTC)."""
    now = now or datetime.now(timezone.utc)
    return build_object_key(storage_path, f"{now:%Y}/{now:%m}")


def default_unique_name(file: StagedFile, target_dir: str) -> str:
    """Basename of the host-assigned name, else of the staged path."""
    source = file.name or file.path
    base = source.replace("\\", "/").rsplit("/", 1)[-1]
    if not base:
        raise ValueError(f"Cannot derive a file name from {source!r}")
    return base


def public_url_for(public_url: str, key: str) -> str:
    """Public URL for an object key."""
    return f"{public_url.rstrip('/')}/{key}"
