"""
Operator CLI: validate storage configuration and run single adapter operations
against the configured store. Reads S3_* env vars (and S3_STORAGE_ENV_FILE).

Usage:
  s3-asset-storage check-config
  s3-asset-storage upload ./photo.png --target-dir 2024/05
  s3-asset-storage exists photo.png --target-dir 2024/05
  s3-asset-storage delete photo.png --target-dir 2024/05
  s3-asset-storage read 2024/05/photo.png --output ./copy.png
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
import shutil
import sys
from pathlib import Path

from .adapter import S3StorageAdapter
from .config import STATUS_SET, bootstrap_env, check_settings, describe_fields, get_settings
from .errors import StorageAdapterError
from .logging_config import configure_logging
from .models import StagedFile

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


def _check_config() -> int:
    fields, region, endpoint, source = check_settings(get_settings())
    print(describe_fields(fields, region=region, endpoint_source=source))
    if any(status != STATUS_SET for status in fields.values()):
        print("Configuration is incomplete.", file=sys.stderr)
        return 1
    print(f"Endpoint: {endpoint}")
    return 0


async def _run(args: argparse.Namespace) -> int:
    adapter = S3StorageAdapter.from_settings()
    if args.command == "upload":
        path = Path(args.file)
        content_type = args.content_type or mimetypes.guess_type(path.name)[0]
        staged = StagedFile(path=str(path), type=content_type, name=args.name or path.name)
        print(await adapter.save(staged, args.target_dir))
    elif args.command == "exists":
        found = await adapter.exists(args.name, args.target_dir)
        print("true" if found else "false")
    elif args.command == "delete":
        await adapter.delete(args.name, args.target_dir)
    elif args.command == "read":
        stream = await adapter.read({"path": args.key})
        try:
            if args.output:
                with open(args.output, "wb") as out:
                    shutil.copyfileobj(stream, out, COPY_CHUNK_SIZE)
            else:
                shutil.copyfileobj(stream, sys.stdout.buffer, COPY_CHUNK_SIZE)
                sys.stdout.buffer.flush()
        finally:
            stream.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-asset-storage",
        description="Check configuration and run storage adapter operations.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check-config", help="Show resolved configuration status")

    upload = sub.add_parser("upload", help="Upload a local file, print its public URL")
    upload.add_argument("file")
    upload.add_argument("--target-dir", default=None)
    upload.add_argument("--content-type", default=None)
    upload.add_argument("--name", default=None, help="Object file name (default: basename)")

    for command, help_text in (
        ("exists", "Print true/false for an object"),
        ("delete", "Delete an object"),
    ):
        p = sub.add_parser(command, help=help_text)
        p.add_argument("name")
        p.add_argument("--target-dir", default=None)

    read = sub.add_parser("read", help="Stream an object by full key")
    read.add_argument("key")
    read.add_argument("--output", default=None, help="Write to file instead of stdout")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    bootstrap_env()
    configure_logging()
    if args.command == "check-config":
        return _check_config()
    try:
        return asyncio.run(_run(args))
    except (StorageAdapterError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
