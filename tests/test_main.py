"""Tests for the s3-asset-storage operator CLI."""

import pytest

from s3_asset_storage.main import build_parser, main


@pytest.fixture
def storage_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """MinIO-style env with the in-memory backend (no network)."""
    monkeypatch.delenv("S3_STORAGE_ENV_FILE", raising=False)
    monkeypatch.delenv("S3_ENDPOINT", raising=False)
    monkeypatch.delenv("S3_REGION", raising=False)
    monkeypatch.setenv("S3_BUCKET", "blog-images")
    monkeypatch.setenv("S3_PUBLIC_URL", "http://localhost:9000/blog-images")
    monkeypatch.setenv("S3_ACCESS_KEY", "minioadmin")
    monkeypatch.setenv("S3_SECRET_KEY", "very-secret-value")
    monkeypatch.setenv("S3_BACKEND", "memory")


def test_check_config_ok(storage_env, capsys) -> None:
    assert main(["check-config"]) == 0
    out = capsys.readouterr().out
    assert "S3_BUCKET: SET" in out
    assert "S3_ENDPOINT: SET (derived from S3_PUBLIC_URL)" in out
    assert "Endpoint: http://localhost:9000" in out
    assert "very-secret-value" not in out


def test_check_config_reports_missing(storage_env, monkeypatch, capsys) -> None:
    monkeypatch.delenv("S3_BUCKET")
    monkeypatch.delenv("S3_SECRET_KEY")
    assert main(["check-config"]) == 1
    captured = capsys.readouterr()
    assert "S3_BUCKET: MISSING" in captured.out
    assert "S3_SECRET_KEY: MISSING" in captured.out
    assert "incomplete" in captured.err


def test_upload_prints_public_url(storage_env, tmp_path, capsys) -> None:
    photo = tmp_path / "photo.jpg"
    photo.write_bytes(b"jpeg")
    assert main(["upload", str(photo), "--target-dir", "2024/05"]) == 0
    assert capsys.readouterr().out.strip() == (
        "http://localhost:9000/blog-images/2024/05/photo.jpg"
    )


def test_exists_prints_false_for_fresh_store(storage_env, capsys) -> None:
    assert main(["exists", "photo.jpg", "--target-dir", "2024/05"]) == 0
    assert capsys.readouterr().out.strip() == "false"


def test_read_missing_object_exits_nonzero(storage_env, capsys) -> None:
    assert main(["read", "2024/05/nope.jpg"]) == 1
    assert "not found" in capsys.readouterr().err


def test_operation_with_bad_config_exits_nonzero(storage_env, monkeypatch, capsys) -> None:
    monkeypatch.delenv("S3_ACCESS_KEY")
    assert main(["delete", "photo.jpg"]) == 1
    assert "S3_ACCESS_KEY: MISSING" in capsys.readouterr().err


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
