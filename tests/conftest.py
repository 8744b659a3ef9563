"""Shared pytest fixtures for s3cat tests."""

from __future__ import annotations

import gzip
import sys
from typing import TYPE_CHECKING

import pytest
import yaml
from loguru import logger

from s3cat.models import RemoteObject

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    """Empty local cache root for one test."""
    return tmp_path / "cache"


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages (DEBUG and up) emitted during the test."""
    messages: list[str] = []
    sink_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG")
    try:
        yield messages
    finally:
        logger.remove(sink_id)


@pytest.fixture(autouse=True)
def _restore_loguru() -> Iterator[None]:
    """Undo handler changes made by ``configure_logging`` in CLI tests."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture(autouse=True)
def _isolated_env(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Keep user config files and S3CAT_* variables out of every test."""
    monkeypatch.setenv("S3CAT_CONFIG", str(tmp_path / "no-config.yaml"))
    for var in (
        "S3CAT_REGION",
        "S3CAT_ENDPOINT_URL",
        "S3CAT_TEMP",
        "S3CAT_CONCURRENCY",
        "S3CAT_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def gz(text: str) -> bytes:
    """Gzip-compress *text* (UTF-8)."""
    return gzip.compress(text.encode("utf-8"))


def make_object(key: str, size: int, bucket: str = "bucket") -> RemoteObject:
    """Create a RemoteObject with sensible defaults."""
    return RemoteObject(bucket=bucket, key=key, size=size)


def seed_cache(temp_root: Path, bucket: str, key: str, data: bytes) -> Path:
    """Write *data* where s3cat caches ``/bucket/key`` and return the path."""
    path = temp_root / bucket / key
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def write_test_config(path: Path, **values: object) -> None:
    """Write a minimal config YAML with an ``s3cat`` section."""
    path.write_text(yaml.safe_dump({"s3cat": values}), encoding="utf-8")
