"""Tests for S3CatConfig layering and duration parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from s3cat.config import DEFAULT_TEMP_ROOT, S3CatConfig, get_config_path, parse_duration
from s3cat.exceptions import ConfigError
from tests.conftest import write_test_config


@pytest.mark.parametrize(
    ("text", "seconds"),
    [
        ("30s", 30.0),
        ("1m30s", 90.0),
        ("500ms", 0.5),
        ("2h", 7200.0),
        ("1.5s", 1.5),
        ("1h2m3s", 3723.0),
        ("45", 45.0),
        ("0", 0.0),
        ("0s", 0.0),
    ],
)
def test_parse_duration(text: str, seconds: float) -> None:
    assert parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize(
    "text",
    ["", "abc", "10x", "s", "1m 30s", "-5", "5s!", "nan", "inf", "-inf"],
)
def test_parse_duration_rejects_garbage(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_duration(text)


def test_defaults() -> None:
    cfg = S3CatConfig.load()
    assert cfg.region is None
    assert cfg.endpoint_url is None
    assert cfg.temp_root == DEFAULT_TEMP_ROOT
    assert cfg.concurrency == 1
    assert cfg.timeout is None
    assert cfg.verbose is False


def test_file_values(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    write_test_config(
        cfg_path,
        region="eu-west-1",
        temp_root=str(tmp_path / "cache"),
        concurrency=4,
        timeout="2m",
        unknown_key="ignored",
    )
    cfg = S3CatConfig.load(config_path=cfg_path)
    assert cfg.region == "eu-west-1"
    assert cfg.temp_root == tmp_path / "cache"
    assert cfg.concurrency == 4
    assert cfg.timeout == pytest.approx(120.0)


def test_config_path_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "custom.yaml"
    write_test_config(cfg_path, concurrency=3)
    monkeypatch.setenv("S3CAT_CONFIG", str(cfg_path))
    assert get_config_path() == cfg_path
    assert S3CatConfig.load().concurrency == 3


def test_env_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "config.yaml"
    write_test_config(cfg_path, region="eu-west-1", concurrency=4)
    monkeypatch.setenv("S3CAT_REGION", "us-east-2")
    monkeypatch.setenv("S3CAT_TIMEOUT", "10s")
    cfg = S3CatConfig.load(config_path=cfg_path)
    assert cfg.region == "us-east-2"
    assert cfg.concurrency == 4
    assert cfg.timeout == pytest.approx(10.0)


def test_cli_overrides_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("S3CAT_CONCURRENCY", "8")
    monkeypatch.setenv("S3CAT_TEMP", "/env/cache")
    cfg = S3CatConfig.load(concurrency=2, temp_root=None)
    assert cfg.concurrency == 2
    assert cfg.temp_root == Path("/env/cache")


def test_zero_concurrency_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("S3CAT_CONCURRENCY", "0")
    with pytest.raises(ConfigError, match="concurrency"):
        S3CatConfig.load()


def test_invalid_timeout_rejected() -> None:
    with pytest.raises(ConfigError, match="duration"):
        S3CatConfig.load(timeout="soon")


def test_non_mapping_file_is_ignored(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("- just\n- a list\n", encoding="utf-8")
    assert S3CatConfig.load(config_path=cfg_path).concurrency == 1
