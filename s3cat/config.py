"""Configuration loading with priority: CLI > env > config file > defaults."""

from __future__ import annotations

import math
import os
import re
import tempfile
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from s3cat.exceptions import ConfigError

CONFIG_DIR = Path.home() / ".config" / "s3cat"
CONFIG_PATH = CONFIG_DIR / "config.yaml"
DEFAULT_TEMP_ROOT = Path(tempfile.gettempdir()) / "s3cat"

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str) -> float:
    """Parse a duration such as ``"30s"``, ``"1m30s"`` or ``"500ms"`` into seconds.

    A bare number is taken as seconds.  ``"0"`` means no deadline.
    """
    text = value.strip()
    if not text:
        raise ConfigError("empty duration")
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ConfigError(f"invalid duration: {value!r}")
        if seconds < 0:
            raise ConfigError(f"negative duration: {value!r}")
        return seconds

    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ConfigError(f"invalid duration: {value!r}")
    return total


def get_config_path(config_path: Path | None = None) -> Path:
    """Return path to config file.

    Uses *config_path* if provided, otherwise S3CAT_CONFIG env var,
    otherwise default CONFIG_PATH.
    """
    if config_path is not None:
        return config_path
    path = os.environ.get("S3CAT_CONFIG")
    return Path(path) if path else CONFIG_PATH


def _load_raw_yaml(path: Path) -> dict[str, object]:
    """Load a YAML file and return its top-level mapping (or empty dict)."""
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid config format in {path}; expected mapping.")
        return {}
    return data


class S3CatConfig(BaseModel):
    """Settings for one s3cat run."""

    region: str | None = None
    endpoint_url: str | None = None
    temp_root: Path = DEFAULT_TEMP_ROOT
    concurrency: int = Field(default=1, ge=1)
    timeout: float | None = None
    verbose: bool = False

    @classmethod
    def _build(cls, values: dict[str, object], source: str) -> S3CatConfig:
        """Validate *values*, turning pydantic errors into :class:`ConfigError`."""
        timeout = values.get("timeout")
        if isinstance(timeout, str):
            values = {**values, "timeout": parse_duration(timeout)}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e

    @classmethod
    def from_file(cls, path: Path = CONFIG_PATH) -> dict[str, object]:
        """Read the ``s3cat`` section of a YAML file as raw overrides."""
        if not path.is_file():
            return {}
        logger.trace(f"Loading config from {path}")
        section = _load_raw_yaml(path).get("s3cat", {})
        if not isinstance(section, dict):
            return {}
        return {k: v for k, v in section.items() if k in cls.model_fields}

    @staticmethod
    def from_env() -> dict[str, object]:
        """Read raw overrides from ``S3CAT_*`` environment variables."""
        env_map = {
            "region": "S3CAT_REGION",
            "endpoint_url": "S3CAT_ENDPOINT_URL",
            "temp_root": "S3CAT_TEMP",
            "concurrency": "S3CAT_CONCURRENCY",
            "timeout": "S3CAT_TIMEOUT",
        }
        overrides: dict[str, object] = {}
        for field, var in env_map.items():
            value = os.environ.get(var)
            if value:
                overrides[field] = value
        return overrides

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        **cli_overrides: object,
    ) -> S3CatConfig:
        """Merge defaults, file, env and CLI: defaults < file < env < CLI.

        CLI overrides whose value is ``None`` are ignored so that unset flags
        do not mask lower layers.
        """
        path = get_config_path(config_path)
        values: dict[str, object] = {}
        values.update(cls.from_file(path))
        values.update(cls.from_env())
        values.update({k: v for k, v in cli_overrides.items() if v is not None})
        return cls._build(values, str(path))
