"""Pydantic models for patterns, listed objects and download results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from pathlib import Path


class Pattern(BaseModel):
    """A bucket plus literal key prefix, parsed from one CLI argument."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    prefix: str = ""

    def format_display(self) -> str:
        """Render back into the ``/bucket/prefix`` form."""
        return f"/{self.bucket}/{self.prefix}"


class RemoteObject(BaseModel):
    """One object returned by the S3 listing."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str
    size: int = Field(ge=0)

    @property
    def is_gzip(self) -> bool:
        """True when the key carries the literal ``.gz`` suffix."""
        return self.key.endswith(".gz")

    def local_path(self, temp_root: Path) -> Path:
        """Deterministic cache location: ``temp_root / bucket / key``."""
        return temp_root / self.bucket / self.key

    def format_display(self) -> str:
        """Human-readable ``/bucket/key`` form for diagnostics."""
        return f"/{self.bucket}/{self.key}"


class PlannedObject(BaseModel):
    """A listed object together with its local cache state for this run."""

    model_config = ConfigDict(frozen=True)

    obj: RemoteObject
    cached: bool


class DownloadPlan(BaseModel):
    """Listed objects in listing order, each tagged as cached or not."""

    model_config = ConfigDict(frozen=True)

    items: list[PlannedObject] = []

    @property
    def objects(self) -> list[RemoteObject]:
        """All listed objects in listing order."""
        return [item.obj for item in self.items]

    @property
    def pending(self) -> list[RemoteObject]:
        """Objects that must be downloaded."""
        return [item.obj for item in self.items if not item.cached]

    @property
    def download_bytes(self) -> int:
        """Total size of the objects that must be downloaded."""
        return sum(item.obj.size for item in self.items if not item.cached)


class DownloadStats(BaseModel):
    """Result counters for a download run."""

    downloaded: int = 0
    cached: int = 0
    total: int = 0
    bytes_downloaded: int = 0
