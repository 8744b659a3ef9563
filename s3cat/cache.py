"""Local cache freshness check: a cached copy is a file of the remote size."""

from __future__ import annotations

import stat
from typing import TYPE_CHECKING

from s3cat.models import DownloadPlan, PlannedObject

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from s3cat.models import RemoteObject


def local_path(obj: RemoteObject, temp_root: Path) -> Path:
    """Return the deterministic cache path ``temp_root / bucket / key``."""
    return obj.local_path(temp_root)


def is_cached(obj: RemoteObject, temp_root: Path) -> bool:
    """Return True when a regular file of exactly ``obj.size`` bytes is cached.

    Any stat failure, including a missing file, counts as "not cached".
    """
    try:
        st = local_path(obj, temp_root).stat()
    except OSError:
        return False
    return stat.S_ISREG(st.st_mode) and st.st_size == obj.size


def build_download_plan(
    objects: Iterable[RemoteObject],
    temp_root: Path,
) -> DownloadPlan:
    """Tag every listed object with its cache state, keeping listing order."""
    return DownloadPlan(
        items=[
            PlannedObject(obj=obj, cached=is_cached(obj, temp_root))
            for obj in objects
        ],
    )
