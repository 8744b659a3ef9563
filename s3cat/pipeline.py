"""One s3cat run: parse, list, check cache, download, stream."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from s3cat.cache import build_download_plan
from s3cat.deadline import Deadline
from s3cat.downloader import DownloadScheduler
from s3cat.pattern import parse_patterns
from s3cat.s3_utils import list_remote_objects, make_s3_client
from s3cat.streamer import OutputStreamer

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import BinaryIO

    from s3cat.config import S3CatConfig
    from s3cat.models import DownloadPlan, DownloadStats
    from s3cat.s3_types import S3Client


def format_bytes(size: int) -> str:
    """Format byte size as a human-readable SI string (``1.2 MB``)."""
    if size < 1000:
        return f"{size} B"
    value = float(size)
    for unit in ("kB", "MB", "GB", "TB", "PB"):
        value /= 1000
        if value < 1000:
            return f"{value:.1f} {unit}"
    return f"{value:.1f} EB"


def _log_plan(plan: DownloadPlan, config: S3CatConfig) -> None:
    """Report what will be downloaded; per-object lines only when verbose."""
    for item in plan.items:
        marker = " " if item.cached else "D"
        logger.debug(f"[{marker}] {item.obj.format_display()}")
    logger.debug(f"Download to '{config.temp_root}'")
    logger.info(f"Size : {format_bytes(plan.download_bytes)}")


def run(
    args: Sequence[str],
    config: S3CatConfig,
    out: BinaryIO,
    *,
    s3_client: S3Client | None = None,
) -> DownloadStats:
    """Cat every object matching *args* to *out*, downloading what is missing.

    Patterns are validated before any network activity.  The configured
    timeout bounds the listing and download phases together.
    """
    patterns = parse_patterns(args)
    logger.debug(f"{config!r} => {list(args)!r}")

    deadline = Deadline(config.timeout)
    client = s3_client if s3_client is not None else make_s3_client(config)

    logger.debug("Fetch S3 object list")
    objects = list_remote_objects(client, patterns, deadline)

    plan = build_download_plan(objects, config.temp_root)
    _log_plan(plan, config)

    scheduler = DownloadScheduler(
        client,
        config.temp_root,
        config.concurrency,
        progress=config.verbose,
    )
    stats = scheduler.download_all(plan.objects, deadline)
    logger.debug(
        f"Downloaded {stats.downloaded} objects "
        f"({format_bytes(stats.bytes_downloaded)}), {stats.cached} from cache"
    )

    OutputStreamer(out).emit(plan.objects, config.temp_root)
    return stats
