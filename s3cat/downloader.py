"""Download listed S3 objects into the local cache with bounded concurrency.

Already-cached files (same byte size) are skipped.  The first failing
download cancels the shared deadline so that in-flight siblings stop at
their next chunk and no new downloads are started.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger
from tqdm import tqdm

from s3cat.cache import is_cached
from s3cat.exceptions import (
    DeadlineExceededError,
    DirectoryError,
    DownloadError,
    LocalFileError,
)
from s3cat.models import DownloadStats

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from s3cat.deadline import Deadline
    from s3cat.models import RemoteObject
    from s3cat.s3_types import S3Client

_CHUNK_SIZE = 1024 * 1024


def ensure_directory(path: Path) -> None:
    """Create *path* and its parents unless it already is a directory."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except (FileExistsError, NotADirectoryError) as e:
        raise DirectoryError(f"'{path}' is not a directory") from e
    except OSError as e:
        raise LocalFileError(f"failed to create directory '{path}': {e}") from e


# ---------------------------------------------------------------------------
# Task group
# ---------------------------------------------------------------------------


class _TaskGroup:
    """Records the first task failure and cancels the shared deadline."""

    def __init__(self, deadline: Deadline) -> None:
        self._deadline = deadline
        self._lock = threading.Lock()
        self._error: BaseException | None = None
        self.downloaded = 0
        self.bytes_downloaded = 0

    @property
    def failed(self) -> bool:
        with self._lock:
            return self._error is not None

    def succeed(self, size: int) -> None:
        with self._lock:
            self.downloaded += 1
            self.bytes_downloaded += size

    def fail(self, exc: BaseException) -> None:
        """Keep *exc* if it is the first failure; later ones are discarded."""
        with self._lock:
            first = self._error is None
            if first:
                self._error = exc
        if first:
            logger.debug(f"Download failed, cancelling remaining tasks: {exc}")
            self._deadline.cancel()
        else:
            logger.debug(f"Discarding error after cancellation: {exc}")

    def raise_first(self) -> None:
        if self._error is not None:
            raise self._error


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


class DownloadScheduler:
    """Fetch non-cached objects with at most *concurrency* downloads in flight.

    A counting semaphore is the admission gate: a slot is taken before a task
    is submitted and given back when the task ends, whatever the outcome.
    """

    def __init__(
        self,
        s3_client: S3Client,
        temp_root: Path,
        concurrency: int = 1,
        *,
        progress: bool = False,
    ) -> None:
        """Store the client, cache root and concurrency bound (at least 1)."""
        if concurrency < 1:
            msg = f"concurrency must be >= 1, got {concurrency}"
            raise ValueError(msg)
        self._s3 = s3_client
        self._temp_root = temp_root
        self._concurrency = concurrency
        self._progress = progress

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def download_all(
        self,
        objects: Sequence[RemoteObject],
        deadline: Deadline,
    ) -> DownloadStats:
        """Download every object in *objects* that is not cached yet.

        Raises the first error any download task hit.  Files written before
        the failure are left in place.
        """
        stats = DownloadStats(total=len(objects))
        pending: list[RemoteObject] = []
        for obj in objects:
            if is_cached(obj, self._temp_root):
                stats.cached += 1
            else:
                pending.append(obj)
        if not pending:
            return stats

        group_deadline = deadline.derive()
        group = _TaskGroup(group_deadline)
        self._run_pending(pending, group_deadline, group)
        group.raise_first()

        stats.downloaded = group.downloaded
        stats.bytes_downloaded = group.bytes_downloaded
        return stats

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_pending(
        self,
        pending: list[RemoteObject],
        deadline: Deadline,
        group: _TaskGroup,
    ) -> None:
        """Submit downloads one admission slot at a time until done or failed."""
        gate = threading.BoundedSemaphore(self._concurrency)
        with (
            ThreadPoolExecutor(
                max_workers=self._concurrency,
                thread_name_prefix="s3cat-download",
            ) as pool,
            tqdm(
                total=len(pending),
                desc="Downloading",
                unit="obj",
                leave=False,
                disable=not self._progress,
            ) as bar,
        ):
            for obj in pending:
                gate.acquire()
                if group.failed:
                    gate.release()
                    break
                try:
                    deadline.check()
                except DeadlineExceededError as e:
                    gate.release()
                    group.fail(e)
                    break
                pool.submit(self._run_task, obj, deadline, gate, group, bar)

    def _run_task(
        self,
        obj: RemoteObject,
        deadline: Deadline,
        gate: threading.BoundedSemaphore,
        group: _TaskGroup,
        bar: tqdm,
    ) -> None:
        """Worker body: download one object, report to *group*, free the slot."""
        dest = obj.local_path(self._temp_root)
        logger.debug(f"{dest} ... Downloading")
        try:
            written = self._download_one(obj, dest, deadline)
        except Exception as e:  # noqa: BLE001
            group.fail(e)
        else:
            group.succeed(written)
            logger.debug(f"{dest} ... Done")
        finally:
            gate.release()
            bar.update(1)

    def _download_one(
        self,
        obj: RemoteObject,
        dest: Path,
        deadline: Deadline,
    ) -> int:
        """Stream a single S3 object into *dest*, returning the bytes written."""
        deadline.check()
        ensure_directory(dest.parent)
        try:
            fh = dest.open("wb")
        except OSError as e:
            raise LocalFileError(f"failed to create local file '{dest}': {e}") from e

        written = 0
        with fh:
            try:
                resp = self._s3.get_object(Bucket=obj.bucket, Key=obj.key)
            except (BotoCoreError, ClientError) as e:
                raise DownloadError(
                    f"failed to download '{obj.format_display()}': {e}"
                ) from e
            body = resp["Body"]
            try:
                while True:
                    deadline.check()
                    try:
                        chunk = body.read(_CHUNK_SIZE)
                    except (BotoCoreError, ClientError) as e:
                        raise DownloadError(
                            f"failed to download '{obj.format_display()}': {e}"
                        ) from e
                    if not chunk:
                        break
                    try:
                        fh.write(chunk)
                    except OSError as e:
                        raise LocalFileError(
                            f"failed to write local file '{dest}': {e}"
                        ) from e
                    written += len(chunk)
            finally:
                body.close()

        if written != obj.size:
            logger.warning(
                f"{obj.format_display()}: listed size {obj.size} "
                f"but downloaded {written} bytes"
            )
        return written
