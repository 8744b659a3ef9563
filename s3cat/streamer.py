"""Write cached object contents to an output stream, line by line.

Objects are emitted strictly in the order given (listing order), one at a
time.  Keys ending in ``.gz`` are gunzipped on the fly.
"""

from __future__ import annotations

import gzip
import zlib
from contextlib import ExitStack
from typing import TYPE_CHECKING, BinaryIO

from loguru import logger

from s3cat.exceptions import DecompressionError, LocalFileError, OutputError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from s3cat.models import RemoteObject


_GZIP_MAGIC = b"\x1f\x8b"


def _strip_eol(line: bytes) -> bytes:
    """Drop a trailing ``\\n`` and the ``\\r`` before it, if any."""
    if line.endswith(b"\n"):
        line = line[:-1]
        if line.endswith(b"\r"):
            line = line[:-1]
    return line


def _check_gzip_magic(stream: BinaryIO, path: Path) -> None:
    """Reject files that do not start with the gzip header, including empty ones."""
    try:
        head = stream.read(len(_GZIP_MAGIC))
        stream.seek(0)
    except OSError as e:
        raise LocalFileError(f"failed to read '{path}': {e}") from e
    if head != _GZIP_MAGIC:
        raise DecompressionError(
            f"failed to open '{path}' as gzip: not a gzip stream"
        )


class OutputStreamer:
    """Emit cached objects to *out* as newline-terminated lines."""

    def __init__(self, out: BinaryIO) -> None:
        """Store the binary output stream (usually ``sys.stdout.buffer``)."""
        self._out = out

    def emit(self, objects: Iterable[RemoteObject], temp_root: Path) -> int:
        """Write every line of every object in order; return the line count."""
        total = 0
        for obj in objects:
            count = 0
            for line in self._iter_lines(obj, temp_root):
                self._write(line + b"\n")
                count += 1
            logger.trace(f"{obj.format_display()}: {count} lines")
            total += count
        try:
            self._out.flush()
        except OSError as e:
            raise OutputError(f"failed to write output: {e}") from e
        return total

    def _write(self, data: bytes) -> None:
        try:
            self._out.write(data)
        except OSError as e:
            raise OutputError(f"failed to write output: {e}") from e

    @staticmethod
    def _iter_lines(obj: RemoteObject, temp_root: Path) -> Iterator[bytes]:
        """Yield the (possibly decompressed) lines of one cached object."""
        path = obj.local_path(temp_root)
        with ExitStack() as stack:
            try:
                stream: BinaryIO = stack.enter_context(path.open("rb"))
            except OSError as e:
                raise LocalFileError(f"failed to open '{path}': {e}") from e
            if obj.is_gzip:
                _check_gzip_magic(stream, path)
                stream = stack.enter_context(gzip.GzipFile(fileobj=stream, mode="rb"))
            try:
                for line in stream:
                    yield _strip_eol(line)
            except (gzip.BadGzipFile, EOFError, zlib.error) as e:
                raise DecompressionError(
                    f"failed to open '{path}' as gzip: {e}"
                ) from e
            except OSError as e:
                raise LocalFileError(f"failed to read '{path}': {e}") from e
