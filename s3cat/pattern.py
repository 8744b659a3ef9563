"""Parse ``/bucket/prefix`` CLI arguments into :class:`Pattern` values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from s3cat.exceptions import InvalidPatternError
from s3cat.models import Pattern

if TYPE_CHECKING:
    from collections.abc import Iterable


def parse_pattern(arg: str) -> Pattern:
    """Split *arg* into bucket and prefix on the first ``/`` after the leading one.

    ``"/b"`` and ``"/b/"`` give an empty prefix; ``"/b/p/q"`` gives prefix
    ``"p/q"``.  The prefix is kept verbatim and never glob-expanded.
    """
    if not arg.startswith("/"):
        raise InvalidPatternError(arg)
    bucket, _sep, prefix = arg[1:].partition("/")
    return Pattern(bucket=bucket, prefix=prefix)


def parse_patterns(args: Iterable[str]) -> list[Pattern]:
    """Parse every argument in order, failing on the first invalid one."""
    return [parse_pattern(arg) for arg in args]
