"""S3 client construction and paginated object listing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from s3cat.exceptions import DeadlineExceededError, ListingError
from s3cat.models import RemoteObject

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from s3cat.config import S3CatConfig
    from s3cat.deadline import Deadline
    from s3cat.models import Pattern
    from s3cat.s3_types import S3Client


def make_s3_client(config: S3CatConfig) -> S3Client:
    """Create a boto3 S3 client for the configured region and endpoint."""
    client: S3Client = boto3.Session(region_name=config.region or None).client(
        "s3",
        endpoint_url=config.endpoint_url or None,
    )
    return client


def iter_remote_objects(
    s3_client: S3Client,
    pattern: Pattern,
    deadline: Deadline,
) -> Iterator[RemoteObject]:
    """Yield every object under *pattern*, following continuation tokens.

    The deadline is checked before each page request; expiry or
    cancellation aborts pagination with :class:`ListingError`.
    """
    kwargs: dict[str, str] = {"Bucket": pattern.bucket}
    if pattern.prefix:
        kwargs["Prefix"] = pattern.prefix
    page = 0
    while True:
        try:
            deadline.check()
        except DeadlineExceededError as e:
            raise ListingError(
                f"failed to list S3 objects under {pattern.format_display()!r}: {e}"
            ) from e
        page += 1
        try:
            resp = s3_client.list_objects_v2(**kwargs)
        except (BotoCoreError, ClientError) as e:
            raise ListingError(
                f"failed to list S3 objects under {pattern.format_display()!r}: {e}"
            ) from e
        contents = resp.get("Contents", [])
        logger.trace(
            f"{pattern.format_display()}: page {page} with {len(contents)} objects"
        )
        for obj in contents:
            yield RemoteObject(
                bucket=pattern.bucket,
                key=obj["Key"],
                size=int(obj.get("Size", 0)),
            )
        token = resp.get("NextContinuationToken")
        if not token:
            break
        kwargs["ContinuationToken"] = token


def list_remote_objects(
    s3_client: S3Client,
    patterns: Iterable[Pattern],
    deadline: Deadline,
) -> list[RemoteObject]:
    """List all patterns in argument order and concatenate the results.

    Overlapping patterns are not deduplicated.
    """
    objects: list[RemoteObject] = []
    for pattern in patterns:
        before = len(objects)
        objects.extend(iter_remote_objects(s3_client, pattern, deadline))
        logger.debug(
            f"Listed {len(objects) - before} objects under {pattern.format_display()}"
        )
    return objects
