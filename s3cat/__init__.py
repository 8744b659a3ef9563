"""s3cat -- print S3 objects matching a prefix, cached locally by size."""

from s3cat.cache import build_download_plan, is_cached, local_path
from s3cat.config import S3CatConfig
from s3cat.deadline import Deadline
from s3cat.downloader import DownloadScheduler
from s3cat.exceptions import (
    ConfigError,
    DeadlineExceededError,
    DecompressionError,
    DirectoryError,
    DownloadError,
    InvalidPatternError,
    ListingError,
    LocalFileError,
    OutputError,
    S3CatError,
)
from s3cat.models import DownloadPlan, DownloadStats, Pattern, RemoteObject
from s3cat.pattern import parse_pattern, parse_patterns
from s3cat.s3_utils import iter_remote_objects, list_remote_objects
from s3cat.streamer import OutputStreamer

__all__ = [
    "ConfigError",
    "Deadline",
    "DeadlineExceededError",
    "DecompressionError",
    "DirectoryError",
    "DownloadError",
    "DownloadPlan",
    "DownloadScheduler",
    "DownloadStats",
    "InvalidPatternError",
    "ListingError",
    "LocalFileError",
    "OutputError",
    "OutputStreamer",
    "Pattern",
    "RemoteObject",
    "S3CatConfig",
    "S3CatError",
    "build_download_plan",
    "is_cached",
    "iter_remote_objects",
    "list_remote_objects",
    "local_path",
    "parse_pattern",
    "parse_patterns",
]
