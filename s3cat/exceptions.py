"""Custom exception hierarchy for s3cat.

All library-specific exceptions inherit from ``S3CatError`` so the CLI can
catch ``except S3CatError`` to report any s3cat failure with one line.
"""


class S3CatError(Exception):
    """Base exception for all s3cat errors."""


class ConfigError(S3CatError):
    """Raised when a configuration value cannot be parsed or is out of range."""


class InvalidPatternError(S3CatError):
    """Raised when a PATTERN argument is not of the form ``/bucket[/prefix]``."""

    def __init__(self, pattern: str) -> None:
        """Keep the offending argument for the error message."""
        self.pattern = pattern
        super().__init__(f"PATTERN must start with '/': {pattern!r}")


class DeadlineExceededError(S3CatError):
    """Raised when the run deadline expired or the run was cancelled."""


class ListingError(S3CatError):
    """Raised when listing remote objects failed or was cancelled."""


class DirectoryError(S3CatError):
    """Raised when a local cache directory path exists but is not a directory."""


class DownloadError(S3CatError):
    """Raised when transferring a single object from S3 failed."""


class DecompressionError(S3CatError):
    """Raised when a ``.gz`` object is not a valid gzip stream."""


class LocalFileError(S3CatError):
    """Raised when a local cache file cannot be created, opened or read."""


class OutputError(S3CatError):
    """Raised when writing object content to the output stream failed."""
