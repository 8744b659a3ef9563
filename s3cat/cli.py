"""CLI entry point for s3cat."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from s3cat import pipeline
from s3cat.config import DEFAULT_TEMP_ROOT, S3CatConfig
from s3cat.exceptions import S3CatError


def _positive_int(value: str) -> int:
    """Argparse type for ``--concurrency``."""
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        msg = f"must be a positive integer, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return number


def configure_logging(*, verbose: bool) -> None:
    """Send all diagnostics to stderr; stdout is reserved for object content."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format="{message}")


class CliApp:
    """Command-line interface for s3cat."""

    def __init__(self) -> None:
        """Initialize the argument parser."""
        self._parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="s3cat",
            usage="%(prog)s [OPTIONS] PATTERN...",
            description=(
                "Download S3 objects matching /bucket/prefix patterns into a "
                "local cache and print their contents (gunzipping *.gz)."
            ),
        )
        parser.add_argument(
            "patterns",
            nargs="*",
            metavar="PATTERN",
            help="Object pattern of the form /bucket[/prefix].",
        )
        parser.add_argument(
            "--region",
            "-r",
            type=str,
            default=None,
            help="AWS region of the buckets.",
        )
        parser.add_argument(
            "--endpoint-url",
            type=str,
            default=None,
            help="Custom S3 endpoint (MinIO and other S3-compatible services).",
        )
        parser.add_argument(
            "--temp",
            "-t",
            type=str,
            default=None,
            help=(
                "Local download directory for objects "
                f"(default: {DEFAULT_TEMP_ROOT})."
            ),
        )
        parser.add_argument(
            "--concurrency",
            "-c",
            type=_positive_int,
            default=None,
            help="Number of parallel downloads (default: 1).",
        )
        parser.add_argument(
            "--timeout",
            "-e",
            type=str,
            default=None,
            help="Deadline for listing and downloading, e.g. 30s or 1m30s (0: none).",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Print detailed progress to stderr.",
        )
        parser.add_argument(
            "--config",
            default=None,
            help=(
                "Path to YAML config (default: ~/.config/s3cat/config.yaml "
                "or S3CAT_CONFIG)."
            ),
        )
        return parser

    def _load_config(self, args: argparse.Namespace) -> S3CatConfig:
        """Merge file, env and flags into one explicit configuration value."""
        return S3CatConfig.load(
            config_path=Path(args.config) if args.config else None,
            region=args.region,
            endpoint_url=args.endpoint_url,
            temp_root=args.temp,
            concurrency=args.concurrency,
            timeout=args.timeout,
            verbose=args.verbose or None,
        )

    def run(self, argv: list[str] | None = None) -> None:
        """Run the CLI with the given arguments."""
        args = self._parser.parse_args(argv)
        if not args.patterns:
            self._parser.print_help(sys.stderr)
            sys.exit(1)

        configure_logging(verbose=args.verbose)
        try:
            config = self._load_config(args)
            configure_logging(verbose=config.verbose)
            pipeline.run(args.patterns, config, sys.stdout.buffer)
        except S3CatError as e:
            sys.exit(str(e))


def main(argv: list[str] | None = None) -> None:
    """Compatibility entry point for setuptools/CLI wrappers."""
    CliApp().run(argv)


if __name__ == "__main__":
    main()
