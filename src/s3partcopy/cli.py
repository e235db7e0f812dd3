"""CLI entry point for s3partcopy."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import httpx
from botocore.exceptions import NoCredentialsError

from s3partcopy.client import S3Client
from s3partcopy.config import S3PartCopyConfig, load_config
from s3partcopy.copy_part import CopyPartResult, CopySourceOptions
from s3partcopy.errors import S3Error
from s3partcopy.logging_config import configure_logging

logger = logging.getLogger("s3partcopy")


def _byte_range(value: str) -> tuple[int, int]:
    """Parse ``FIRST-LAST`` into an inclusive byte range."""
    try:
        first, last = (int(part) for part in value.split("-", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid byte range '{value}', expected FIRST-LAST")
    if first < 0 or last < first:
        raise argparse.ArgumentTypeError(f"invalid byte range '{value}'")
    return first, last


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        prog="s3partcopy",
        description="Copy an existing object (or a byte range of it) into a multipart upload part",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: built-in defaults)",
    )
    parser.add_argument("--bucket", required=True, help="Destination bucket")
    parser.add_argument("--key", required=True, help="Destination object key")
    parser.add_argument("--upload-id", required=True, help="Multipart upload id")
    parser.add_argument("--part-number", type=int, required=True, help="Destination part number")
    parser.add_argument("--source-bucket", required=True, help="Bucket holding the source object")
    parser.add_argument("--source-key", required=True, help="Source object key")
    parser.add_argument(
        "--range",
        type=_byte_range,
        default=None,
        help="Inclusive source byte range FIRST-LAST (default: whole object)",
    )
    parser.add_argument("--version-id", default=None, help="Source object version id")
    parser.add_argument("--if-match", default=None, help="Copy only if the source ETag matches")
    parser.add_argument(
        "--if-none-match", default=None, help="Copy only if the source ETag does not match"
    )
    parser.add_argument(
        "--if-modified-since",
        type=datetime.fromisoformat,
        default=None,
        help="Copy only if the source was modified after this ISO 8601 time",
    )
    parser.add_argument(
        "--if-unmodified-since",
        type=datetime.fromisoformat,
        default=None,
        help="Copy only if the source was not modified after this ISO 8601 time",
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=None,
        help="Provider host, e.g. s3.eu-west-1.amazonaws.com (overrides config)",
    )
    parser.add_argument(
        "--region",
        type=str,
        default=None,
        help="Signing region (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config, default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=["text", "json"],
        help="Log format: 'text' (human-readable) or 'json' (structured)",
    )
    return parser.parse_args(argv)


def options_from_args(args: argparse.Namespace) -> CopySourceOptions:
    return CopySourceOptions(
        byte_range=args.range,
        if_match=args.if_match,
        if_none_match=args.if_none_match,
        if_modified_since=args.if_modified_since,
        if_unmodified_since=args.if_unmodified_since,
        version_id=args.version_id,
    )


async def run(config: S3PartCopyConfig, args: argparse.Namespace) -> CopyPartResult:
    """Issue the copy-part request described by ``args``."""
    async with S3Client(config) as client:
        resp = await client.upload_part_copy(
            bucket=args.bucket,
            key=args.key,
            upload_id=args.upload_id,
            part_number=args.part_number,
            source_bucket=args.source_bucket,
            source_key=args.source_key,
            options=options_from_args(args),
        )
    return CopyPartResult.from_response(resp)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the s3partcopy CLI.

    Loads configuration, applies CLI overrides, issues one UploadPartCopy
    request and prints the result as JSON on stdout.

    Args:
        argv: Argument list to parse. Defaults to sys.argv[1:].
    """
    args = parse_args(argv)

    # Use a basic stderr logger for config-loading errors
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    if args.config is None:
        config = S3PartCopyConfig()
    else:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            logger.error("Config file not found: %s", args.config)
            sys.exit(1)
        except Exception as exc:
            logger.error("Failed to load config: %s", exc)
            sys.exit(1)

    # Apply CLI overrides
    if args.endpoint is not None:
        config.endpoint.host = args.endpoint
    if args.region is not None:
        config.endpoint.region = args.region
    if args.log_level is not None:
        config.logging.level = args.log_level
    if args.log_format is not None:
        config.logging.format = args.log_format

    configure_logging(level=config.logging.level, fmt=config.logging.format)

    try:
        result = asyncio.run(run(config, args))
    except S3Error as exc:
        logger.error(
            "UploadPartCopy failed: %s",
            exc,
            extra={"status": exc.http_status, "request_id": exc.request_id or None},
        )
        sys.exit(1)
    except (httpx.TransportError, NoCredentialsError) as exc:
        logger.error("UploadPartCopy failed: %s", exc)
        sys.exit(1)

    print(json.dumps(result.to_dict()))


if __name__ == "__main__":
    main()
