"""Command line entry point: ``drive-upload <file> [mime_type]``."""

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional

from drive_uploader.client import ResumableUploader, UploadStats
from drive_uploader.config import UploadConfig
from drive_uploader.exceptions import UploadError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

logger = logging.getLogger("drive_uploader")


def _configure_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _parse_args(argv: Optional[list[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="drive-upload",
        description=(
            "Upload a large file through a resumable upload session. "
            "Re-run the same command after an interruption to resume."
        ),
    )
    parser.add_argument("file_name", help="Path of the file to upload.")
    parser.add_argument(
        "mime_type",
        nargs="?",
        default=None,
        help="Content type of the uploaded object (default: DRIVE_UPLOAD_MIME_TYPE "
        "or video/quicktime).",
    )
    parser.add_argument("--chunk-size", type=int, help="Bytes per chunk (default: 262144).")
    parser.add_argument("--state-file", help="File that persists the pending session URL.")
    parser.add_argument("--token-file", help="JSON file holding the access_token.")
    parser.add_argument("--upload-url", help="Session-creation endpoint.")
    parser.add_argument("--env-file", help="Load settings from this .env file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every HTTP request.")
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> UploadConfig:
    config = UploadConfig.from_env(args.env_file)
    overrides = {
        "chunk_size": args.chunk_size,
        "state_path": args.state_file,
        "token_path": args.token_file,
        "upload_url": args.upload_url,
    }
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def _log_progress(stats: UploadStats) -> None:
    logger.debug(
        f"{stats.uploaded_bytes}/{stats.total_bytes} bytes "
        f"({stats.progress_percent:.1f}%, {stats.upload_speed / 1024:.0f} KiB/s)"
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Run one upload and return the process exit status."""
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = _build_config(args)
    except ValueError as exc:
        logger.error(f"Invalid configuration: {exc}")
        return 1

    uploader = ResumableUploader(config)
    try:
        stats = uploader.upload(args.file_name, args.mime_type, progress_callback=_log_progress)
    except (UploadError, OSError) as exc:
        logger.error(f"Upload failed. {exc}")
        return 1

    logger.info(
        f"Done: {stats.total_bytes} bytes, {stats.bytes_this_run} sent this run "
        f"in {stats.elapsed_time:.1f}s"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
