"""Command-line entry point.

Usage:
    transcript-librarian https://www.youtube.com/watch?v=...
    transcript-librarian ~/Videos/talk.mp4 --library-root ./transcripts
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

from transcript_librarian.config import get_settings
from transcript_librarian.errors import LibrarianError
from transcript_librarian.library.models import METADATA_FILENAME
from transcript_librarian.library.writer import (
    RAW_JSON_FILENAME,
    RAW_TEXT_FILENAME,
    TRANSCRIPT_FILENAME,
)
from transcript_librarian.pipeline import Pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transcript-librarian",
        description="Transcribe a video or audio source and file it into the transcript library.",
    )
    parser.add_argument("source", help="Video URL or path to a local audio/video file")
    parser.add_argument(
        "--library-root",
        type=Path,
        default=None,
        help="Library directory (default: LIBRARY_ROOT or ~/Documents/transcripts)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    started = time.perf_counter()
    try:
        settings = get_settings()
        if args.library_root is not None:
            settings = settings.model_copy(
                update={"library_root": args.library_root.expanduser()}
            )
        settings.require_api_keys()

        output_dir = asyncio.run(Pipeline.from_settings(settings).run(args.source))
    except LibrarianError as exc:
        logger.error("Fatal: %s", exc)
        return 1
    except Exception:
        logger.exception("Fatal: unexpected error")
        return 1

    print(f"\nSaved files to:\n  {output_dir}\n")
    print("Files:")
    for name in (RAW_TEXT_FILENAME, RAW_JSON_FILENAME, TRANSCRIPT_FILENAME, METADATA_FILENAME):
        print(f"  • {name}")
    logger.info("Total: %.2fs", time.perf_counter() - started)
    return 0


if __name__ == "__main__":
    sys.exit(main())
