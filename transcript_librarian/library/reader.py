"""Read the transcript library directory tree into memory."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from transcript_librarian.library.models import (
    METADATA_FILENAME,
    CategoryFolder,
    LibraryNode,
    TranscriptEntry,
    TranscriptMetadata,
)

logger = logging.getLogger(__name__)

ROOT_NAME = "transcripts"


def load_metadata(directory: Path) -> TranscriptMetadata | None:
    """Return the directory's metadata record, or None if absent or malformed."""
    metadata_path = directory / METADATA_FILENAME
    try:
        content = metadata_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    try:
        return TranscriptMetadata.model_validate(json.loads(content))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.debug("Ignoring malformed %s: %s", metadata_path, exc)
        return None


def _read_dir(directory: Path, relative: str) -> list[LibraryNode]:
    nodes: list[LibraryNode] = []

    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if not entry.is_dir():
            continue  # the archive is directory-only

        rel_path = f"{relative}/{entry.name}" if relative else entry.name
        metadata = load_metadata(entry)

        if metadata is not None:
            nodes.append(TranscriptEntry(name=entry.name, path=rel_path, metadata=metadata))
        else:
            nodes.append(
                CategoryFolder(
                    name=entry.name,
                    path=rel_path,
                    children=_read_dir(entry, rel_path),
                )
            )

    return nodes


def read_library(root: Path) -> CategoryFolder:
    """Walk *root* and return the synthetic root folder of the library tree.

    A missing root is a first-run condition and yields an empty tree.  A
    directory is a transcript entry iff it holds a valid metadata record;
    every other directory is a category folder and is recursed into.
    """
    if not root.is_dir():
        logger.info("Library root %s does not exist yet", root)
        return CategoryFolder(name=ROOT_NAME, path="")

    return CategoryFolder(name=ROOT_NAME, path="", children=_read_dir(root, ""))
