"""Persist a finished transcript into the library."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from transcript_librarian.library.models import METADATA_FILENAME, TranscriptMetadata
from transcript_librarian.transcription.models import SpeechResult

logger = logging.getLogger(__name__)

RAW_TEXT_FILENAME = "transcription-raw.txt"
RAW_JSON_FILENAME = "transcription-raw.json"
TRANSCRIPT_FILENAME = "transcription.txt"


@dataclass
class TranscriptArtifacts:
    """Everything written into one transcript directory."""

    speech: SpeechResult
    transcript: str
    metadata: TranscriptMetadata

    def files(self) -> dict[str, str]:
        return {
            RAW_TEXT_FILENAME: self.speech.text,
            RAW_JSON_FILENAME: json.dumps(self.speech.raw, indent=2, ensure_ascii=False),
            TRANSCRIPT_FILENAME: self.transcript,
            METADATA_FILENAME: self.metadata.to_json(),
        }


def destination_dir(root: Path, category: str, title: str, iso_date: str) -> Path:
    """Return ``root/<category>/<title>-<iso_date>``."""
    return root / category / f"{title}-{iso_date}"


async def write_artifacts(output_dir: Path, artifacts: TranscriptArtifacts) -> list[Path]:
    """Create *output_dir* and write the four artifact files concurrently."""
    output_dir.mkdir(parents=True, exist_ok=True)

    files = artifacts.files()
    paths = [output_dir / name for name in files]
    await asyncio.gather(
        *(
            asyncio.to_thread(path.write_text, content, encoding="utf-8")
            for path, content in zip(paths, files.values())
        )
    )

    logger.info("Saved %d files to %s", len(paths), output_dir)
    return paths
