"""End-to-end pipeline: acquire -> transcribe -> assemble -> classify -> file."""

from __future__ import annotations

import asyncio
import logging
import tempfile
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from transcript_librarian.acquisition.media import MediaSource, is_url, resolve_local
from transcript_librarian.acquisition.tools import MediaTools
from transcript_librarian.classification.classifier import Classifier
from transcript_librarian.classification.models import OrganizationPlan
from transcript_librarian.config import Settings
from transcript_librarian.errors import InputValidationError
from transcript_librarian.library.models import ThemeClassification, TranscriptMetadata
from transcript_librarian.library.reader import read_library
from transcript_librarian.library.writer import (
    TranscriptArtifacts,
    destination_dir,
    write_artifacts,
)
from transcript_librarian.transcription.assembler import words_to_transcript
from transcript_librarian.transcription.models import SpeechResult
from transcript_librarian.transcription.normalizer import normalize_words
from transcript_librarian.transcription.service import AssemblyAITranscriber

logger = logging.getLogger(__name__)


@contextmanager
def stage(name: str) -> Iterator[None]:
    """Log how long the wrapped pipeline stage took."""
    started = time.perf_counter()
    yield
    logger.info("%s took %.2fs", name, time.perf_counter() - started)


def temp_audio_path() -> Path:
    """Per-run scratch file for downloaded or extracted audio."""
    return Path(tempfile.gettempdir()) / f"yt-audio-{int(time.time() * 1000)}.m4a"


def remove_temp_audio(path: Path) -> None:
    """Delete *path* if present; failures are logged, never raised."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove temporary audio %s: %s", path, exc)


def build_metadata(
    source: MediaSource,
    plan: OrganizationPlan,
    speech: SpeechResult,
    iso_date: str,
) -> TranscriptMetadata:
    return TranscriptMetadata(
        source_url=source.source_url,
        title=source.title,
        date=iso_date,
        theme=ThemeClassification(
            primary_theme=plan.category,
            sub_theme=source.title,
            folder_name=plan.category,
            confidence=plan.confidence,
            summary=plan.reasoning,
        ),
        language=speech.language_code,
        confidence=speech.language_confidence,
        words_detected=len(speech.words),
    )


class Pipeline:
    """Run one input through transcription and file it into the library."""

    def __init__(
        self,
        settings: Settings,
        media: MediaTools,
        transcriber: AssemblyAITranscriber,
        classifier: Classifier,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.settings = settings
        self.media = media
        self.transcriber = transcriber
        self.classifier = classifier
        self.today = today

    @classmethod
    def from_settings(cls, settings: Settings) -> Pipeline:
        return cls(
            settings,
            media=MediaTools(),
            transcriber=AssemblyAITranscriber(settings),
            classifier=Classifier.from_settings(settings),
        )

    async def run(self, raw_input: str) -> Path:
        """Process *raw_input* (URL or local path) and return the output directory.

        The temporary audio file is removed whether or not the run succeeds.
        """
        tmp_audio = temp_audio_path()
        try:
            return await self._run(raw_input, tmp_audio)
        finally:
            remove_temp_audio(tmp_audio)

    async def _acquire(self, raw_input: str, tmp_audio: Path) -> tuple[MediaSource, Path]:
        if is_url(raw_input):
            with stage("Video metadata"):
                title = await self.media.get_video_title(raw_input)
            with stage("Download"):
                await self.media.download_audio(raw_input, tmp_audio)
            return MediaSource(source_url=raw_input, title=title), tmp_audio

        source = resolve_local(raw_input)
        if source.local_path is None:
            raise InputValidationError(f"Not a local media file: {raw_input}")
        logger.info("Local file: %s", source.local_path)

        if source.needs_extraction:
            with stage("Audio extraction"):
                await self.media.extract_audio(source.local_path, tmp_audio)
            return source, tmp_audio

        return source, source.local_path

    async def _run(self, raw_input: str, tmp_audio: Path) -> Path:
        source, audio_path = await self._acquire(raw_input, tmp_audio)

        with stage("Transcription"):
            speech = await self.transcriber.transcribe(audio_path)

        transcript = words_to_transcript(normalize_words(speech.words))

        with stage("Reading library"):
            library = await asyncio.to_thread(read_library, self.settings.library_root)

        with stage("Category classification"):
            plan = await asyncio.to_thread(
                self.classifier.classify,
                transcript,
                source.source_url,
                source.title,
                library,
            )

        logger.info(
            "Category: %s (confidence: %s) - %s",
            plan.category,
            plan.confidence.value,
            plan.reasoning,
        )

        iso_date = self.today().isoformat()
        output_dir = destination_dir(
            self.settings.library_root, plan.category, source.title, iso_date
        )
        artifacts = TranscriptArtifacts(
            speech=speech,
            transcript=transcript,
            metadata=build_metadata(source, plan, speech, iso_date),
        )
        await write_artifacts(output_dir, artifacts)
        return output_dir
