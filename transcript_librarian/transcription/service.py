"""AssemblyAI speech-to-text adapter."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import assemblyai as aai  # type: ignore[import-untyped]

from transcript_librarian.config import Settings
from transcript_librarian.errors import TranscriptionError
from transcript_librarian.transcription.models import SpeechResult

logger = logging.getLogger(__name__)

# Per-request limit for the SDK's HTTP client (upload, submit, status checks).
HTTP_TIMEOUT_SECONDS = 60.0


def _word_record(word: dict[str, Any]) -> dict[str, Any]:
    """Convert an AssemblyAI word (times in ms) to a neutral record (seconds)."""
    start = word.get("start")
    end = word.get("end")
    return {
        "text": word.get("text"),
        "start": start / 1000.0 if start is not None else None,
        "end": end / 1000.0 if end is not None else None,
        # AssemblyAI attaches punctuation to words and sends no spacing events.
        "type": word.get("type", "word"),
        "speaker_id": word.get("speaker"),
    }


def to_speech_result(response: dict[str, Any]) -> SpeechResult:
    """Build a SpeechResult from an AssemblyAI transcript JSON response."""
    return SpeechResult(
        text=response.get("text") or "",
        words=[_word_record(w) for w in response.get("words") or []],
        language_code=response.get("language_code"),
        language_confidence=response.get("language_confidence"),
        raw=response,
    )


class AssemblyAITranscriber:
    """Transcribe local audio files with diarization and language detection.

    The job is submitted once and then polled until it completes, fails or
    the configured deadline passes.  Every SDK call is a single HTTP request
    with its own client timeout, so no worker thread blocks indefinitely.
    """

    def __init__(self, settings: Settings) -> None:
        self.api_key = settings.assemblyai_api_key
        self.speech_model = settings.speech_model
        self.timeout = settings.transcription_timeout_seconds
        self.poll_interval = settings.transcription_poll_seconds

    def _submit_sync(self, audio_path: Path) -> str:
        aai.settings.api_key = self.api_key
        aai.settings.http_timeout = HTTP_TIMEOUT_SECONDS
        # speaker_labels=True enables diarization; without it every word is
        # attributed to no speaker.
        config = aai.TranscriptionConfig(
            speech_models=[self.speech_model],
            speaker_labels=True,
            language_detection=True,
        )
        transcript = aai.Transcriber().submit(str(audio_path), config=config)
        if transcript.status == aai.TranscriptStatus.error:
            raise TranscriptionError(f"Transcription failed: {transcript.error}")
        return transcript.id

    def _fetch_sync(self, transcript_id: str) -> Any:
        return aai.Transcript.get_by_id(transcript_id)

    async def _poll(self, transcript_id: str, deadline: float) -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        while True:
            transcript = await asyncio.to_thread(self._fetch_sync, transcript_id)
            if transcript.status == aai.TranscriptStatus.completed:
                return dict(transcript.json_response or {})
            if transcript.status == aai.TranscriptStatus.error:
                raise TranscriptionError(f"Transcription failed: {transcript.error}")

            remaining = deadline - loop.time()
            if remaining <= 0:
                raise TimeoutError
            await asyncio.sleep(min(self.poll_interval, remaining))

    async def transcribe(self, audio_path: Path) -> SpeechResult:
        """Upload *audio_path* and wait (bounded) for the finished transcript."""
        logger.info("Transcribing %s", audio_path.name)
        deadline = asyncio.get_running_loop().time() + self.timeout
        try:
            transcript_id = await asyncio.to_thread(self._submit_sync, audio_path)
            logger.debug("Submitted transcript %s", transcript_id)
            response = await self._poll(transcript_id, deadline)
        except TimeoutError as exc:
            raise TranscriptionError(
                f"Transcription did not finish within {self.timeout:.0f}s"
            ) from exc
        except TranscriptionError:
            raise
        except Exception as exc:
            # Infrastructure error: invalid API key, network failure, provider outage.
            raise TranscriptionError(f"Transcription service unavailable: {exc}") from exc

        result = to_speech_result(response)
        logger.info(
            "Transcribed %d words (language=%s)", len(result.words), result.language_code
        )
        return result
