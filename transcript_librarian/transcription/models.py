"""Data models for speech-to-text output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Token:
    """One timestamped speech unit attributed to a speaker."""

    text: str
    start: float
    end: float
    kind: str  # "word", "spacing", "punctuation", or provider-defined
    speaker_id: str


@dataclass
class SpeechResult:
    """Provider-neutral result of a transcription call.

    ``words`` holds plain records with ``text``, ``start``, ``end`` (seconds),
    ``type`` and ``speaker_id`` keys; ``raw`` is the full provider response.
    """

    text: str
    words: list[dict[str, Any]] = field(default_factory=list)
    language_code: str | None = None
    language_confidence: float | None = None
    raw: dict[str, Any] = field(default_factory=dict)
