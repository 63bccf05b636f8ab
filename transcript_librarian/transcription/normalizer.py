"""Map provider word records onto internal Tokens."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from transcript_librarian.transcription.models import Token


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def normalize_word(record: Any) -> Token:
    """Convert one word record (mapping or attribute object) into a Token.

    Missing or empty fields fall back to ``''``, ``0``, ``'word'`` and
    ``'unknown'``.  A ``speaker`` field is used when ``speaker_id`` is absent.
    """
    speaker = _field(record, "speaker_id") or _field(record, "speaker")
    return Token(
        text=_field(record, "text") or "",
        start=float(_field(record, "start") or 0),
        end=float(_field(record, "end") or 0),
        kind=_field(record, "type") or "word",
        speaker_id=str(speaker) if speaker else "unknown",
    )


def normalize_words(records: Iterable[Any]) -> list[Token]:
    """One-to-one, order-preserving conversion of word records to Tokens."""
    return [normalize_word(record) for record in records]
