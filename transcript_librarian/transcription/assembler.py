"""Assemble speaker-grouped transcript text from tokens."""

from __future__ import annotations

import re
from collections.abc import Sequence

from transcript_librarian.transcription.models import Token

# Whitespace in front of punctuation is dropped so punctuation hugs the word.
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,!?;:])")


def _join_fragments(fragments: list[str]) -> str:
    return _SPACE_BEFORE_PUNCT_RE.sub(r"\1", " ".join(fragments))


def words_to_transcript(tokens: Sequence[Token]) -> str:
    """Render tokens as ``"speaker: text"`` lines, one per same-speaker run.

    Spacing tokens contribute no text (fragments are re-joined with single
    spaces) and never break a run.  Empty input yields an empty string.
    """
    if not tokens:
        return ""

    lines: list[str] = []
    current_speaker = tokens[0].speaker_id
    fragments: list[str] = []

    def flush() -> None:
        if fragments:
            lines.append(f"{current_speaker}: {_join_fragments(fragments)}")
            fragments.clear()

    for token in tokens:
        if token.speaker_id != current_speaker:
            flush()
            current_speaker = token.speaker_id

        if token.kind != "spacing":
            fragments.append(token.text)

    flush()
    return "\n".join(lines)
