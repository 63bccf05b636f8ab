"""Resolve CLI input into a media source description."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from transcript_librarian.errors import InputValidationError

AUDIO_EXTENSIONS = (".mp3", ".m4a", ".wav", ".ogg", ".flac")
# Video containers need audio extraction before transcription.
VIDEO_EXTENSIONS = (".mp4", ".mkv", ".webm", ".mov", ".avi")
MEDIA_EXTENSIONS = AUDIO_EXTENSIONS + VIDEO_EXTENSIONS

MAX_TITLE_LENGTH = 100

_FORBIDDEN_CHARS_RE = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class MediaSource:
    """A validated input: either a remote URL or a local media file."""

    source_url: str  # remote URL or file:// URI
    title: str
    local_path: Path | None = None

    @property
    def is_remote(self) -> bool:
        return self.local_path is None

    @property
    def needs_extraction(self) -> bool:
        return self.local_path is not None and is_video_file(self.local_path)


def is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def is_video_file(path: Path) -> bool:
    return path.suffix.lower() in VIDEO_EXTENSIONS


def sanitize_title(raw: str) -> str:
    """Make *raw* safe as a path segment: dashes for unsafe chars, lowercase, capped."""
    title = _FORBIDDEN_CHARS_RE.sub("-", raw.strip())
    title = _WHITESPACE_RE.sub("-", title)
    return title.lower()[:MAX_TITLE_LENGTH]


def title_from_path(path: Path) -> str:
    return sanitize_title(path.stem)


def resolve_local(raw_input: str) -> MediaSource:
    """Validate a local media path.

    Raises:
        InputValidationError: The file does not exist or has an unsupported extension.
    """
    path = Path(raw_input).expanduser().resolve()
    if not path.is_file():
        raise InputValidationError(f"File not found: {path}")

    ext = path.suffix.lower()
    if ext not in MEDIA_EXTENSIONS:
        raise InputValidationError(
            f"Unsupported file type: {ext or '(none)'}\nSupported: {', '.join(MEDIA_EXTENSIONS)}"
        )

    return MediaSource(source_url=path.as_uri(), title=title_from_path(path), local_path=path)
