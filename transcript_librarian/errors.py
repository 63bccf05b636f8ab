"""Exception hierarchy for the transcription and filing pipeline."""

from __future__ import annotations


class LibrarianError(Exception):
    """Base class for every expected, user-facing pipeline failure."""


class ConfigurationError(LibrarianError):
    """A required secret or setting is missing."""


class InputValidationError(LibrarianError):
    """The CLI input is not a usable URL or media file."""


class ToolNotFoundError(LibrarianError):
    """A required external executable (ffmpeg) is not installed."""

    def __init__(self, tool: str, instructions: dict[str, str]) -> None:
        self.tool = tool
        self.instructions = instructions
        lines = [f"{tool} not found. Install it with:"]
        lines.extend(f"  {platform}: {command}" for platform, command in instructions.items())
        super().__init__("\n".join(lines))


class AcquisitionError(LibrarianError):
    """Downloading or extracting audio failed."""


class TranscriptionError(LibrarianError):
    """The speech-to-text service failed or timed out."""


class ClassificationError(LibrarianError):
    """The classification response broke the organization-plan contract."""


class PlacementError(ClassificationError):
    """The proposed category cannot be used as a single folder name."""
