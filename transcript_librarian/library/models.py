"""Data models for the on-disk transcript library."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

METADATA_FILENAME = "metadata.json"


class Confidence(StrEnum):
    """Confidence tier reported by the classifier."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ThemeClassification(BaseModel):
    """Theme section of a transcript's metadata record."""

    model_config = ConfigDict(populate_by_name=True)

    primary_theme: str = Field(alias="primaryTheme")
    sub_theme: str = Field(alias="subTheme")
    folder_name: str = Field(alias="folderName")
    confidence: Confidence
    summary: str


class TranscriptMetadata(BaseModel):
    """Record stored as ``metadata.json`` beside every transcript.

    Field aliases keep the camelCase keys used by existing archives.
    """

    model_config = ConfigDict(populate_by_name=True)

    source_url: str = Field(alias="sourceUrl")  # remote URL or file:// path
    title: str
    date: str
    theme: ThemeClassification
    language: str | None = None
    confidence: float | None = None
    words_detected: int | None = Field(default=None, alias="wordsDetected")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


@dataclass
class TranscriptEntry:
    """A directory holding one transcript and its metadata record."""

    name: str
    path: str
    metadata: TranscriptMetadata


@dataclass
class CategoryFolder:
    """A directory grouping transcript entries (no metadata of its own)."""

    name: str
    path: str
    children: list[LibraryNode] = field(default_factory=list)

    def has_transcripts(self) -> bool:
        return any(
            isinstance(child, TranscriptEntry) or child.has_transcripts()
            for child in self.children
        )

    def category_names(self) -> list[str]:
        return [child.name for child in self.children if isinstance(child, CategoryFolder)]


LibraryNode = CategoryFolder | TranscriptEntry
