"""Data models for classifier output."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from transcript_librarian.library.models import Confidence


class OrganizationPlan(BaseModel):
    """Where the classifier wants the new transcript filed."""

    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(alias="newTranscriptPath")  # single kebab-case folder
    reasoning: str
    confidence: Confidence
