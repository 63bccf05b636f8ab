"""Claude-powered placement of new transcripts into the library taxonomy."""

from __future__ import annotations

import logging
from typing import Any

from anthropic import Anthropic
from anthropic.types import TextBlock
from pydantic import ValidationError

from transcript_librarian.classification.models import OrganizationPlan
from transcript_librarian.config import Settings
from transcript_librarian.errors import ClassificationError, PlacementError
from transcript_librarian.library.models import CategoryFolder
from transcript_librarian.library.summarizer import (
    DEFAULT_TOKEN_CEILING,
    estimate_tokens,
    render_tree,
    truncate_transcript,
)

logger = logging.getLogger(__name__)

INCREMENTAL_PROMPT = """You are maintaining a knowledge library of audio/video transcripts.

SOURCE INFORMATION:
URL: {source_url}
Title: {title}

CURRENT LIBRARY STRUCTURE:
{library_tree}

NEW TRANSCRIPT TO ORGANIZE:
{transcript}

YOUR TASK:
1. Analyze the new transcript's content and main themes
2. Review the existing library structure
3. Decide the optimal SINGLE-LEVEL category folder for this transcript

DECISION CRITERIA:
- Use existing folders when semantically appropriate (similar content/theme)
- Create new categories when the content doesn't fit existing ones
- Use kebab-case for folder names
- Keep categories broad enough to group related content but specific enough to be meaningful
- IMPORTANT: Use only ONE level of categorization (e.g., "ai-podcasts" not "technology/ai/podcasts")

Respond with a JSON object (no markdown code blocks):
{{
  "newTranscriptPath": "category-name",
  "reasoning": "Explain why this category fits the content",
  "confidence": "high/medium/low"
}}"""

BOOTSTRAP_PROMPT = """You are creating a knowledge library of audio/video transcripts.

SOURCE INFORMATION:
URL: {source_url}
Title: {title}

TRANSCRIPT:
{transcript}

This is the FIRST transcript in the library. Create an initial folder structure that:
- Uses a SINGLE level of categorization
- Is specific enough to be useful but not over-categorized
- Uses kebab-case for folder names
- Sets a good foundation for future organization
- Example: "ai-podcasts" or "business-interviews" (NOT "technology/ai/podcasts")

Respond with a JSON object (no markdown code blocks):
{{
  "newTranscriptPath": "category-name",
  "reasoning": "Explain why you chose this category",
  "confidence": "high/medium/low"
}}"""


def build_prompt(
    transcript: str,
    source_url: str,
    title: str,
    library: CategoryFolder,
    token_ceiling: int = DEFAULT_TOKEN_CEILING,
    tree_char_budget: int | None = None,
) -> str:
    """Build the bootstrap or incremental prompt depending on library contents."""
    excerpt = truncate_transcript(transcript, token_ceiling)

    if not library.has_transcripts():
        return BOOTSTRAP_PROMPT.format(source_url=source_url, title=title, transcript=excerpt)

    return INCREMENTAL_PROMPT.format(
        source_url=source_url,
        title=title,
        library_tree=render_tree(library, max_chars=tree_char_budget),
        transcript=excerpt,
    )


def parse_plan(response: Any) -> OrganizationPlan:
    """Parse the first content block of a Claude message into a plan.

    Raises:
        ClassificationError: The block is not text, or the text is not a JSON
            object matching :class:`OrganizationPlan`.
    """
    if not response.content:
        raise ClassificationError("Empty response from Claude")

    block = response.content[0]
    if not isinstance(block, TextBlock):
        raise ClassificationError(f"Expected TextBlock from Claude, got {type(block).__name__}")

    try:
        return OrganizationPlan.model_validate_json(block.text)
    except ValidationError as exc:
        raise ClassificationError(f"Claude returned an invalid organization plan: {exc}") from exc


def validate_category(name: str) -> str:
    """Return *name* stripped, rejecting anything that is not one folder name."""
    category = name.strip()
    if not category or category in {".", ".."}:
        raise PlacementError(f"Invalid category name: {name!r}")
    if "/" in category or "\\" in category:
        raise PlacementError(f"Category must be a single folder level, got {name!r}")
    return category


def resolve_category(name: str, library: CategoryFolder) -> str:
    """Prefer an existing top-level folder whose name differs only in case."""
    for existing in library.category_names():
        if existing != name and existing.lower() == name.lower():
            logger.warning(
                "Category %r differs only in case from existing folder %r; folder names "
                "are matched case-insensitively, so filing under %r",
                name,
                existing,
                existing,
            )
            return existing
    return name


class Classifier:
    """Decide the category folder for a new transcript."""

    def __init__(
        self,
        client: Any,
        model: str,
        max_tokens: int = 2048,
        token_ceiling: int = DEFAULT_TOKEN_CEILING,
        tree_char_budget: int | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.token_ceiling = token_ceiling
        self.tree_char_budget = tree_char_budget

    @classmethod
    def from_settings(cls, settings: Settings) -> Classifier:
        return cls(
            client=Anthropic(api_key=settings.anthropic_api_key),
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            token_ceiling=settings.token_ceiling,
            tree_char_budget=settings.tree_char_budget,
        )

    def classify(
        self,
        transcript: str,
        source_url: str,
        title: str,
        library: CategoryFolder,
    ) -> OrganizationPlan:
        """Ask Claude for an organization plan and validate its category."""
        logger.info("Estimated tokens: %s", f"{estimate_tokens(transcript):,}")

        prompt = build_prompt(
            transcript,
            source_url,
            title,
            library,
            token_ceiling=self.token_ceiling,
            tree_char_budget=self.tree_char_budget,
        )
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )

        plan = parse_plan(response)
        category = resolve_category(validate_category(plan.category), library)
        return plan.model_copy(update={"category": category})
