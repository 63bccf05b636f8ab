"""Compact text renderings of the library and transcript for model prompts."""

from __future__ import annotations

import math

from transcript_librarian.library.models import CategoryFolder, LibraryNode, TranscriptEntry

INDENT = "  "
DEFAULT_TOKEN_CEILING = 150_000

MIDDLE_MARKER = "[... middle section omitted ...]"
LATER_MARKER = "[... later section omitted ...]"


def _render_node(node: LibraryNode, indent: str) -> list[str]:
    if isinstance(node, TranscriptEntry):
        theme = node.metadata.theme
        return [
            f"{indent}📄 {node.name}",
            f"{indent}   Summary: {theme.summary}",
            f"{indent}   Theme: {theme.primary_theme} > {theme.sub_theme}",
        ]

    lines = [f"{indent}📁 {node.name}/"]
    for child in node.children:
        lines.extend(_render_node(child, indent + INDENT))
    return lines


def render_tree(root: CategoryFolder, max_chars: int | None = None) -> str:
    """Render the library below *root* as indented text.

    The root itself produces no line.  With *max_chars*, top-level blocks are
    emitted until the next one would overflow the budget and the rest are
    collapsed into a single ``... +N more categories`` line.
    """
    lines: list[str] = []
    used = 0

    for index, child in enumerate(root.children):
        block = _render_node(child, INDENT)
        block_chars = sum(len(line) + 1 for line in block)
        if max_chars is not None and lines and used + block_chars > max_chars:
            lines.append(f"{INDENT}... +{len(root.children) - index} more categories")
            break
        lines.extend(block)
        used += block_chars

    return "\n".join(lines)


def estimate_tokens(text: str) -> int:
    """Estimate token count (conservative: ~4 chars per token)."""
    return math.ceil(len(text) / 4)


def truncate_transcript(text: str, max_tokens: int = DEFAULT_TOKEN_CEILING) -> str:
    """Fit *text* under *max_tokens* by sampling its start, middle and end.

    Text within the ceiling is returned unchanged.
    """
    if estimate_tokens(text) <= max_tokens:
        return text

    chunk_size = max_tokens * 4 // 3
    midpoint = len(text) // 2

    beginning = text[:chunk_size]
    middle = text[midpoint - chunk_size // 2 : midpoint + chunk_size // 2]
    end = text[-chunk_size:] if chunk_size else ""

    return f"{beginning}\n\n{MIDDLE_MARKER}\n\n{middle}\n\n{LATER_MARKER}\n\n{end}"
