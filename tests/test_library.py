"""Tests for reading, summarizing and writing the transcript library."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from transcript_librarian.library.models import (
    CategoryFolder,
    Confidence,
    ThemeClassification,
    TranscriptEntry,
    TranscriptMetadata,
)
from transcript_librarian.library.reader import load_metadata, read_library
from transcript_librarian.library.summarizer import (
    LATER_MARKER,
    MIDDLE_MARKER,
    estimate_tokens,
    render_tree,
    truncate_transcript,
)
from transcript_librarian.library.writer import (
    TranscriptArtifacts,
    destination_dir,
    write_artifacts,
)
from transcript_librarian.transcription.models import SpeechResult


def metadata_dict(summary: str = "Discussion of AI safety", folder: str = "ai-podcasts") -> dict:
    return {
        "sourceUrl": "https://www.youtube.com/watch?v=abc",
        "title": "safety-talk",
        "date": "2025-01-15",
        "theme": {
            "primaryTheme": folder,
            "subTheme": "safety-talk",
            "folderName": folder,
            "confidence": "high",
            "summary": summary,
        },
        "language": "en",
        "confidence": 0.98,
        "wordsDetected": 1200,
    }


def make_entry(directory: Path, **kwargs: str) -> Path:
    directory.mkdir(parents=True)
    (directory / "metadata.json").write_text(json.dumps(metadata_dict(**kwargs)), encoding="utf-8")
    return directory


# ---------------------------------------------------------------------------
# Reader tests
# ---------------------------------------------------------------------------


class TestReadLibrary:
    def test_missing_root_returns_empty_tree(self, tmp_path: Path) -> None:
        root = read_library(tmp_path / "does-not-exist")
        assert isinstance(root, CategoryFolder)
        assert root.children == []
        assert root.path == ""

    def test_empty_root(self, tmp_path: Path) -> None:
        assert read_library(tmp_path).children == []

    def test_transcript_entry_and_category(self, tmp_path: Path) -> None:
        make_entry(tmp_path / "ai-podcasts" / "safety-talk-2025-01-15")

        root = read_library(tmp_path)

        assert len(root.children) == 1
        category = root.children[0]
        assert isinstance(category, CategoryFolder)
        assert category.name == "ai-podcasts"
        assert category.path == "ai-podcasts"

        entry = category.children[0]
        assert isinstance(entry, TranscriptEntry)
        assert entry.path == "ai-podcasts/safety-talk-2025-01-15"
        assert entry.metadata.theme.summary == "Discussion of AI safety"
        assert entry.metadata.words_detected == 1200

    def test_files_are_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "notes.txt").write_text("stray file", encoding="utf-8")
        (tmp_path / "metadata.json").write_text(json.dumps(metadata_dict()), encoding="utf-8")
        (tmp_path / "business").mkdir()

        root = read_library(tmp_path)

        assert [c.name for c in root.children] == ["business"]

    def test_malformed_metadata_is_category(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken"
        broken.mkdir()
        (broken / "metadata.json").write_text("{not json", encoding="utf-8")
        make_entry(broken / "inner-talk")

        root = read_library(tmp_path)

        folder = root.children[0]
        assert isinstance(folder, CategoryFolder)
        assert isinstance(folder.children[0], TranscriptEntry)

    def test_schema_mismatch_is_category(self, tmp_path: Path) -> None:
        odd = tmp_path / "odd"
        odd.mkdir()
        (odd / "metadata.json").write_text(json.dumps(["a", "list"]), encoding="utf-8")

        assert isinstance(read_library(tmp_path).children[0], CategoryFolder)

    def test_metadata_presence_beats_naming(self, tmp_path: Path) -> None:
        # A transcript directory directly under the root is still an entry.
        make_entry(tmp_path / "looks-like-a-category")
        assert isinstance(read_library(tmp_path).children[0], TranscriptEntry)

    def test_children_sorted_by_name(self, tmp_path: Path) -> None:
        for name in ["zeta", "alpha", "mid"]:
            (tmp_path / name).mkdir()
        assert [c.name for c in read_library(tmp_path).children] == ["alpha", "mid", "zeta"]

    def test_has_transcripts(self, tmp_path: Path) -> None:
        (tmp_path / "empty-category").mkdir()
        assert read_library(tmp_path).has_transcripts() is False

        make_entry(tmp_path / "empty-category" / "talk")
        assert read_library(tmp_path).has_transcripts() is True

    def test_load_metadata_missing(self, tmp_path: Path) -> None:
        assert load_metadata(tmp_path) is None


# ---------------------------------------------------------------------------
# Summarizer tests
# ---------------------------------------------------------------------------


class TestRenderTree:
    def test_empty_tree(self) -> None:
        assert render_tree(CategoryFolder(name="transcripts", path="")) == ""

    def test_category_with_entry(self, tmp_path: Path) -> None:
        make_entry(tmp_path / "ai-podcasts" / "safety-talk-2025-01-15")

        rendered = render_tree(read_library(tmp_path))

        assert "ai-podcasts" in rendered
        assert "Discussion of AI safety" in rendered
        assert "ai-podcasts > safety-talk" in rendered
        assert rendered.splitlines() == [
            "  📁 ai-podcasts/",
            "    📄 safety-talk-2025-01-15",
            "       Summary: Discussion of AI safety",
            "       Theme: ai-podcasts > safety-talk",
        ]

    def test_root_has_no_line(self, tmp_path: Path) -> None:
        (tmp_path / "business").mkdir()
        rendered = render_tree(read_library(tmp_path))
        assert "transcripts" not in rendered
        assert rendered == "  📁 business/"

    def test_nested_indentation(self, tmp_path: Path) -> None:
        (tmp_path / "outer" / "inner").mkdir(parents=True)
        assert render_tree(read_library(tmp_path)).splitlines() == [
            "  📁 outer/",
            "    📁 inner/",
        ]

    def test_budget_elides_remaining_categories(self, tmp_path: Path) -> None:
        for i in range(10):
            make_entry(tmp_path / f"category-{i:02d}" / "talk", summary="x" * 50)
        library = read_library(tmp_path)
        block_len = len(render_tree(CategoryFolder("t", "", library.children[:1]))) + 1

        rendered = render_tree(library, max_chars=block_len * 3)

        assert "category-02" in rendered
        assert "category-03" not in rendered
        assert rendered.endswith("... +7 more categories")

    def test_budget_always_keeps_first_block(self, tmp_path: Path) -> None:
        make_entry(tmp_path / "a" / "talk")
        make_entry(tmp_path / "b" / "talk")
        rendered = render_tree(read_library(tmp_path), max_chars=1)
        assert "📁 a/" in rendered
        assert rendered.endswith("... +1 more categories")

    def test_no_budget_renders_everything(self, tmp_path: Path) -> None:
        for i in range(5):
            (tmp_path / f"c{i}").mkdir()
        assert "more categories" not in render_tree(read_library(tmp_path))


class TestTokenEstimation:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("", 0), ("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)],
    )
    def test_ceil_of_quarter_length(self, text: str, expected: int) -> None:
        assert estimate_tokens(text) == expected


class TestTruncateTranscript:
    def test_under_ceiling_unchanged(self) -> None:
        text = "A: hello there\n" * 10
        assert truncate_transcript(text, max_tokens=1000) is text

    def test_exactly_at_ceiling_unchanged(self) -> None:
        text = "x" * 400
        assert truncate_transcript(text, max_tokens=100) == text

    def test_over_ceiling_samples_three_sections(self) -> None:
        text = "B" * 10_000 + "M" * 10_000 + "E" * 10_000
        result = truncate_transcript(text, max_tokens=300)  # chunks of 400 chars

        head, rest = result.split(f"\n\n{MIDDLE_MARKER}\n\n")
        middle, tail = rest.split(f"\n\n{LATER_MARKER}\n\n")
        assert head == "B" * 400
        assert middle == "M" * 400
        assert tail == "E" * 400

    def test_far_over_ceiling_is_bounded(self) -> None:
        text = "word " * 1_000_000
        result = truncate_transcript(text, max_tokens=1_000)
        assert MIDDLE_MARKER in result
        assert LATER_MARKER in result
        assert len(result) <= 1_000 * 4 + 100

    def test_default_ceiling(self) -> None:
        text = "y" * (150_000 * 4)
        assert truncate_transcript(text) == text
        assert MIDDLE_MARKER in truncate_transcript(text + "y")


# ---------------------------------------------------------------------------
# Writer tests
# ---------------------------------------------------------------------------


class TestWriter:
    def test_destination_dir(self, tmp_path: Path) -> None:
        assert destination_dir(tmp_path, "ai-podcasts", "my-talk", "2025-02-01") == (
            tmp_path / "ai-podcasts" / "my-talk-2025-02-01"
        )

    def test_write_artifacts(self, tmp_path: Path) -> None:
        speech = SpeechResult(
            text="Hello world. Hi.",
            words=[{"text": "Hello"}],
            language_code="en",
            language_confidence=0.9,
            raw={"text": "Hello world. Hi.", "words": [{"text": "Hello"}]},
        )
        metadata = TranscriptMetadata(
            source_url="file:///tmp/talk.mp3",
            title="talk",
            date="2025-02-01",
            theme=ThemeClassification(
                primary_theme="ai-podcasts",
                sub_theme="talk",
                folder_name="ai-podcasts",
                confidence=Confidence.MEDIUM,
                summary="A talk",
            ),
            language="en",
            confidence=0.9,
            words_detected=1,
        )
        output_dir = tmp_path / "ai-podcasts" / "talk-2025-02-01"

        paths = asyncio.run(
            write_artifacts(
                output_dir,
                TranscriptArtifacts(speech=speech, transcript="A: Hello world.", metadata=metadata),
            )
        )

        assert sorted(p.name for p in paths) == [
            "metadata.json",
            "transcription-raw.json",
            "transcription-raw.txt",
            "transcription.txt",
        ]
        assert (output_dir / "transcription-raw.txt").read_text(encoding="utf-8") == "Hello world. Hi."
        assert (output_dir / "transcription.txt").read_text(encoding="utf-8") == "A: Hello world."
        raw_json = (output_dir / "transcription-raw.json").read_text(encoding="utf-8")
        assert json.loads(raw_json) == speech.raw
        assert "\n  " in raw_json  # pretty-printed

        stored = json.loads((output_dir / "metadata.json").read_text(encoding="utf-8"))
        assert stored["sourceUrl"] == "file:///tmp/talk.mp3"
        assert stored["theme"]["folderName"] == "ai-podcasts"
        assert stored["theme"]["confidence"] == "medium"
        assert stored["wordsDetected"] == 1

        # The written directory is read back as a transcript entry.
        entry = read_library(tmp_path).children[0].children[0]  # type: ignore[union-attr]
        assert isinstance(entry, TranscriptEntry)
        assert entry.metadata == metadata
