"""Transcribe a local audio file and print the speaker-grouped transcript.

Skips classification and does not touch the library; handy for checking
diarization quality before filing anything.

Usage:
    python scripts/transcribe_sample.py path/to/audio.mp3 [--save-json out.json]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from transcript_librarian.config import get_settings
from transcript_librarian.errors import LibrarianError
from transcript_librarian.transcription.assembler import words_to_transcript
from transcript_librarian.transcription.normalizer import normalize_words
from transcript_librarian.transcription.service import AssemblyAITranscriber


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("audio", type=Path)
    parser.add_argument("--save-json", type=Path, default=None)
    args = parser.parse_args()

    if not args.audio.exists():
        print(f"Audio file not found: {args.audio}")
        sys.exit(1)

    settings = get_settings()
    print(f"Transcribing {args.audio.name} ({args.audio.stat().st_size / 1e6:.1f} MB)...")

    try:
        result = asyncio.run(AssemblyAITranscriber(settings).transcribe(args.audio))
    except LibrarianError as exc:
        print(f"Transcription error: {exc}")
        sys.exit(1)

    tokens = normalize_words(result.words)
    transcript = words_to_transcript(tokens)

    if args.save_json:
        args.save_json.write_text(
            json.dumps(result.raw, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        print(f"Saved raw response -> {args.save_json}")

    speakers = {t.speaker_id for t in tokens}
    print(f"\nLanguage: {result.language_code} ({result.language_confidence})")
    print(f"Speakers detected: {len(speakers)}")
    print(f"Words: {len(tokens)}")
    print("\nFirst 3 lines:")
    for line in transcript.splitlines()[:3]:
        print(f"  {line[:100]}")


if __name__ == "__main__":
    main()
