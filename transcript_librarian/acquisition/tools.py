"""yt-dlp and ffmpeg wrappers used to obtain audio for transcription."""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
from pathlib import Path
from typing import Any

import yt_dlp  # type: ignore[import-untyped]
from yt_dlp.utils import DownloadError  # type: ignore[import-untyped]

from transcript_librarian.acquisition.media import sanitize_title
from transcript_librarian.errors import AcquisitionError, ToolNotFoundError

logger = logging.getLogger(__name__)

FFMPEG_INSTALL = {
    "macOS": "brew install ffmpeg",
    "Linux": "apt install ffmpeg",
    "Windows": "winget install ffmpeg",
}

# Helps yt-dlp get past YouTube's client restrictions.
YOUTUBE_EXTRACTOR_ARGS = {"youtube": {"player_client": ["android", "web"]}}
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

AUDIO_CODEC = "aac"
AUDIO_BITRATE = "192k"


def base_ydl_opts() -> dict[str, Any]:
    return {
        "quiet": True,
        "no_warnings": True,
        "noprogress": True,
        "extractor_args": YOUTUBE_EXTRACTOR_ARGS,
        "http_headers": {"User-Agent": USER_AGENT},
    }


def download_opts(dest: Path, ffmpeg: str) -> dict[str, Any]:
    """yt-dlp options that leave the best audio stream at *dest* as m4a."""
    return {
        **base_ydl_opts(),
        "format": "bestaudio/best",
        # The post-processor swaps the extension, so the template omits it.
        "outtmpl": str(dest.with_suffix("")) + ".%(ext)s",
        "ffmpeg_location": ffmpeg,
        "postprocessors": [
            {
                "key": "FFmpegExtractAudio",
                "preferredcodec": "m4a",
                "preferredquality": "0",
            }
        ],
    }


async def run_tool(
    program: str, args: list[str], install: dict[str, str]
) -> tuple[str, str]:
    """Run *program* and return its (stdout, stderr).

    Raises:
        ToolNotFoundError: *program* is not on PATH.
        AcquisitionError: *program* exited with a non-zero status.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            program,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(program, install) from exc

    stdout, stderr = await proc.communicate()
    out = stdout.decode("utf-8", errors="replace")
    err = stderr.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        tail = err.strip().splitlines()[-1] if err.strip() else "no output"
        raise AcquisitionError(f"{program} exited with status {proc.returncode}: {tail}")
    return out, err


class MediaTools:
    """Audio acquisition through the yt-dlp library and the ffmpeg executable."""

    def __init__(self, ffmpeg: str = "ffmpeg") -> None:
        self.ffmpeg = ffmpeg

    def _require_ffmpeg(self) -> str:
        path = shutil.which(self.ffmpeg)
        if path is None:
            raise ToolNotFoundError(self.ffmpeg, FFMPEG_INSTALL)
        return path

    @staticmethod
    def _extract_title_sync(url: str) -> str:
        with yt_dlp.YoutubeDL({**base_ydl_opts(), "skip_download": True}) as ydl:
            info = ydl.extract_info(url, download=False)
        return (info or {}).get("title") or ""

    async def get_video_title(self, url: str) -> str:
        """Best-effort sanitized title; falls back to ``video-<epoch ms>``."""
        try:
            raw_title = await asyncio.to_thread(self._extract_title_sync, url)
        except Exception as exc:
            logger.warning("Could not look up title for %s: %s", url, exc)
            return f"video-{int(time.time() * 1000)}"

        title = sanitize_title(raw_title)
        return title or f"video-{int(time.time() * 1000)}"

    def _download_sync(self, url: str, dest: Path, ffmpeg: str) -> None:
        with yt_dlp.YoutubeDL(download_opts(dest, ffmpeg)) as ydl:
            ydl.download([url])

    async def download_audio(self, url: str, dest: Path) -> None:
        """Download the audio track of *url* to *dest* (m4a).

        Raises:
            ToolNotFoundError: ffmpeg, needed for the audio conversion, is missing.
            AcquisitionError: yt-dlp could not fetch or convert the media.
        """
        ffmpeg = self._require_ffmpeg()
        logger.info("Downloading audio from %s", url)
        try:
            await asyncio.to_thread(self._download_sync, url, dest, ffmpeg)
        except DownloadError as exc:
            raise AcquisitionError(f"yt-dlp could not download {url}: {exc}") from exc
        if not dest.exists():
            raise AcquisitionError(f"yt-dlp finished without producing {dest.name}")

    async def extract_audio(self, video: Path, dest: Path) -> None:
        logger.info("Extracting audio from %s", video.name)
        await run_tool(
            self.ffmpeg,
            [
                "-i", str(video),
                "-vn",
                "-acodec", AUDIO_CODEC,
                "-b:a", AUDIO_BITRATE,
                "-y",
                str(dest),
            ],
            FFMPEG_INSTALL,
        )
