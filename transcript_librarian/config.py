from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from transcript_librarian.errors import ConfigurationError


def _default_library_root() -> Path:
    return Path.home() / "Documents" / "transcripts"


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.  The
    resolved instance is handed to each component explicitly.
    """

    # API Keys
    anthropic_api_key: str = ""
    assemblyai_api_key: str = ""

    # Archive
    library_root: Path = Field(default_factory=_default_library_root)

    # Models
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 2048
    speech_model: str = "universal-3-pro"

    # Prompt budgets
    token_ceiling: int = 150_000
    tree_char_budget: int = 40_000

    # Transcription deadline and status polling interval
    transcription_timeout_seconds: float = 1200.0
    transcription_poll_seconds: float = 3.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("library_root")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    def require_api_keys(self) -> None:
        """Raise ConfigurationError naming every missing API key."""
        missing = [
            env_name
            for env_name, value in (
                ("ASSEMBLYAI_API_KEY", self.assemblyai_api_key),
                ("ANTHROPIC_API_KEY", self.anthropic_api_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing {', '.join(missing)} in .env")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles unreadable .env files by falling back to
    environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]
