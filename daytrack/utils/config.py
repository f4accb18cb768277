"""Configuration management for DayTrack."""

import os
from pathlib import Path

from pydantic import BaseModel


def _env(name: str, default: str) -> str:
    return os.getenv(f"DAYTRACK_{name}", default)


_DATA_DIR = Path(_env("DATA_DIR", str(Path.home() / ".daytrack")))


class Config(BaseModel):
    """Application configuration."""

    # Paths
    data_dir: Path = _DATA_DIR
    db_path: Path = Path(_env("DB_PATH", str(_DATA_DIR / "daytrack.db")))

    # LLM extraction service
    llm_base_url: str = _env("LLM_BASE_URL", "https://api.openai.com/v1")
    llm_api_key: str = os.getenv("DAYTRACK_LLM_API_KEY", os.getenv("OPENAI_API_KEY", ""))
    llm_model: str = _env("LLM_MODEL", "gpt-4o")
    llm_timeout: float = float(_env("LLM_TIMEOUT", "60"))

    # Extraction settings
    confidence_threshold: float = 0.4

    # Stats settings
    habit_rate_window_days: int = 30  # flat "month" denominator for completion rate

    # Logging
    log_level: str = _env("LOG_LEVEL", "WARNING")

    def ensure_dirs(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)


# Global config instance
config = Config()
