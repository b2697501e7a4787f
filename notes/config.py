"""Note store configuration loaded from environment variables."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

# XDG data directory, private to the current user
DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "notes-app"


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NOTES_",
    }

    # Storage
    data_dir: Path = DEFAULT_DATA_DIR
    db_filename: str = "notes.db"

    # SQLAlchemy engine
    echo_sql: bool = False

    # Logging
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        """Full path of the SQLite database file."""
        return self.data_dir.expanduser() / self.db_filename


def configure_logging(level: str | None = None) -> None:
    """Apply the application log format to the root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )


settings = Settings()
