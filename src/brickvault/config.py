"""Configuration management for brickvault.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.logging import RichHandler

# Load .env file if present
load_dotenv()

DEFAULT_DB_PATH = Path.home() / ".brickvault" / "brickvault.db"


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # User whose preferences the CLI reads and writes
    user_id: str

    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get("BRICKVAULT_DB_PATH", str(DEFAULT_DB_PATH))

        return cls(
            db_path=Path(db_path_str).expanduser(),
            user_id=os.environ.get("BRICKVAULT_USER", "local"),
            log_level=os.environ.get("BRICKVAULT_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if not self.user_id.strip():
            errors.append("BRICKVAULT_USER cannot be blank")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors


def configure_logging(level: str = "WARNING") -> None:
    """Route log records through rich, once per process."""
    root = logging.getLogger()
    if any(isinstance(h, RichHandler) for h in root.handlers):
        root.setLevel(level)
        return

    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(level)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
