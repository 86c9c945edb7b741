"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "dialogs.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"
DEFAULT_TELEGRAM_API_URL = "https://api.telegram.org"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@dataclass
class Settings:
    """Runtime settings, read from the environment."""

    bot_token: str | None = None
    telegram_api_url: str = DEFAULT_TELEGRAM_API_URL
    store: str = "memory"  # "memory" or "sqlite"
    db_path: PathLike = DEFAULT_DB_PATH
    webhook_secret: str | None = None
    api_host: str = "localhost"
    api_port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            bot_token=os.getenv("BOT_TOKEN") or None,
            telegram_api_url=os.getenv("TELEGRAM_API_URL", DEFAULT_TELEGRAM_API_URL),
            store=os.getenv("DIALOG_STORE", "memory").lower(),
            db_path=resolve_db_path(os.getenv("DATABASE_URL")),
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=int(os.getenv("API_PORT", "8000")),
        )
