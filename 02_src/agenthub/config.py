"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "agenthub.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

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


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment."""

    inference_provider: str = "openrouter"
    default_agent: str = "Communication"
    default_model: str = "anthropic/claude-3.5-sonnet"
    max_response_tokens: int = 2000
    status_clear_delay: float = 3.0  # seconds
    parallel_stagger: float = 0.5  # seconds, multiplied by agent index
    site_url: str = "http://localhost:5000"


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    return Settings(
        inference_provider=os.getenv("INFERENCE_PROVIDER", "openrouter").lower(),
        default_agent=os.getenv("DEFAULT_AGENT", "Communication"),
        default_model=os.getenv("DEFAULT_MODEL", "anthropic/claude-3.5-sonnet"),
        max_response_tokens=int(os.getenv("MAX_RESPONSE_TOKENS", "2000")),
        status_clear_delay=int(os.getenv("STATUS_CLEAR_DELAY_MS", "3000")) / 1000,
        parallel_stagger=int(os.getenv("PARALLEL_STAGGER_MS", "500")) / 1000,
        site_url=os.getenv("SITE_URL", "http://localhost:5000"),
    )
