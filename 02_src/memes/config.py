"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
AVATAR_DIR = DATA_DIR / "avatar"
DEFAULT_IMAGE_DIR = DATA_DIR / "default"
DEFAULT_DB_PATH = DATA_DIR / "memes.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

# Workspace limits
PAGE_SIZE = 50
MESSAGE_MAX_LENGTH = 1000
CHANNEL_NAME_MAX_LENGTH = 20
NAME_MAX_LENGTH = 50
HANDLE_MIN_LENGTH = 3
HANDLE_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6
NOTIFICATION_LIMIT = 20
NOTIFICATION_PREVIEW_LENGTH = 20
VALID_REACT_IDS = frozenset({1})


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def public_url() -> str:
    """Base URL used when building links to served images."""
    host = os.getenv("API_HOST", "localhost")
    port = os.getenv("API_PORT", "8000")
    return os.getenv("PUBLIC_URL", f"http://{host}:{port}").rstrip("/")


DEFAULT_PHOTO_NAME = "default.jpg"


def default_photo_url() -> str:
    return f"{public_url()}/default/{DEFAULT_PHOTO_NAME}"
