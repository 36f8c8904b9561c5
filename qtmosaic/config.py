import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_COLOR_THRESHOLD = 280
DEFAULT_MIN_RECT_SIZE = 1


@dataclass
class Settings:
    """Rendering and runtime settings, read from the environment (and .env)."""

    color_threshold: int = DEFAULT_COLOR_THRESHOLD
    min_rect_size: int = DEFAULT_MIN_RECT_SIZE
    log_level: str = "INFO"
    log_folder: Optional[str] = None


def load_settings(env_file=None):
    load_dotenv(env_file)

    return Settings(
        color_threshold=int(os.getenv("QTMOSAIC_COLOR_THRESHOLD", DEFAULT_COLOR_THRESHOLD)),
        min_rect_size=int(os.getenv("QTMOSAIC_MIN_RECT_SIZE", DEFAULT_MIN_RECT_SIZE)),
        log_level=os.getenv("QTMOSAIC_LOG_LEVEL", "INFO").upper(),
        log_folder=os.getenv("QTMOSAIC_LOG_FOLDER") or None,
    )
