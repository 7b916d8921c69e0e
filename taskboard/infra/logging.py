from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from taskboard.config import PROJECT_ROOT, Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILE_NAME = "taskboard.log"


def build_handlers(settings: Settings) -> list[logging.Handler]:
    """Console handler always; a rotating file only when ``log_dir`` is set.

    A relative ``log_dir`` is resolved against the project root.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if settings.log_dir.strip():
        log_dir = PROJECT_ROOT / settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_dir / LOG_FILE_NAME, maxBytes=2_000_000, backupCount=3)
        file_handler.setFormatter(formatter)
        handlers.insert(0, file_handler)

    return handlers


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), handlers=build_handlers(settings))
