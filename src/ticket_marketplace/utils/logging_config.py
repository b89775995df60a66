"""Logging setup for the CLI, client and server.

Everything logs under the ``ticket_marketplace`` logger so one call here
controls the whole package without touching uvicorn's or the root logger.
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "ticket_marketplace"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str | None) -> str:
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    return name if isinstance(logging.getLevelName(name), int) else "INFO"


def build_logging_config(level: str | None = None, log_file: str | Path | None = None) -> dict[str, Any]:
    """Build a ``dictConfig`` mapping for the package logger.

    Args:
        level: Level name; falls back to ``LOG_LEVEL`` and then INFO
        log_file: Optional file that receives the same records as the console

    Returns:
        Configuration dictionary for ``logging.config.dictConfig``
    """
    level_name = _resolve_level(level)
    handlers: dict[str, dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "formatter": "standard"},
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "standard",
            "filename": str(log_file),
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT}},
        "handlers": handlers,
        "loggers": {
            ROOT_LOGGER_NAME: {
                "level": level_name,
                "handlers": list(handlers),
                "propagate": False,
            },
        },
    }


def setup_logging(level: str | None = None, log_file: str | Path | None = None) -> logging.Logger:
    """Configure the package logger; safe to call more than once."""
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(level, log_file))
    return logging.getLogger(ROOT_LOGGER_NAME)


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
