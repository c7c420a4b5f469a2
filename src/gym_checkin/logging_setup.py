"""Centralized logging setup with optional rotating file persistence."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().strip('"').strip("'") or default


def _env_int(name: str, default: int) -> int:
    try:
        return int(_env(name, str(default)))
    except ValueError:
        return default


def configure_logging(service_name: str) -> None:
    """Console logging always; a rotating file too when LOG_DIR is set."""
    level = getattr(logging, _env("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_dir = os.getenv("LOG_DIR", "").strip()
    if log_dir:
        try:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    Path(log_dir) / _env("LOG_FILE_NAME", f"{service_name}.log"),
                    maxBytes=_env_int("LOG_MAX_BYTES", DEFAULT_LOG_MAX_BYTES),
                    backupCount=_env_int("LOG_BACKUP_COUNT", DEFAULT_LOG_BACKUP_COUNT),
                    encoding="utf-8",
                )
            )
        except OSError as error:
            logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, force=True)
            logging.getLogger(__name__).warning("File logging disabled: %s (%s)", log_dir, error)
            return

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
