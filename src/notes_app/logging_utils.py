"""Logging helpers for the notes application.

Two environments are supported: a local process (client library, scripts),
where handlers are installed here, and AWS Lambda, where the runtime already
attached a handler to the root logger and only the level is applied.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from pathlib import Path

from notes_app.config import load_settings

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_logging_configured = False
_logging_lock = threading.Lock()

_logger = logging.getLogger(__name__)


def _running_in_lambda() -> bool:
    return bool(os.getenv("AWS_LAMBDA_FUNCTION_NAME"))


def _resolve_level_and_file() -> tuple[int, str | None]:
    try:
        settings = load_settings()
    except RuntimeError as exc:
        # Handlers must still be able to log and answer with a failure envelope.
        _logger.warning("Logging falls back to INFO: %s", exc)
        return logging.INFO, None
    level = getattr(logging, settings.logging.level.upper(), logging.INFO)
    return level, settings.logging.file


def configure_logging() -> None:
    global _logging_configured

    level, log_file = _resolve_level_and_file()
    root = logging.getLogger()

    if _running_in_lambda() and root.handlers:
        # Keep the runtime's handler; it carries the request id into CloudWatch.
        root.setLevel(level)
        _logging_configured = True
        return

    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    handlers.append(stream_handler)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
            handlers.append(file_handler)
        except OSError as exc:
            _logger.warning("Failed to open log file %s: %s", log_file, exc)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    if not _logging_configured:
        with _logging_lock:
            if not _logging_configured:
                configure_logging()
    return logging.getLogger(name)
