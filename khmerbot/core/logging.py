"""Logging setup: console output plus a JSON-lines log file rotated at midnight."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger.json import JsonFormatter

CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ACTIVE_LOG_NAME = "bot.log"


class JsonLineFormatter(JsonFormatter):
    """One JSON object per record with timestamp, level, logger and error details."""

    def __init__(self) -> None:
        super().__init__("%(message)s", json_ensure_ascii=False)

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        stack = log_record.pop("exc_info", None)
        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            log_record["error"] = {
                "name": type(error).__name__,
                "message": str(error),
                "stack": stack or self.formatException(record.exc_info),
            }


def dated_log_name(default_name: str) -> str:
    """Rename ``<dir>/bot.log.YYYY-MM-DD`` rollovers to ``<dir>/YYYY-MM-DD.log``."""
    path = Path(default_name)
    day = path.name.rsplit(".", 1)[-1]
    return str(path.with_name(f"{day}.log"))


def build_file_handler(log_dir: str) -> TimedRotatingFileHandler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        directory / ACTIVE_LOG_NAME,
        when="midnight",
        utc=True,
        encoding="utf-8",
    )
    handler.namer = dated_log_name
    handler.setFormatter(JsonLineFormatter())
    return handler


def configure_logging(level: str = "INFO", log_dir: str | None = None) -> None:
    """Install console and (when possible) daily file handlers on the root logger."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if not log_dir:
        return

    try:
        file_handler = build_file_handler(log_dir)
    except OSError:
        logging.getLogger(__name__).exception("Could not open log directory %s; logging to console only", log_dir)
        return

    root.addHandler(file_handler)
