"""Structured JSON logging for the service."""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from lenco_shipping.config.settings import settings

# Attributes passed via `extra=` that are copied into the JSON line
CONTEXT_FIELDS = ("event", "order_id", "waybill")


class JSONFormatter(logging.Formatter):
    """One JSON object per log line, UTC timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        entry.update(
            {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}
        )
        return json.dumps(entry, default=str)


def configure_logging(level: str, log_dir: Optional[str] = None) -> None:
    """
    Attach JSON handlers to the root logger.

    Does nothing when the root logger already has handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(logging.DEBUG)
    formatter = JSONFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    stdout_handler.setFormatter(formatter)
    root.addHandler(stdout_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        file_handler = logging.FileHandler(path / f"lenco_shipping_{day}.log", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def setup_logger(name: str) -> logging.Logger:
    """Get logger for a module."""
    return logging.getLogger(name)


configure_logging(settings.log_level, settings.log_dir)
