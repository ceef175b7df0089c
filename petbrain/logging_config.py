# petbrain/logging_config.py
"""
Stderr-only logging configuration.

stdout is reserved for command output (extracted facts, parsed cards), so
every handler writes to stderr.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

VERBOSITY_LEVELS = {
    "quiet": logging.WARNING,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}

HUMAN_FORMAT = "%(asctime)s  %(levelname)-7s  %(message)s"


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON line."""
        log_data: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            log_data["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def configure_logging(verbosity: str = "normal", json_logs: bool = False) -> None:
    """
    Configure the root logger with a single stderr handler.

    Clears existing handlers so repeated calls don't duplicate output.

    Args:
        verbosity: quiet, normal or verbose
        json_logs: JSON lines instead of the human-readable format
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(VERBOSITY_LEVELS.get(verbosity, logging.INFO))

    # aiosqlite logs every statement at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
