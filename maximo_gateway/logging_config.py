"""
Stderr-only logging configuration.

The server logs JSON lines; the CLI uses a short human-readable format.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_THIRD_PARTY_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastmcp", "httpx")


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

        return json.dumps(log_data)


def configure_logging(json_output: bool = True, level: int = logging.INFO) -> None:
    """
    Configure logging to stderr only.

    Clears existing handlers so repeated calls do not duplicate output.
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s  %(levelname)-7s  %(message)s", datefmt="%H:%M:%S")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for logger_name in _THIRD_PARTY_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.setLevel(level if logger_name != "httpx" else logging.WARNING)
        logger.propagate = False
