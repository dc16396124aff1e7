"""JSON line logging for the watcher process.

Call :func:`configure_logging` once at startup; modules log through
``logging.getLogger(__name__)``.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

# Attributes present on every LogRecord; anything else came from ``extra=``.
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record with stable keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_logging(level: str | int | None = None) -> None:
    """Install a JSON stream handler on the root logger (idempotent).

    Args:
        level: Level or level name. Defaults to env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    root.setLevel(level.upper() if isinstance(level, str) else level)

    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
