"""
Structured JSON Lines logging for the Rooguys client.

Each record emitted through ``log_event`` carries an event name and a
dictionary of structured fields. With ``JsonLineFormatter`` installed the
record is rendered as a single JSON object per line:

    {"ts": "2024-01-15T10:30:00Z", "level": "INFO", "session_id": "abc123",
     "event": "http_request", "module": "client", "msg": "GET /users/u1",
     "extra": {"status": 200, "attempt": 1, "latency_ms": 41.7}}

Library code never configures handlers; ``build_logger`` is for hosts such
as the command line entry point.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class LogSettings:
    """
    Configuration for logger initialization.

    Attributes:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        session_id: Identifier included in every entry for correlation.
        log_file: Optional path to log file (None for console only).
        jsonl: If True, use JSON Lines format; otherwise plain text.
    """
    level: str
    session_id: str
    log_file: Path | None = None
    jsonl: bool = True


class JsonLineFormatter(logging.Formatter):
    """Render each log record as one JSON object."""

    def __init__(self, session_id: str):
        super().__init__()
        self._session_id = session_id

    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "event", "log")
        extra = getattr(record, "extra", {})
        if not isinstance(extra, dict):
            extra = {"value": extra}

        payload = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "session_id": self._session_id,
            "event": event,
            "module": record.module,
            "msg": record.getMessage(),
            "extra": extra,
        }
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logger(settings: LogSettings) -> logging.Logger:
    """
    Create an isolated (non-propagating) logger for a client session.

    Writes to stderr and, when ``settings.log_file`` is set, to that file.
    """
    logger = logging.getLogger(f"rooguys.{settings.session_id}")
    logger.setLevel(settings.level.upper())
    logger.handlers.clear()
    logger.propagate = False

    formatter = JsonLineFormatter(settings.session_id) if settings.jsonl else None

    stream_handler = logging.StreamHandler()
    if formatter:
        stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        if formatter:
            file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    message: str,
    *,
    exc_info: logging._ExcInfoType | None = None,
    **extra: Any,
) -> None:
    """
    Log a structured event.

    Example:
        >>> log_event(logger, logging.INFO, "http_request", "GET /badges",
        ...           status=200, attempt=1)
    """
    logger.log(level, message, extra={"event": event, "extra": extra}, exc_info=exc_info)
