import json
import logging
from pathlib import Path

from rooguys.obs.logging import LogSettings, build_logger, log_event


def test_jsonl_log_file(tmp_path: Path) -> None:
    log_path = tmp_path / "client.jsonl"
    logger = build_logger(LogSettings(level="INFO", session_id="abc123", log_file=log_path, jsonl=True))

    log_event(logger, logging.INFO, "http_request", "GET /badges", status=200, attempt=1)
    log_event(logger, logging.DEBUG, "ignored", "below level")
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["session_id"] == "abc123"
    assert entry["event"] == "http_request"
    assert entry["msg"] == "GET /badges"
    assert entry["extra"] == {"status": 200, "attempt": 1}
    assert entry["level"] == "INFO"


def test_logger_is_isolated() -> None:
    logger = build_logger(LogSettings(level="warning", session_id="iso", jsonl=False))

    assert logger.propagate is False
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
