import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_FILE_NAME = "ledger.log"
_LEVEL_MAP = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def _parse_level(value: str) -> int:
    return _LEVEL_MAP.get(value.upper(), logging.INFO)


def _log_dir() -> Path:
    raw = os.getenv("ARMORY_LOG_DIR")
    return Path(raw) if raw else _DEFAULT_LOG_DIR


class JsonFormatter(logging.Formatter):
    """Formatter that renders ledger records as structured JSON lines."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")
        if ts.endswith("+00:00"):
            ts = f"{ts[:-6]}Z"

        payload = getattr(record, "payload", {})
        if not isinstance(payload, dict):
            payload = {"value": payload}

        record_dict: Dict[str, Any] = {
            "ts": ts,
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", record.getMessage()),
            "character_id": getattr(record, "character_id", None),
            "payload": payload,
        }
        return json.dumps(record_dict, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Return a rotating JSON logger for ledger events."""
    logger = logging.getLogger(name)
    if getattr(logger, "_configured", False):
        return logger

    log_dir = _log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.setLevel(_parse_level(os.getenv("ARMORY_LOG_LEVEL", "INFO")))
    handler = RotatingFileHandler(
        log_dir / _LOG_FILE_NAME,
        maxBytes=10_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    logger._configured = True  # type: ignore[attr-defined]
    return logger


def log_event(logger: logging.Logger, event: str, character_id: Any, **payload: Any) -> None:
    logger.info(event, extra={"event": event, "character_id": character_id, "payload": payload})
