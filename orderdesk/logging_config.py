"""JSON logging for the orderdesk bot.

Bot API URLs carry the bot token in the path (``/bot<token>/sendMessage``) and
httpx puts the URL into its exception text, so the formatter masks tokens in the
message, the context and the traceback before anything reaches stdout.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

SERVICE_NAME = "orderdesk-bot"
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_BOT_TOKEN_RE = re.compile(r"bot\d+:[A-Za-z0-9_-]+")
_MASKED_TOKEN = "bot***"


def redact(value: Any) -> Any:
    if isinstance(value, str):
        return _BOT_TOKEN_RE.sub(_MASKED_TOKEN, value)
    if isinstance(value, dict):
        return {key: redact(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per line, stamped with the record's own creation time."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = redact(context)

        if record.exc_info:
            log_data["exception"] = redact(self.formatException(record.exc_info))

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Route every logger to stdout as JSON. Safe to call more than once."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"orderdesk.{name}")
