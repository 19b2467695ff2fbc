from __future__ import annotations

import json
import logging
import sys
from typing import Any

from oauthlink.core.config import settings


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in payload or key in _STANDARD_ATTRS:
                continue
            payload.setdefault("extra", {})[key] = value
        return json.dumps(payload, default=str)


_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def init_logging(level: int | None = None) -> None:
    if logging.getLogger().handlers:
        return
    effective_level = level or getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
    root = logging.getLogger()
    root.setLevel(effective_level)
    root.addHandler(handler)
    # httpx logs full request URLs at INFO, which would include authorization codes
    logging.getLogger("httpx").setLevel(logging.WARNING)
