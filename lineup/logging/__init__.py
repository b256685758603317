"""Logging helpers."""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Iterable

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO.
NOISY_LOGGERS = ("googleapiclient.discovery_cache", "google_auth_oauthlib.flow")


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S%z", time.localtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    level: str | None = None,
    structured: bool = False,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    resolved = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=resolved, force=True)
    formatter = JsonFormatter() if structured else logging.Formatter(PLAIN_FORMAT)
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)
    for name in quiet:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
