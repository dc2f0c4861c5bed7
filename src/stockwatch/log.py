"""Logging helpers for stockwatch.

Usage:
    from stockwatch import configure_logging
    configure_logging(level="INFO")

Library modules only create loggers; the CLI and dashboard call this once.
"""

from __future__ import annotations

import json
import logging
from typing import Optional


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "INFO", fmt: Optional[str] = None, json_format: bool = False) -> None:
    """Configure root logging.

    Parameters
    ----------
    level: str
        Logging level name, e.g. "DEBUG"/"INFO"/"WARNING".
    fmt: Optional[str]
        Optional log format string. Ignored when ``json_format`` is True.
    json_format: bool
        Emit logs as JSON lines with fields ts/level/logger/msg.
    """
    resolved = getattr(logging, level.upper(), logging.INFO)
    if json_format:
        handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        logging.basicConfig(level=resolved, handlers=[handler], force=True)
    else:
        if fmt is None:
            fmt = "%(asctime)s %(levelname)s %(name)s - %(message)s"
        logging.basicConfig(level=resolved, format=fmt, force=True)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(resolved, logging.INFO))


__all__ = ["configure_logging"]
