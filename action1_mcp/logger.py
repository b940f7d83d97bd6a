"""Logging setup with credential redaction.

Log calls attach structured metadata through ``extra={"meta": {...}}``. The
RedactingFilter scrubs that metadata before any handler formats it, so a
token passed as metadata never reaches stderr.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

REDACTED = "[REDACTED]"

REDACT_KEYS = (
    "authorization",
    "token",
    "secret",
    "key",
    "bearer",
    "basic",
)

TEXT_FORMAT = '[%(levelname)s] %(message)s'


def _is_sensitive(key: str) -> bool:
    lower = str(key).lower()
    return any(marker in lower for marker in REDACT_KEYS)


def redact(value: Any) -> Any:
    """Return a copy of value with credential-like keys masked at any depth"""
    if isinstance(value, dict):
        return {
            k: REDACTED if _is_sensitive(k) else redact(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


class RedactingFilter(logging.Filter):
    """Replaces record.meta with its redacted form"""

    def filter(self, record: logging.LogRecord) -> bool:
        meta = getattr(record, "meta", None)
        if meta is not None:
            record.meta = redact(meta)
        return True


class StructuredFormatter(logging.Formatter):
    """Renders one JSON object per record: ts, level, msg and optional meta"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "msg": record.getMessage(),
        }
        meta = getattr(record, "meta", None)
        if meta is not None:
            entry["meta"] = meta
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        meta = getattr(record, "meta", None)
        if meta:
            line = f"{line} {json.dumps(meta, default=str)}"
        return line


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Handler:
    """Install a redacting stderr handler on the root logger

    stdout is reserved for the MCP stdio transport, so everything goes to
    stderr.

    Args:
        level: Log level name, defaults to LOG_LEVEL or INFO
        fmt: "json" or "text", defaults to LOG_FORMAT or json

    Returns:
        The installed handler
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    fmt = (fmt or os.getenv("LOG_FORMAT", "json")).lower()

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(RedactingFilter())
    handler.setFormatter(TextFormatter() if fmt == "text" else StructuredFormatter())

    logging.basicConfig(level=level, handlers=[handler], force=True)
    return handler


__all__ = [
    "REDACTED",
    "REDACT_KEYS",
    "redact",
    "RedactingFilter",
    "StructuredFormatter",
    "TextFormatter",
    "configure_logging",
]
