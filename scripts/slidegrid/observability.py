"""Logging setup: JSON or plain-text records on stderr.

Build telemetry travels as `extra=` fields (stage, success, duration_ms,
error_code); the JSON formatter surfaces them when present.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = ("stage", "success", "duration_ms", "error_code")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "WARNING", fmt: str = "text") -> logging.Handler:
    """Install the slidegrid handler on the root logger, replacing an earlier one."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_slidegrid", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._slidegrid = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return handler
