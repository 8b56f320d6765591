"""simsweep.core.log

Logging setup for the CLI.

Library code only calls `logger.<level>("event_name", extra={...})`. This module
decides how those records look: plain text for terminals, one JSON object per
line when `logging.json_output` is set.
"""

from __future__ import annotations

import json
import logging
import sys

from simsweep.core.config import LoggingConfig

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def record_extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(record_extras(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


class PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname.lower()}: {record.getMessage()}"
        extras = record_extras(record)
        if extras:
            base += " " + " ".join(f"{k}={v}" for k, v in sorted(extras.items()))
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(cfg: LoggingConfig) -> logging.Logger:
    root = logging.getLogger("simsweep")
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if cfg.json_output else PlainFormatter())
    root.addHandler(handler)
    root.setLevel(cfg.level.upper())
    return root
