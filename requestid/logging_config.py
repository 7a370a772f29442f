"""Log formatting that stamps every record with the current request ID."""

from __future__ import annotations

import json
import logging
import sys
import time

from requestid.services.request_context import get_request_id

_DATEFMT = "%Y-%m-%d %H:%M:%S"


class RequestIdFilter(logging.Filter):
    """Set ``record.request_id`` to the bound request ID, or ``""``.

    Installed on the handler by :func:`setup_logging`; the formatters below
    only read the attribute.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        rid = get_request_id()
        record.request_id = str(rid) if rid is not None else ""
        return True


class TextFormatter(logging.Formatter):
    """``2024-01-01 12:00:00 INFO     [request_id] logger - message``

    The bracketed prefix is omitted for records logged outside a request.
    """

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)-8s %(rid_prefix)s%(name)s - %(message)s",
            datefmt=_DATEFMT,
        )

    def format(self, record: logging.LogRecord) -> str:
        rid = getattr(record, "request_id", "")
        record.rid_prefix = f"[{rid}] " if rid else ""
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log aggregators."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S")
            + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        rid = getattr(record, "request_id", "")
        if rid:
            entry["request_id"] = rid
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    """Configure the root logger. Call once at startup."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicate output on reload
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())
    root.addHandler(handler)
