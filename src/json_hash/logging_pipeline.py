"""One-line JSON log output for the json-hash command line."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TextIO
from uuid import uuid4

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_FIELDS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "taskName", "trace_id"}


class JsonFormatter(logging.Formatter):
    """Format each record as a single JSON object.

    Fields passed through ``extra`` are collected under ``context``. A record
    may carry its own ``trace_id``; otherwise the formatter's is used.
    """

    def __init__(self, *, trace_id: str | None = None) -> None:
        super().__init__()
        self.trace_id = trace_id or uuid4().hex

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "trace_id": getattr(record, "trace_id", None) or self.trace_id,
            "context": {
                key: value
                for key, value in vars(record).items()
                if key not in _RECORD_FIELDS
            },
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_structured_logging(
    logger: logging.Logger,
    *,
    trace_id: str | None = None,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a JSON-emitting stream handler to ``logger``.

    Args:
        logger: Target logger to configure.
        trace_id: Trace identifier stamped on records that carry none. A
            random one is generated when omitted.
        level: Logging verbosity level.
        stream: Destination stream; ``sys.stderr`` when omitted.

    Returns:
        The installed handler, so the caller can remove it again.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter(trace_id=trace_id))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
