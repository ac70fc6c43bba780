"""
Observability Demo - Structured JSON Logging
=============================================

What:  One JSON object per line on stdout, the format the log shipper
       (Fluent Bit / Promtail) expects from this app.
How:   Standard library loggers, rendered by structlog's ProcessorFormatter.
       The instrumentation middleware binds trace_id, route and method with
       structlog.contextvars, so every line logged while a request is being
       served carries them, including lines from third-party loggers.
When:  setup_logging() runs once at startup (lifespan); log() runs on every
       request event.

Log Format:
    {"level": "DEBUG", "timestamp": "2025-01-15T12:00:00.123Z",
     "trace_id": "3f9a...", "route": "/status", "method": "GET",
     "message": "Request completed with status 200", "status_code": 200,
     "duration_seconds": 0.0312}

    trace_id, route and method are omitted for lines logged outside a
    request (e.g. the startup line).

Processor chain:
    merge_contextvars → ExtraAdder → level label → timestamp
    → EventRenamer("message") → format_exc_info → field order → JSONRenderer

Levels:
    DEBUG, INFO, WARNING, ERROR, CRITICAL plus SUCCESS (25, between INFO
    and WARNING). The set is open: log("AUDIT", ...) is emitted at INFO
    severity with "AUDIT" kept as its level label.
"""

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union

import structlog
from structlog.types import EventDict, WrappedLogger

from obsdemo.middleware.context import RequestContext

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

EVENTS_LOGGER = "obsdemo.events"
events_logger = logging.getLogger(EVENTS_LOGGER)

# Record attributes promoted into the JSON line when present
_RECORD_FIELDS = ("trace_id", "route", "method", "status_code", "duration_seconds")

_FIELD_ORDER = (
    "level",
    "timestamp",
    "trace_id",
    "route",
    "method",
    "message",
    "status_code",
    "duration_seconds",
)


def format_timestamp(created: float) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2025-01-15T12:00:00.123Z"""
    dt = datetime.fromtimestamp(created, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ══════════════════════════════════════════════════════════════════════════
# Processors
# ══════════════════════════════════════════════════════════════════════════

def add_level_label(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Upper-case level name; a record's own level_label wins (open level set)."""
    record = event_dict.get("_record")
    if record is not None:
        event_dict["level"] = getattr(record, "level_label", record.levelname)
    else:
        event_dict["level"] = method_name.upper()
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    record = event_dict.get("_record")
    created = record.created if record is not None else time.time()
    event_dict["timestamp"] = format_timestamp(created)
    return event_dict


def order_fields(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Known keys first in a fixed order, anything else after them."""
    ordered = {key: event_dict.pop(key) for key in _FIELD_ORDER if key in event_dict}
    ordered.update(event_dict)
    return ordered


def build_formatter() -> structlog.stdlib.ProcessorFormatter:
    """ProcessorFormatter that renders any stdlib LogRecord as one JSON line."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.ExtraAdder(allow=_RECORD_FIELDS),
            add_level_label,
            add_timestamp,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            order_fields,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )


class StdoutJsonHandler(logging.StreamHandler):
    """
    StreamHandler bound to stdout whose write failures are dropped.

    A closed or broken stdout must never turn into a failed request.
    """

    def __init__(self, stream=None):
        super().__init__(stream or sys.stdout)
        self.setFormatter(build_formatter())

    def handleError(self, record: logging.LogRecord) -> None:
        pass


def resolve_level(level: Union[str, int]) -> Tuple[int, str]:
    """
    Map a level name (or number) to (severity, label).

    Unknown names are not rejected: they log at INFO severity and keep
    their own label.
    """
    if isinstance(level, int):
        return level, logging.getLevelName(level)
    label = level.upper()
    value = logging.getLevelName(label)
    if isinstance(value, int):
        return value, label
    return logging.INFO, label


def log(
    level: Union[str, int],
    message: str,
    context: Optional[RequestContext] = None,
    **fields: Any,
) -> None:
    """
    Emit one structured log line.

    Args:
        level:    DEBUG, INFO, ERROR, SUCCESS, ... (case-insensitive, open set)
        message:  Human-readable message
        context:  Request context; defaults to the fields bound for the
                  request currently being served
        fields:   Extra structured fields (status_code, duration_seconds)
    """
    severity, label = resolve_level(level)

    extra: Dict[str, Any] = {"level_label": label}
    if context is not None:
        extra.update(trace_id=context.trace_id, route=context.route, method=context.method)
    else:
        extra.update(structlog.contextvars.get_contextvars())
    extra.update(fields)

    events_logger.log(severity, message, extra=extra)


def setup_logging(level: int = logging.DEBUG) -> None:
    """
    Configure JSON line logging for the whole process.

    Called once from the application lifespan, before the startup line.
    """
    logging.basicConfig(
        level=level,
        handlers=[StdoutJsonHandler()],
        force=True,
    )

    # Uvicorn's access log duplicates the completion line in another format
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
