# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across all components
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Provides structured, JSON-formatted logging for the customer/order service.

Features:
- Component-based loggers
- Contextual fields (request_id, aggregate, entity_id, partition_key)
- JSON output for log aggregation
- Human-readable output for development

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("repositories.account")

    with log_context(aggregate="account", entity_id="3f2a..."):
        logger.info("Updating account")
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union


class ComponentType(str, Enum):
    """Layer a logger belongs to."""
    API = "api"
    HANDLER = "handler"
    REPOSITORY = "repository"
    INFRASTRUCTURE = "infrastructure"


@dataclass(frozen=True)
class LogContext:
    """
    Fields attached to every record emitted inside a ``log_context`` block.

    Held in a context variable so concurrent requests (and the per-partition
    scans of one request) each see their own fields.
    """
    request_id: Optional[str] = None
    aggregate: Optional[str] = None
    entity_id: Optional[str] = None
    partition_key: Optional[str] = None
    operation: Optional[str] = None
    component: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with ``extra`` flattened in."""
        values = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        values.update(self.extra)
        return values


_EMPTY_CONTEXT = LogContext()
_active_contexts: ContextVar[Tuple[LogContext, ...]] = ContextVar("active_log_contexts", default=())

# Short labels used by the human formatter, in display order
_HUMAN_LABELS = (
    ("request_id", "req"),
    ("aggregate", "agg"),
    ("entity_id", "id"),
    ("partition_key", "pk"),
)


def get_current_context() -> LogContext:
    """Innermost active context, or an empty one outside any block."""
    active = _active_contexts.get()
    return active[-1] if active else _EMPTY_CONTEXT


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Layer fields over the enclosing context for the duration of the block.

    Fields passed as None keep the enclosing value; ``extra`` is merged.

    Example:
        with log_context(request_id="req-123", aggregate="product"):
            logger.info("Querying catalog")
    """
    parent = get_current_context()
    overrides = {key: value for key, value in kwargs.items() if value is not None}
    if "extra" in overrides:
        overrides["extra"] = {**parent.extra, **overrides["extra"]}

    current = replace(parent, **overrides)
    token = _active_contexts.set(_active_contexts.get() + (current,))
    try:
        yield current
    finally:
        _active_contexts.reset(token)


def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "data", None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line for the log pipeline."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict()
        if context:
            payload["context"] = context

        data = _record_data(record)
        if data:
            payload["data"] = data

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.WARNING:
            payload["source"] = f"{record.pathname}:{record.lineno} in {record.funcName}"

        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line output for local runs, context shown in brackets."""

    def format(self, record: logging.LogRecord) -> str:
        context = get_current_context()
        tags = [
            f"{label}={getattr(context, name)}"
            for name, label in _HUMAN_LABELS
            if getattr(context, name)
        ]
        prefix = "{} {:<8} {}".format(
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            record.levelname,
            record.name,
        )
        if tags:
            prefix += f" [{', '.join(tags)}]"

        line = f"{prefix}: {record.getMessage()}"
        data = _record_data(record)
        if data:
            line += f" {data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Copies caller ``extra`` onto the record as a single ``data`` dict."""

    def process(self, msg, kwargs):
        data = dict(kwargs.pop("extra", None) or {})
        component = (self.extra or {}).get("component")
        if component:
            data.setdefault("component", component)
        kwargs["extra"] = {"data": data}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Logger whose records carry the active ``log_context`` fields."""
    return ContextLogger(logging.getLogger(name), {"component": component.value if component else None})


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Level name or number
        json_output: JSON lines instead of the human format; LOG_FORMAT=json
            in the environment has the same effect
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # The Azure SDK logs every HTTP request at INFO
    logging.getLogger("azure").setLevel(max(level, logging.WARNING))


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
