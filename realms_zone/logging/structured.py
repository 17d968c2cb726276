"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

One JSON object per log line, emitted through the stdlib logging tree
under "realms.<component>".

Design:
- Each entry carries timestamp, level, component, event and message
- Bound context (e.g. scope_id) is merged into every entry's metadata
- Per-call metadata wins over bound context on key clashes
- Level checks happen before the entry is built (cheap DEBUG queries)

Example:
    >>> logger = create_logger("store").bind(scope_id="scene_01")
    >>> logger.info(
    ...     event=LogEvent.REGION_CREATED,
    ...     message="Created region",
    ...     metadata={'region_id': 'a1b2c3d4e5f6a7b8'}
    ... )

Output:
    {"timestamp": "2026-10-16T15:30:45.123456+00:00", "level": "INFO",
     "component": "store", "event": "region.created", "message": "Created region",
     "metadata": {"scope_id": "scene_01", "region_id": "a1b2c3d4e5f6a7b8"}}
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent


class _JSONLineFormatter(logging.Formatter):
    # Messages are already serialized entries
    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def _attach_handler(logger: logging.Logger) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_JSONLineFormatter())
        logger.addHandler(handler)


class StructuredLogger:
    """
    JSON structured logger for one component.

    Attributes:
        component: Component name ("store", "codec", "config")
        logger: Underlying logging.Logger ("realms.<component>")
        context: Metadata merged into every entry
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        context: Optional[Dict[str, Any]] = None
    ):
        self.component = component
        self.context = dict(context or {})
        self.logger = logging.getLogger(f"realms.{component}")
        self.logger.setLevel(level)
        _attach_handler(self.logger)

    def bind(self, **context: Any) -> 'StructuredLogger':
        """
        Derive a logger that adds `context` to every entry.

        The derived logger shares the underlying logging.Logger (and so its
        level and handler) with this one.
        """
        bound = StructuredLogger.__new__(StructuredLogger)
        bound.component = self.component
        bound.context = {**self.context, **context}
        bound.logger = self.logger
        return bound

    def log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Emit one entry at a numeric logging level.

        Args:
            level: logging.DEBUG .. logging.ERROR
            event: Typed log event
            message: Human-readable message
            metadata: Per-call context
            exc_info: Exception summarized under "exception"
        """
        if not self.logger.isEnabledFor(level):
            return

        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        merged = {**self.context, **(metadata or {})}
        if merged:
            entry['metadata'] = merged

        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
            }

        self.logger.log(level, json.dumps(entry, default=str))

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.INFO, event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log a recoverable problem (rejected tag, skipped import record).

        Example:
            >>> logger.warning(
            ...     event=LogEvent.IMPORT_RECORD_SKIPPED,
            ...     message="Skipped malformed record",
            ...     metadata={'index': 3},
            ...     exc_info=error
            ... )
        """
        self.log(logging.WARNING, event, message, metadata, exc_info)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        self.log(logging.ERROR, event, message, metadata, exc_info)


def create_logger(component: str, level: int = logging.INFO) -> StructuredLogger:
    """
    Create the StructuredLogger for a component.

    Example:
        >>> logger = create_logger("codec", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
