"""
Structured Logging for Realms
=============================

Bounded Context: Observability

JSON-structured logging for the region store and codec.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from realms_zone.logging import create_logger, LogEvent
    >>> logger = create_logger("store")
    >>> logger.info(
    ...     event=LogEvent.STORE_CLEARED,
    ...     message="Cleared 3 regions",
    ...     metadata={'count': 3}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
