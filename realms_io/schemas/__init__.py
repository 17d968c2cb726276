"""
Realms IO Schemas
=================

Bounded Context: Data Structures

Immutable, typed envelope for exported region snapshots.

Public API
----------
    Timestamp: ISO 8601 timestamp wrapper
    DocumentMetadata: Envelope metadata
    ExportDocument: Complete export document
    UnsupportedFormatError: Unknown format tag
    FORMAT_TAG: Current format identifier
"""

from .common import Timestamp
from .document import (
    FORMAT_TAG,
    DocumentMetadata,
    ExportDocument,
    UnsupportedFormatError,
)

__all__ = [
    'Timestamp',
    'FORMAT_TAG',
    'DocumentMetadata',
    'ExportDocument',
    'UnsupportedFormatError',
]
