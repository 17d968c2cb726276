"""
Realms IO
=========

Bounded Context: Import/export of region stores.

Public API
----------
    export_store: Snapshot a RegionStore into an ExportDocument
    import_store: Load an ExportDocument (or dict) into a RegionStore
    ImportPolicy: REPLACE, MERGE, SKIP
    RecordError: One malformed record (skipped, never raised by import_store)
    UnsupportedFormatError: Unknown format tag (import aborted, store untouched)

Example:
    >>> from realms_io import export_store, import_store, ImportPolicy
    >>> document = export_store(store, author="gm", description="Session 4")
    >>> import_store(fresh_store, document.to_dict(), ImportPolicy.SKIP)
"""

from .schemas import (
    FORMAT_TAG,
    DocumentMetadata,
    ExportDocument,
    Timestamp,
    UnsupportedFormatError,
)
from .codec import ImportPolicy, RecordError, export_store, import_store

__all__ = [
    'FORMAT_TAG',
    'DocumentMetadata',
    'ExportDocument',
    'Timestamp',
    'UnsupportedFormatError',
    'ImportPolicy',
    'RecordError',
    'export_store',
    'import_store',
]

__version__ = "1.0.0"
