"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<action>

    component: region, store, tag, import, export, config, error
    action: created, updated, rejected, completed, ...

Example Log Query:
    fields @timestamp, event, message, metadata.region_id
    | filter event = "import.record.skipped"
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - region.*: Single-region lifecycle
    - store.*: Whole-store operations and queries
    - tag.*: Tag validation outcomes
    - import.* / export.*: Codec activity
    - config.*: Configuration loading
    - error.*: Error conditions
    """

    # ========== Region Events ==========
    REGION_CREATED = "region.created"
    """Region created with a fresh id."""

    REGION_INSERTED = "region.inserted"
    """Pre-built region inserted verbatim (import path)."""

    REGION_UPDATED = "region.updated"
    """Region patch committed."""

    REGION_DELETED = "region.deleted"
    """Region removed from the store."""

    # ========== Store Events ==========
    STORE_CLEARED = "store.cleared"
    """All regions removed."""

    STORE_QUERIED = "store.queried"
    """Point/bounds/tag query executed (DEBUG)."""

    # ========== Tag Events ==========
    TAG_REJECTED = "tag.rejected"
    """Tag failed validation during create/update."""

    # ========== Codec Events ==========
    EXPORT_COMPLETED = "export.completed"
    """Store serialized to an export document."""

    IMPORT_STARTED = "import.started"
    """Import accepted the document format and began applying records."""

    IMPORT_COMPLETED = "import.completed"
    """Import finished (count may be below document total)."""

    IMPORT_RECORD_SKIPPED = "import.record.skipped"
    """One malformed record was skipped."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Store configuration loaded."""

    # ========== Error Events ==========
    IMPORT_FORMAT_ERROR = "error.import_format"
    """Import document carries an unrecognized format tag."""

    NOT_FOUND_ERROR = "error.not_found"
    """Operation referenced a missing region id."""


# Event categories for filtering
REGION_EVENTS = {
    LogEvent.REGION_CREATED,
    LogEvent.REGION_INSERTED,
    LogEvent.REGION_UPDATED,
    LogEvent.REGION_DELETED,
}

CODEC_EVENTS = {
    LogEvent.EXPORT_COMPLETED,
    LogEvent.IMPORT_STARTED,
    LogEvent.IMPORT_COMPLETED,
    LogEvent.IMPORT_RECORD_SKIPPED,
}

ERROR_EVENTS = {
    LogEvent.IMPORT_FORMAT_ERROR,
    LogEvent.NOT_FOUND_ERROR,
}
