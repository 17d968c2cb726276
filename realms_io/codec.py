"""
Import/Export Codec
===================

Bounded Context: Whole-store snapshots in and out of a RegionStore.

Design:
- export_store() snapshots every region verbatim (ids, tags, metadata)
- import_store() checks the format before touching the store
- Malformed records are skipped one at a time; the batch continues
- Imported tags are validated but never collapsed by cardinality, so
  conflicts in hand-edited documents survive for detect_conflicts()

Example:
    >>> document = export_store(store, author="gm")
    >>> text = document.to_json()
    >>> import_store(other_store, ExportDocument.from_json(text), ImportPolicy.MERGE)
    2
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from realms_tags import TagRegistry
from realms_zone.logging import LogEvent, create_logger
from realms_zone.region import Region
from realms_zone.store import RegionStore
from .schemas import DocumentMetadata, ExportDocument, Timestamp, UnsupportedFormatError

logger = create_logger("codec")


class ImportPolicy(str, Enum):
    """How imported ids that already exist in the store are handled."""
    REPLACE = "replace"    # Clear the store first, insert everything
    MERGE = "merge"        # Keep free ids, re-key conflicting ones
    SKIP = "skip"          # Leave existing regions, drop conflicting records


class RecordError(ValueError):
    """One malformed region record in an import batch."""

    def __init__(self, index: int, reason: str, region_id: Optional[str] = None):
        self.index = index
        self.reason = reason
        self.region_id = region_id
        super().__init__(f"Record {index} ({region_id or 'no id'}): {reason}")


def export_store(
    store: RegionStore,
    author: Optional[str] = None,
    description: Optional[str] = None
) -> ExportDocument:
    """
    Snapshot a store.

    Args:
        store: Store to export
        author: Document author (defaults to store.config.author)
        description: Free text

    Returns:
        ExportDocument with one record per region, in insertion order
    """
    document = ExportDocument(
        metadata=DocumentMetadata(
            author=author or store.config.author,
            created=Timestamp.now(),
            description=description,
            scope_id=store.scope_id,
        ),
        regions=[region.to_dict() for region in store],
        bounds=store.plane,
    )

    logger.info(
        event=LogEvent.EXPORT_COMPLETED,
        message=f"Exported {document.region_count} regions",
        metadata={'scope_id': store.scope_id, 'count': document.region_count}
    )
    return document


def _parse_record(index: int, record: Any, registry: TagRegistry) -> Region:
    """
    Build a Region from one record, or raise RecordError.

    Tags must each be valid on their own; single-valued namespaces are not
    collapsed. Any failure while building the region is a record error, so
    one corrupt record never aborts the batch.
    """
    region_id = record.get('id') if isinstance(record, dict) else None

    try:
        region = Region.from_dict(record)
    except ValueError as e:
        raise RecordError(index, str(e), region_id) from e
    except Exception as e:
        raise RecordError(index, f"{type(e).__name__}: {e}", region_id) from e

    for tag in region.tags:
        reason = registry.explain(tag)
        if reason is not None:
            raise RecordError(index, f"invalid tag {tag!r}: {reason}", region.id)

    return region


def import_store(
    store: RegionStore,
    document: Union[ExportDocument, Dict[str, Any]],
    policy: ImportPolicy = ImportPolicy.SKIP
) -> int:
    """
    Load a document into a store.

    Args:
        store: Target store
        document: ExportDocument or its raw dict form
        policy: Id-conflict handling (see ImportPolicy)

    Returns:
        Number of regions actually inserted

    Raises:
        UnsupportedFormatError: Bad format tag (store unchanged)
        ValueError: Broken envelope or unknown policy (store unchanged)
    """
    policy = ImportPolicy(policy)

    if not isinstance(document, ExportDocument):
        try:
            document = ExportDocument.from_dict(document)
        except UnsupportedFormatError as e:
            logger.error(
                event=LogEvent.IMPORT_FORMAT_ERROR,
                message="Rejected import document",
                metadata={'scope_id': store.scope_id},
                exc_info=e
            )
            raise

    logger.info(
        event=LogEvent.IMPORT_STARTED,
        message=f"Importing {document.region_count} records",
        metadata={'scope_id': store.scope_id, 'policy': policy.value}
    )

    if policy is ImportPolicy.REPLACE:
        store.clear()

    imported = 0
    skipped = 0
    conflicts = 0

    for index, record in enumerate(document.regions):
        try:
            region = _parse_record(index, record, store.registry)
        except RecordError as e:
            skipped += 1
            logger.warning(
                event=LogEvent.IMPORT_RECORD_SKIPPED,
                message="Skipped malformed record",
                metadata={'index': index, 'region_id': e.region_id, 'reason': e.reason},
                exc_info=e
            )
            continue

        if region.id in store:
            if policy is ImportPolicy.MERGE:
                region.id = store.new_id()
            else:
                # SKIP, or a repeated id inside a REPLACE document
                conflicts += 1
                continue

        store.insert(region)
        imported += 1

    logger.info(
        event=LogEvent.IMPORT_COMPLETED,
        message=f"Imported {imported} regions",
        metadata={
            'scope_id': store.scope_id,
            'policy': policy.value,
            'imported': imported,
            'skipped': skipped,
            'conflicts': conflicts,
        }
    )
    return imported
