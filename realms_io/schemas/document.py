"""
Export Document Schema
======================

Bounded Context: Durable snapshot of a region store.

The export document is the only artifact the engine persists. How a host
stores it (file, database row, embedded field) is the host's concern.

Layout:
    {
        "format": "realms-and-reaches-v1",
        "metadata": {"author", "created", "version", "description", "scope_id"},
        "regions": [{"id", "name", "geometry", "tags", "metadata"}, ...],
        "bounds": {"x", "y", "width", "height"} | null
    }

Design:
- Envelope is typed; region records stay plain dicts so the importer
  can reject them one at a time
- from_dict() checks the format tag before anything else
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from realms_zone.geometry import BBox
from realms_zone.region import DATA_VERSION, DEFAULT_AUTHOR
from .common import Timestamp

FORMAT_TAG = "realms-and-reaches-v1"


class UnsupportedFormatError(ValueError):
    """Raised when a document's format tag is not FORMAT_TAG."""

    def __init__(self, format_tag: Any):
        self.format_tag = format_tag
        super().__init__(f"Unsupported data format: {format_tag!r} (expected {FORMAT_TAG!r})")


@dataclass(frozen=True)
class DocumentMetadata:
    """
    Export envelope metadata.

    Attributes:
        author: Who exported
        created: Export time
        version: Data version of the records
        description: Free text (optional)
        scope_id: Scope the regions were exported from (optional)
    """
    author: str = DEFAULT_AUTHOR
    created: Timestamp = field(default_factory=Timestamp.now)
    version: str = DATA_VERSION
    description: Optional[str] = None
    scope_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'author': self.author,
            'created': self.created.to_dict(),
            'version': self.version,
        }
        if self.description is not None:
            result['description'] = self.description
        if self.scope_id is not None:
            result['scope_id'] = self.scope_id
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DocumentMetadata':
        """Deserialize; missing fields take defaults.

        Raises:
            ValueError: If data is not a mapping or fields are invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Document metadata must be a mapping, got {type(data).__name__}")

        created = data.get('created')
        description = data.get('description')
        scope_id = data.get('scope_id')
        return cls(
            author=str(data.get('author') or DEFAULT_AUTHOR),
            created=Timestamp(value=str(created)) if created else Timestamp.now(),
            version=str(data.get('version') or DATA_VERSION),
            description=str(description) if description is not None else None,
            scope_id=str(scope_id) if scope_id is not None else None,
        )


@dataclass(frozen=True)
class ExportDocument:
    """
    Whole-store snapshot.

    Attributes:
        format: Format tag (always FORMAT_TAG once constructed)
        metadata: Envelope metadata
        regions: Region records as plain dicts (see Region.to_dict)
        bounds: Plane extent, if the exporting store had one

    Example:
        >>> doc = ExportDocument.from_json(text)
        >>> doc.region_count
        2
    """
    format: str = FORMAT_TAG
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    regions: List[Dict[str, Any]] = field(default_factory=list)
    bounds: Optional[BBox] = None

    def __post_init__(self):
        if self.format != FORMAT_TAG:
            raise UnsupportedFormatError(self.format)

    @property
    def region_count(self) -> int:
        return len(self.regions)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'format': self.format,
            'metadata': self.metadata.to_dict(),
            'regions': [dict(record) for record in self.regions],
            'bounds': self.bounds.to_dict() if self.bounds is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExportDocument':
        """Deserialize from dict.

        Region records are kept as-is; they are validated on import.

        Raises:
            UnsupportedFormatError: If the format tag is missing or unknown
            ValueError: If the envelope is structurally broken
        """
        if not isinstance(data, dict):
            raise ValueError(f"Export document must be a mapping, got {type(data).__name__}")

        format_tag = data.get('format')
        if format_tag != FORMAT_TAG:
            raise UnsupportedFormatError(format_tag)

        regions = data.get('regions')
        if regions is None:
            regions = []
        if not isinstance(regions, list):
            raise ValueError(f"Export document regions must be a list, got {type(regions).__name__}")

        bounds = data.get('bounds')
        if isinstance(bounds, dict):
            # Plane extents may omit the origin
            bounds = {'x': 0.0, 'y': 0.0, **bounds}
        return cls(
            format=format_tag,
            metadata=DocumentMetadata.from_dict(data.get('metadata') or {}),
            regions=list(regions),
            bounds=BBox.from_dict(bounds) if bounds is not None else None,
        )

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> 'ExportDocument':
        """Parse JSON text.

        Raises:
            UnsupportedFormatError: If the format tag is missing or unknown
            ValueError: If the text is not valid JSON or the envelope is broken
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid export document JSON: {e}") from e
        return cls.from_dict(data)
