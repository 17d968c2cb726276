"""
Region Module
=============

Bounded Context: Realm region value type.

A Region combines an identifier, a display name, one geometry, a set of
unique key:value tags and metadata. It owns its data and holds no
back-references to the store.

Design:
- Mutable value object (the store mutates regions in place)
- Tags kept as an insertion-ordered set; read back sorted
- Single-valued namespaces replace on add (cardinality from TagRegistry)
- Every effective mutation touches metadata.modified
- to_dict()/from_dict() is the only serialization path
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from realms_tags import DEFAULT_REGISTRY, TagRegistry, split_tag
from realms_zone.geometry import BBox, Geometry, PolygonShape, geometry_from_dict

DATA_VERSION = "1.0.0"
DEFAULT_AUTHOR = "Unknown"
DEFAULT_PLACEHOLDER_PREFIX = "Realm"


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def placeholder_name(region_id: str, prefix: str = DEFAULT_PLACEHOLDER_PREFIX) -> str:
    """Derived display name for regions created without one."""
    return f"{prefix} {region_id[:8]}"


@dataclass
class RegionMetadata:
    """
    Region bookkeeping.

    Attributes:
        created: ISO timestamp, set once at creation
        modified: ISO timestamp, refreshed by every mutation
        author: User id or name
        version: Data version for migration
    """

    created: str
    modified: str
    author: str = DEFAULT_AUTHOR
    version: str = DATA_VERSION

    @classmethod
    def new(cls, author: str = DEFAULT_AUTHOR, timestamp: Optional[str] = None) -> 'RegionMetadata':
        now = timestamp or utc_now_iso()
        return cls(created=now, modified=now, author=author)

    def to_dict(self) -> Dict[str, str]:
        return {
            'created': self.created,
            'modified': self.modified,
            'author': self.author,
            'version': self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegionMetadata':
        """
        Deserialize from dict; missing timestamps default to now.

        Raises:
            ValueError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise ValueError(f"Region metadata must be a mapping, got {type(data).__name__}")
        now = utc_now_iso()
        return cls(
            created=str(data.get('created') or now),
            modified=str(data.get('modified') or now),
            author=str(data.get('author') or DEFAULT_AUTHOR),
            version=str(data.get('version') or DATA_VERSION),
        )


@dataclass
class Region:
    """
    A named, tagged geometric area.

    Attributes:
        id: Opaque unique identifier (immutable by convention)
        name: Display name
        geometry: Polygon, rectangle or circle
        metadata: Timestamps and author

    Equality compares id, name, geometry, metadata and the tag *set*
    (insertion order is ignored).

    Usage:
        region = Region(id="abc", name="Old Wood", geometry=square,
                        metadata=RegionMetadata.new())
        region.add_tag("biome:forest")
        region.add_tag("biome:swamp")      # replaces biome:forest
        region.add_tag("resources:timber")
        region.tags                         # ['biome:swamp', 'resources:timber']
    """

    id: str
    name: str
    geometry: Geometry = field(default_factory=PolygonShape)
    metadata: RegionMetadata = field(default_factory=RegionMetadata.new)
    _tags: Dict[str, None] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        if not self.id:
            raise ValueError("Region id cannot be empty")
        if not self.name:
            self.name = placeholder_name(self.id)

    # ========== Tag Queries ==========

    @property
    def tags(self) -> List[str]:
        """All tags, sorted lexicographically."""
        return sorted(self._tags)

    def get_tag(self, key: str) -> Optional[str]:
        """Value of the first tag with this key, or None."""
        for tag in self._tags:
            tag_key, value = split_tag(tag)
            if tag_key == key:
                return value
        return None

    def get_tag_number(self, key: str) -> Optional[float]:
        """Tag value parsed as float, or None if absent/unparseable."""
        value = self.get_tag(key)
        if value is None:
            return None
        try:
            return float(value)
        except ValueError:
            return None

    def has_tag(self, tag: str) -> bool:
        """
        Full tag ("biome:forest") matches exactly; a bare key ("biome")
        matches any tag with that key.
        """
        if ':' in tag:
            return tag in self._tags
        return any(split_tag(existing)[0] == tag for existing in self._tags)

    def has_all_tags(self, tags: Iterable[str]) -> bool:
        """Exact full-string match on every tag."""
        return all(tag in self._tags for tag in tags)

    def has_tag_key(self, key: str) -> bool:
        return any(split_tag(tag)[0] == key for tag in self._tags)

    def tags_with_prefix(self, prefix: str) -> List[str]:
        """Sorted tags of one namespace ("resources" or "resources:")."""
        prefix_with_colon = prefix if prefix.endswith(':') else f"{prefix}:"
        return sorted(tag for tag in self._tags if tag.startswith(prefix_with_colon))

    # ========== Tag Mutations ==========

    def add_tag(self, tag: str, registry: TagRegistry = DEFAULT_REGISTRY) -> None:
        """
        Validate and add a tag.

        For single-valued namespaces any prior tag with the same key is
        removed first, in the same step. Re-adding an existing tag is a
        no-op.

        Raises:
            TagValidationError: If the tag is invalid (region unchanged)
        """
        registry.validate(tag)
        if tag in self._tags:
            return

        key, _ = split_tag(tag)
        if registry.is_single_valued(key):
            self._discard_key(key)

        self._tags[tag] = None
        self.touch()

    def add_tags(self, tags: Iterable[str], registry: TagRegistry = DEFAULT_REGISTRY) -> None:
        """Add several tags in order. Stops at the first invalid tag."""
        for tag in tags:
            self.add_tag(tag, registry)

    def remove_tag(self, tag: str) -> bool:
        """Remove one tag. Missing tags are a no-op (returns False)."""
        if tag not in self._tags:
            return False
        del self._tags[tag]
        self.touch()
        return True

    def remove_tags_by_key(self, key: str) -> int:
        """Remove every tag with this key; returns how many were removed."""
        removed = self._discard_key(key)
        if removed:
            self.touch()
        return removed

    def clear_tags(self) -> None:
        if self._tags:
            self._tags.clear()
            self.touch()

    def _discard_key(self, key: str) -> int:
        doomed = [tag for tag in self._tags if split_tag(tag)[0] == key]
        for tag in doomed:
            del self._tags[tag]
        return len(doomed)

    # ========== Geometry ==========

    def contains_point(self, x: float, y: float) -> bool:
        return self.geometry.contains_point(x, y)

    def bounds(self) -> BBox:
        return self.geometry.bbox

    # ========== Utility ==========

    def touch(self, timestamp: Optional[str] = None) -> None:
        """Refresh metadata.modified."""
        self.metadata.modified = timestamp or utc_now_iso()

    def clone(self) -> 'Region':
        """Independent deep copy (same id)."""
        return copy.deepcopy(self)

    def assign_from(self, other: 'Region') -> None:
        """Copy mutable state from another region with the same id."""
        if other.id != self.id:
            raise ValueError(f"Cannot assign region '{other.id}' onto '{self.id}'")
        self.name = other.name
        self.geometry = other.geometry
        self.metadata = other.metadata
        self._tags = other._tags

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'id': self.id,
            'name': self.name,
            'geometry': self.geometry.to_dict(),
            'tags': self.tags,
            'metadata': self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Region':
        """
        Deserialize from dict, preserving tags verbatim.

        Tags are stored as given; cardinality is not re-applied, so
        conflicting single-valued tags survive for detect_conflicts().

        Raises:
            ValueError: If required fields are missing or invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"Region record must be a mapping, got {type(data).__name__}")

        try:
            region_id = data['id']
        except KeyError as e:
            raise ValueError(f"Missing required Region field: {e}")
        if not isinstance(region_id, str) or not region_id:
            raise ValueError(f"Region id must be a non-empty string, got {region_id!r}")

        tags = data.get('tags') or []
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise ValueError(f"Region tags must be a list of strings, got {tags!r}")

        return cls(
            id=region_id,
            name=str(data.get('name') or ''),
            geometry=geometry_from_dict(data.get('geometry') or {}),
            metadata=RegionMetadata.from_dict(data.get('metadata') or {}),
            _tags=dict.fromkeys(tags),
        )
