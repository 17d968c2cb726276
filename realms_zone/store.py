"""
Region Store - In-memory spatial index for realm regions.

This module provides the RegionStore class, which owns a collection of
regions for one scope (scene, document, ...) and answers point, bounding-box
and tag queries over it.

Design:
- Explicit ownership: the host constructs one store per scope (no singletons)
- Two-phase point query: O(1) bbox rejection before exact containment
- All-or-nothing mutations: changes are staged on a clone, then committed
- Observers receive a ChangeEvent after every mutation

Thread Safety:
- None internally. Callers sharing a store across threads must wrap every
  call in their own lock. Concurrent queries are safe only while no
  mutation is running.
"""

import dataclasses
import secrets
import string
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Set, Union

from realms_tags import TagRegistry, TagValidationError, TagSuggestion, split_tag
from realms_zone.changes import ChangeEvent, ChangeKind, ChangeListener
from realms_zone.config import StoreConfig
from realms_zone.geometry import BBox, Geometry, PolygonShape, contains
from realms_zone.logging import LogEvent, StructuredLogger, create_logger
from realms_zone.region import Region, RegionMetadata, placeholder_name, utc_now_iso

_ID_ALPHABET = string.ascii_letters + string.digits


class RegionNotFoundError(KeyError):
    """Raised when an operation references a region id that does not exist."""

    def __init__(self, region_id: str):
        self.region_id = region_id
        super().__init__(region_id)

    def __str__(self) -> str:
        return f"Region '{self.region_id}' not found"


@dataclass
class RegionPatch:
    """
    Declarative set of changes for RegionStore.update().

    Applied in field order: name, geometry, tags (replaces the whole set),
    remove_tags, add_tags. Fields left as None/empty are untouched.

    Example:
        >>> store.update(region.id, RegionPatch(add_tags=["climate:arid"]))
    """

    name: Optional[str] = None
    geometry: Optional[Geometry] = None
    tags: Optional[Sequence[str]] = None
    remove_tags: Sequence[str] = ()
    add_tags: Sequence[str] = ()

    def apply(
        self,
        region: Region,
        registry: TagRegistry,
        placeholder_prefix: str = "Realm"
    ) -> None:
        """
        Apply to a region in place.

        Raises:
            TagValidationError: On the first invalid tag (region may be
                partially modified; callers apply to a draft)
        """
        if self.name is not None:
            region.name = self.name or placeholder_name(region.id, placeholder_prefix)
        if self.geometry is not None:
            region.geometry = self.geometry
        if self.tags is not None:
            region.clear_tags()
            region.add_tags(self.tags, registry)
        for tag in self.remove_tags:
            region.remove_tag(tag)
        region.add_tags(self.add_tags, registry)


RegionChange = Union[RegionPatch, Callable[[Region], None]]


@dataclass(frozen=True)
class StoreStats:
    """
    Immutable statistics snapshot for a store.

    Attributes:
        scope_id: Store scope
        total_regions: Number of regions
        tag_counts: Regions-per-tag-key counts (one count per tag)
    """

    scope_id: str
    total_regions: int = 0
    tag_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            'scope_id': self.scope_id,
            'total_regions': self.total_regions,
            'tag_counts': dict(self.tag_counts),
        }


class RegionStore:
    """
    Mutable collection of regions keyed by id, with spatial and tag queries.

    Mutations:
    - create(), insert(): add regions (ids unique)
    - update(): staged patch/mutator, committed in place
    - delete(), clear(): remove regions (deleted ids are never generated again)

    Removed ids are remembered for the life of the store, so that set grows
    with every delete() and clear().

    Queries (never raise, return [] on no match):
    - query_point(), first_at(): exact containment with bbox pre-filter
    - query_bounds(): AABB overlap
    - query_tags(), find_by_tag_key(): tag predicates
    - find(): tags AND bounds AND limit

    Usage:
        store = RegionStore(scope_id="scene_01")

        forest = store.create(
            "Old Wood",
            polygon([(0, 0), (50, 0), (50, 50), (0, 50)]),
            ["biome:forest"],
        )
        store.query_point(25, 25)          # [forest]
        store.query_tags(["biome:forest"]) # [forest]

        store.update(forest.id, RegionPatch(add_tags=["resources:timber"]))
        store.delete(forest.id)            # True
    """

    def __init__(
        self,
        scope_id: Optional[str] = None,
        config: Optional[StoreConfig] = None,
        registry: Optional[TagRegistry] = None,
        clock: Optional[Callable[[], str]] = None,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize an empty store.

        Args:
            scope_id: Scope identifier (overrides config.scope_id when given)
            config: Store configuration (defaults to StoreConfig())
            registry: Tag registry (defaults to one sized by config)
            clock: Returns ISO timestamps; injectable for tests
            logger: Structured logger (defaults to component "store"); every
                entry is bound to the scope_id
        """
        config = config or StoreConfig()
        if scope_id is not None:
            config = dataclasses.replace(config, scope_id=scope_id)

        self.config = config
        self.registry = registry or TagRegistry(suggestion_limit=config.suggestion_limit)
        self._clock = clock or utc_now_iso
        self._logger = (
            logger or create_logger("store", level=config.logging_level)
        ).bind(scope_id=config.scope_id)

        self._regions: Dict[str, Region] = {}
        self._retired_ids: Set[str] = set()
        self._listeners: List[ChangeListener] = []

    @classmethod
    def from_config(cls, config: StoreConfig, **kwargs) -> "RegionStore":
        return cls(config=config, **kwargs)

    @property
    def scope_id(self) -> str:
        return self.config.scope_id

    @property
    def plane(self) -> Optional[BBox]:
        """Configured plane extent, if any."""
        if self.config.plane_width is None:
            return None
        return BBox(x=0.0, y=0.0, width=self.config.plane_width, height=self.config.plane_height)

    # ========== Observers ==========

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback invoked synchronously after each mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> bool:
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    def _notify(self, kind: ChangeKind, region_id: Optional[str] = None, count: int = 1) -> None:
        event = ChangeEvent(kind=kind, scope_id=self.scope_id, region_id=region_id, count=count)
        for listener in list(self._listeners):
            listener(event)

    # ========== Mutations ==========

    def _generate_id(self) -> str:
        while True:
            candidate = ''.join(
                secrets.choice(_ID_ALPHABET) for _ in range(self.config.id_length)
            )
            if candidate not in self._regions and candidate not in self._retired_ids:
                return candidate

    def new_id(self) -> str:
        """Fresh id unused by this store (live or deleted)."""
        return self._generate_id()

    def create(
        self,
        name: str = "",
        geometry: Optional[Geometry] = None,
        tags: Sequence[str] = (),
        author: Optional[str] = None,
        region_id: Optional[str] = None
    ) -> Region:
        """
        Create and insert a region.

        Configured default tags are applied first, then the supplied tags.
        Every tag is validated before anything is inserted.

        Args:
            name: Display name (placeholder derived from the id if empty)
            geometry: Region shape (empty polygon if None)
            tags: Initial tags
            author: Author (defaults to config.author)
            region_id: Explicit id (generated if None)

        Returns:
            The stored Region

        Raises:
            TagValidationError: If any tag is invalid (store unchanged)
            ValueError: If region_id already exists
        """
        if isinstance(tags, str):
            tags = [tags]

        if region_id is None:
            region_id = self._generate_id()
        elif region_id in self._regions:
            raise ValueError(f"Region '{region_id}' already exists")

        now = self._clock()
        region = Region(
            id=region_id,
            name=name or placeholder_name(region_id, self.config.placeholder_prefix),
            geometry=geometry if geometry is not None else PolygonShape(),
            metadata=RegionMetadata.new(author or self.config.author, timestamp=now),
        )

        try:
            region.add_tags([*self.config.default_tags, *tags], self.registry)
        except TagValidationError as e:
            self._logger.warning(
                event=LogEvent.TAG_REJECTED,
                message="Rejected region create",
                metadata={'tag': e.tag, 'reason': e.reason}
            )
            raise

        # add_tag() touched with wall-clock time; creation stamps must match
        region.touch(now)

        self._regions[region_id] = region
        self._logger.info(
            event=LogEvent.REGION_CREATED,
            message=f"Created region '{region.name}'",
            metadata={'region_id': region_id, 'tags': region.tags}
        )
        self._notify(ChangeKind.CREATED, region_id)
        return region

    def insert(self, region: Region) -> Region:
        """
        Insert a fully built region verbatim (ids, tags and metadata kept).

        Raises:
            ValueError: If the id already exists
        """
        if region.id in self._regions:
            raise ValueError(f"Region '{region.id}' already exists")

        self._regions[region.id] = region
        self._logger.info(
            event=LogEvent.REGION_INSERTED,
            message=f"Inserted region '{region.name}'",
            metadata={'region_id': region.id}
        )
        self._notify(ChangeKind.INSERTED, region.id)
        return region

    def update(self, region_id: str, change: RegionChange) -> Region:
        """
        Apply a patch or mutator to an existing region.

        The change runs against a clone; only if it succeeds is the result
        committed onto the stored Region (same object, so references held by
        callers observe it). metadata.modified is always refreshed, even
        for a no-op change.

        Args:
            region_id: Region to change
            change: RegionPatch, or a callable receiving the draft Region

        Returns:
            The updated Region

        Raises:
            RegionNotFoundError: If region_id does not exist
            TagValidationError: If a tag is invalid (store unchanged)
        """
        region = self._regions.get(region_id)
        if region is None:
            self._logger.warning(
                event=LogEvent.NOT_FOUND_ERROR,
                message="Update of unknown region",
                metadata={'region_id': region_id}
            )
            raise RegionNotFoundError(region_id)

        draft = region.clone()
        try:
            if isinstance(change, RegionPatch):
                change.apply(draft, self.registry, self.config.placeholder_prefix)
            elif callable(change):
                change(draft)
            else:
                raise TypeError(
                    f"change must be a RegionPatch or callable, got {type(change).__name__}"
                )
        except TagValidationError as e:
            self._logger.warning(
                event=LogEvent.TAG_REJECTED,
                message="Rejected region update",
                metadata={'region_id': region_id, 'tag': e.tag, 'reason': e.reason}
            )
            raise

        if draft.id != region_id:
            raise ValueError(f"Region id is immutable ('{region_id}' -> '{draft.id}')")

        draft.touch(self._clock())
        region.assign_from(draft)

        self._logger.info(
            event=LogEvent.REGION_UPDATED,
            message=f"Updated region '{region.name}'",
            metadata={'region_id': region_id}
        )
        self._notify(ChangeKind.UPDATED, region_id)
        return region

    def delete(self, region_id: str) -> bool:
        """
        Remove a region.

        Returns:
            True if it existed and was removed, False otherwise
        """
        region = self._regions.pop(region_id, None)
        if region is None:
            return False

        self._retired_ids.add(region_id)
        self._logger.info(
            event=LogEvent.REGION_DELETED,
            message=f"Deleted region '{region.name}'",
            metadata={'region_id': region_id}
        )
        self._notify(ChangeKind.DELETED, region_id)
        return True

    def clear(self) -> int:
        """Remove every region; returns how many were removed."""
        count = len(self._regions)
        self._retired_ids.update(self._regions)
        self._regions.clear()

        self._logger.info(
            event=LogEvent.STORE_CLEARED,
            message=f"Cleared {count} regions",
            metadata={'count': count}
        )
        self._notify(ChangeKind.CLEARED, count=count)
        return count

    # ========== Lookups ==========

    def get(self, region_id: str) -> Optional[Region]:
        return self._regions.get(region_id)

    def all(self) -> List[Region]:
        """Every region, in insertion order."""
        return list(self._regions.values())

    def __len__(self) -> int:
        return len(self._regions)

    def __contains__(self, region_id: object) -> bool:
        return region_id in self._regions

    def __iter__(self) -> Iterator[Region]:
        return iter(list(self._regions.values()))

    # ========== Queries ==========

    def query_point(self, x: float, y: float) -> List[Region]:
        """
        Regions containing (x, y), in insertion order.

        Each candidate is rejected by its bounding box before the exact
        containment test runs.
        """
        results = [
            region
            for region in self._regions.values()
            if region.bounds().contains_point(x, y) and contains(region.geometry, x, y)
        ]
        self._logger.debug(
            event=LogEvent.STORE_QUERIED,
            message="Point query",
            metadata={'x': x, 'y': y, 'matches': len(results)}
        )
        return results

    def first_at(self, x: float, y: float) -> Optional[Region]:
        """First region containing (x, y), or None."""
        matches = self.query_point(x, y)
        return matches[0] if matches else None

    def query_bounds(self, box: BBox) -> List[Region]:
        """Regions whose bounding box intersects box."""
        return [region for region in self._regions.values() if region.bounds().intersects(box)]

    def query_tags(self, required_tags: Sequence[str]) -> List[Region]:
        """
        Regions carrying every required tag (exact full-string match).

        An empty list matches every region.
        """
        if isinstance(required_tags, str):
            required_tags = [required_tags]
        return [region for region in self._regions.values() if region.has_all_tags(required_tags)]

    def find_by_tag_key(self, key: str) -> List[Region]:
        """Regions with at least one tag under this key, any value."""
        return [region for region in self._regions.values() if region.has_tag_key(key)]

    def find(
        self,
        tags: Optional[Sequence[str]] = None,
        bounds: Optional[BBox] = None,
        limit: Optional[int] = None
    ) -> List[Region]:
        """
        Compound query: every filter given must pass (logical AND).

        Args:
            tags: Required tags (exact match)
            bounds: Box the region's bbox must intersect
            limit: Positive limit truncates after filtering; None/0 = no limit

        Returns:
            Matching regions in insertion order
        """
        results = self.all()

        if tags:
            results = [region for region in results if region.has_all_tags(tags)]

        if bounds is not None:
            results = [region for region in results if region.bounds().intersects(bounds)]

        if limit and limit > 0:
            results = results[:limit]

        return results

    # ========== Tag helpers ==========

    def suggest_tags(self, partial: str, region_id: Optional[str] = None) -> List[TagSuggestion]:
        """Autocomplete against the given region's current tags (if any)."""
        region = self._regions.get(region_id) if region_id else None
        return self.registry.suggest(partial, region.tags if region else ())

    def conflicts(self, region_id: str) -> List[str]:
        """
        Soft tag conflicts for one region.

        Raises:
            RegionNotFoundError: If region_id does not exist
        """
        region = self._regions.get(region_id)
        if region is None:
            raise RegionNotFoundError(region_id)
        return self.registry.detect_conflicts(region.tags)

    def statistics(self) -> StoreStats:
        """Snapshot of region and tag-key counts."""
        tag_counts: Counter = Counter()
        for region in self._regions.values():
            for tag in region.tags:
                tag_counts[split_tag(tag)[0]] += 1

        return StoreStats(
            scope_id=self.scope_id,
            total_regions=len(self._regions),
            tag_counts=dict(tag_counts)
        )
