"""
Realms Zone
===========

Bounded Context: Regions and the spatial/tag store that owns them.

Design Philosophy:
- Separation of Concerns: Geometry, Region values, Store queries separated
- Explicit ownership: one RegionStore per scope, built by the host
- Degrade on bad geometry, raise on bad tags

Architecture:

    realms_zone/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── common.py      # BBox
    │   ├── shapes.py      # PolygonShape, RectangleShape, CircleShape
    │   └── spatial.py     # contains, bounds, (de)serialization
    │
    ├── logging/           # Structured JSON logging
    ├── region.py          # Region, RegionMetadata
    ├── changes.py         # ChangeEvent (observer payload)
    ├── config.py          # StoreConfig (YAML)
    └── store.py           # RegionStore, RegionPatch

Usage:

    from realms_zone import RegionStore, RegionPatch, polygon

    store = RegionStore(scope_id="scene_01")
    forest = store.create(
        "Old Wood",
        polygon([(0, 0), (50, 0), (50, 50), (0, 50)]),
        ["biome:forest", "resources:timber"],
    )

    store.query_point(10, 10)                  # [forest]
    store.query_tags(["biome:forest"])         # [forest]
    store.update(forest.id, RegionPatch(add_tags=["biome:swamp"]))
    forest.get_tag("biome")                    # "swamp"
"""

# Geometry Layer (immutable, stateless)
from realms_zone.geometry import (
    BBox,
    ShapeType,
    PolygonShape,
    RectangleShape,
    CircleShape,
    Geometry,
    polygon,
    contains,
    bounds,
)

# Region Layer
from realms_zone.region import Region, RegionMetadata, DATA_VERSION

# Store Layer (stateful)
from realms_zone.changes import ChangeEvent, ChangeKind
from realms_zone.config import StoreConfig
from realms_zone.store import (
    RegionStore,
    RegionPatch,
    RegionNotFoundError,
    StoreStats,
)

__all__ = [
    # Geometry
    "BBox",
    "ShapeType",
    "PolygonShape",
    "RectangleShape",
    "CircleShape",
    "Geometry",
    "polygon",
    "contains",
    "bounds",
    # Region
    "Region",
    "RegionMetadata",
    "DATA_VERSION",
    # Store
    "ChangeEvent",
    "ChangeKind",
    "StoreConfig",
    "RegionStore",
    "RegionPatch",
    "RegionNotFoundError",
    "StoreStats",
]

__version__ = "1.0.0"
