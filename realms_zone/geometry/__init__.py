"""
Geometry Layer
==============

Bounded Context: Pure geometric shapes and spatial queries.

Responsibilities:
- Shape representation (immutable)
- Point containment tests (polygon, rectangle, circle)
- Bounding boxes and box overlap
- NO state, NO tags, NO storage

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Degrade, don't raise: partial shapes contain nothing
- Zero side effects
"""

from realms_zone.geometry.common import BBox
from realms_zone.geometry.shapes import (
    ShapeType,
    PolygonShape,
    RectangleShape,
    CircleShape,
    Geometry,
    polygon,
)
from realms_zone.geometry.spatial import (
    contains,
    bounds,
    boxes_intersect,
    geometry_to_dict,
    geometry_from_dict,
)

__all__ = [
    "BBox",
    "ShapeType",
    "PolygonShape",
    "RectangleShape",
    "CircleShape",
    "Geometry",
    "polygon",
    "contains",
    "bounds",
    "boxes_intersect",
    "geometry_to_dict",
    "geometry_from_dict",
]
