"""
Spatial Operations Module
=========================

Stateless geometry operations over the Geometry union.

Design:
- Pure functions (no state)
- Dispatch on the shape's own methods (closed tagged union)
- Never raise for empty or malformed shapes
- Wire-form parsing is the only fallible entry point
"""

from typing import Any, Dict, Type

from realms_zone.geometry.common import BBox
from realms_zone.geometry.shapes import (
    CircleShape,
    Geometry,
    PolygonShape,
    RectangleShape,
    ShapeType,
)


_SHAPES_BY_TYPE: Dict[ShapeType, Type] = {
    ShapeType.POLYGON: PolygonShape,
    ShapeType.RECTANGLE: RectangleShape,
    ShapeType.CIRCLE: CircleShape,
}


def contains(geometry: Geometry, x: float, y: float) -> bool:
    """
    Exact point containment test.

    Args:
        geometry: Polygon, rectangle or circle
        x: Test point x-coordinate
        y: Test point y-coordinate

    Returns:
        True if the point lies inside the geometry. Empty shapes contain
        nothing.
    """
    return geometry.contains_point(x, y)


def bounds(geometry: Geometry) -> BBox:
    """
    Axis-aligned bounding box of a geometry.

    O(1): boxes are computed once when the shape is built. Empty shapes
    return a zero-area box at the origin.
    """
    return geometry.bbox


def boxes_intersect(a: BBox, b: BBox) -> bool:
    """AABB overlap: no overlap only if one box is entirely beside the other."""
    return a.intersects(b)


def geometry_to_dict(geometry: Geometry) -> Dict[str, Any]:
    """Serialize a geometry to its wire form ({"type": ..., ...})."""
    return geometry.to_dict()


def geometry_from_dict(data: Dict[str, Any]) -> Geometry:
    """
    Deserialize a geometry from its wire form.

    Args:
        data: Dictionary with a "type" discriminant and shape fields.
              Missing numeric fields default to 0.

    Returns:
        PolygonShape, RectangleShape or CircleShape

    Raises:
        ValueError: If the type is unknown or the fields are not numeric
            (or too large for a float)
    """
    if not isinstance(data, dict):
        raise ValueError(f"Geometry must be a mapping, got {type(data).__name__}")

    try:
        shape_type = ShapeType(data.get('type', ShapeType.POLYGON.value))
    except ValueError:
        raise ValueError(f"Unknown geometry type: {data.get('type')!r}")

    try:
        return _SHAPES_BY_TYPE[shape_type].from_dict(data)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Invalid {shape_type.value} geometry: {e}") from e
