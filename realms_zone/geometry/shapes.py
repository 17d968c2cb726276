"""
Geometric Shapes Module
========================

Pure geometric representations - NO state, NO side effects.

Design:
- Immutable shapes (frozen dataclass pattern)
- Bounding box computed once at init (O(N) construction, O(1) pre-filter)
- Vectorized ray casting for polygon containment
- Malformed input degrades to an empty shape instead of raising
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Sequence, Tuple, Union

import numpy as np

from realms_zone.geometry.common import BBox


class ShapeType(str, Enum):
    """Geometry discriminant used in the wire form."""
    POLYGON = "polygon"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"


def _is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


@dataclass(frozen=True)
class PolygonShape:
    """
    Immutable polygon geometry with ray-casting point-in-polygon.

    Design:
    - Flat coordinate storage [x1, y1, x2, y2, ...] (hashable, exact equality)
    - Nx2 vertex array built once at init for vectorized queries
    - Fewer than 3 vertices, odd coordinate count or non-finite values
      produce an empty shape (contains nothing, zero bounds)

    Attributes:
        points: Flat sequence of vertex coordinates. Accepts any sequence or
            np.ndarray (Nx2 arrays are flattened).
    """

    points: Tuple[float, ...] = ()

    shape_type: ClassVar[ShapeType] = ShapeType.POLYGON

    def __post_init__(self):
        """Normalize coordinates and precompute vertices + bounds."""
        try:
            flat = np.asarray(self.points, dtype=float).ravel()
        except (TypeError, ValueError, OverflowError) as e:
            raise TypeError(f"points must be numeric coordinates, got {self.points!r}") from e

        object.__setattr__(self, 'points', tuple(float(v) for v in flat))

        valid = len(flat) >= 6 and len(flat) % 2 == 0 and bool(np.isfinite(flat).all())
        vertices = flat.reshape(-1, 2) if valid else np.empty((0, 2), dtype=float)
        vertices.flags.writeable = False
        object.__setattr__(self, '_vertices', vertices)
        object.__setattr__(self, '_bbox', self._compute_bbox())

    def _compute_bbox(self) -> BBox:
        if self.is_empty:
            return BBox.empty()
        mins = self._vertices.min(axis=0)
        maxs = self._vertices.max(axis=0)
        return BBox(
            x=float(mins[0]),
            y=float(mins[1]),
            width=float(maxs[0] - mins[0]),
            height=float(maxs[1] - mins[1])
        )

    @property
    def vertices(self) -> np.ndarray:
        """Read-only Nx2 vertex array (empty for degenerate polygons)."""
        return self._vertices

    @property
    def is_empty(self) -> bool:
        return len(self._vertices) < 3

    @property
    def bbox(self) -> BBox:
        return self._bbox

    def contains_point(self, x: float, y: float) -> bool:
        """
        Ray-casting point-in-polygon test.

        For each edge (i, i-1 mod n) the horizontal ray at height y toggles
        the inside flag when it straddles the edge's y-span and the crossing
        lies to the right of x.

        Args:
            x: Test point x-coordinate
            y: Test point y-coordinate

        Returns:
            True if the point is inside the polygon, False otherwise
        """
        if self.is_empty:
            return False

        xi = self._vertices[:, 0]
        yi = self._vertices[:, 1]
        xj = np.roll(xi, 1)
        yj = np.roll(yi, 1)

        straddles = (yi > y) != (yj > y)
        # Horizontal edges never straddle; their nan/inf crossings are masked out.
        with np.errstate(divide='ignore', invalid='ignore'):
            crossing_x = (xj - xi) * (y - yi) / (yj - yi) + xi

        crossings = np.count_nonzero(straddles & (x < crossing_x))
        return bool(crossings % 2)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {'type': self.shape_type.value, 'points': list(self.points)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PolygonShape':
        return cls(points=tuple(data.get('points') or ()))


@dataclass(frozen=True)
class RectangleShape:
    """
    Immutable rectangle centered on (x, y), optionally rotated.

    Attributes:
        x: Center x-coordinate
        y: Center y-coordinate
        width: Full width
        height: Full height
        rotation: Rotation in radians (counter-clockwise in plane coordinates)
    """

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0

    shape_type: ClassVar[ShapeType] = ShapeType.RECTANGLE

    def __post_init__(self):
        for name in ('x', 'y', 'width', 'height', 'rotation'):
            object.__setattr__(self, name, float(getattr(self, name)))
        object.__setattr__(self, '_bbox', self._compute_bbox())

    def _compute_bbox(self) -> BBox:
        if self.is_empty:
            return BBox.empty()

        half_w = self.width / 2
        half_h = self.height / 2
        if self.rotation == 0:
            extent_x, extent_y = half_w, half_h
        else:
            cos = abs(math.cos(self.rotation))
            sin = abs(math.sin(self.rotation))
            extent_x = half_w * cos + half_h * sin
            extent_y = half_w * sin + half_h * cos

        return BBox(
            x=self.x - extent_x,
            y=self.y - extent_y,
            width=extent_x * 2,
            height=extent_y * 2
        )

    @property
    def is_empty(self) -> bool:
        if not _is_finite(self.x, self.y, self.width, self.height, self.rotation):
            return True
        return self.width < 0 or self.height < 0

    @property
    def bbox(self) -> BBox:
        return self._bbox

    def contains_point(self, x: float, y: float) -> bool:
        """
        Closed half-extent check, in the rectangle's local frame when rotated.

        Args:
            x: Test point x-coordinate
            y: Test point y-coordinate

        Returns:
            True if the point is inside (or on the edge of) the rectangle
        """
        if self.is_empty:
            return False

        half_w = self.width / 2
        half_h = self.height / 2

        if self.rotation == 0:
            return (
                self.x - half_w <= x <= self.x + half_w
                and self.y - half_h <= y <= self.y + half_h
            )

        # Inverse rotation brings the point into the axis-aligned local frame
        cos = math.cos(-self.rotation)
        sin = math.sin(-self.rotation)
        dx = x - self.x
        dy = y - self.y
        local_x = dx * cos - dy * sin
        local_y = dx * sin + dy * cos
        return -half_w <= local_x <= half_w and -half_h <= local_y <= half_h

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'type': self.shape_type.value,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'rotation': self.rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RectangleShape':
        return cls(
            x=data.get('x') or 0.0,
            y=data.get('y') or 0.0,
            width=data.get('width') or 0.0,
            height=data.get('height') or 0.0,
            rotation=data.get('rotation') or 0.0,
        )


@dataclass(frozen=True)
class CircleShape:
    """
    Immutable circle.

    Attributes:
        x: Center x-coordinate
        y: Center y-coordinate
        radius: Circle radius
    """

    x: float = 0.0
    y: float = 0.0
    radius: float = 0.0

    shape_type: ClassVar[ShapeType] = ShapeType.CIRCLE

    def __post_init__(self):
        for name in ('x', 'y', 'radius'):
            object.__setattr__(self, name, float(getattr(self, name)))

        if self.is_empty:
            bbox = BBox.empty()
        else:
            bbox = BBox(
                x=self.x - self.radius,
                y=self.y - self.radius,
                width=self.radius * 2,
                height=self.radius * 2
            )
        object.__setattr__(self, '_bbox', bbox)

    @property
    def is_empty(self) -> bool:
        return not _is_finite(self.x, self.y, self.radius) or self.radius < 0

    @property
    def bbox(self) -> BBox:
        return self._bbox

    def contains_point(self, x: float, y: float) -> bool:
        """Squared-distance comparison (no square root)."""
        if self.is_empty:
            return False
        dx = x - self.x
        dy = y - self.y
        return dx * dx + dy * dy <= self.radius * self.radius

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'type': self.shape_type.value,
            'x': self.x,
            'y': self.y,
            'radius': self.radius,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CircleShape':
        return cls(
            x=data.get('x') or 0.0,
            y=data.get('y') or 0.0,
            radius=data.get('radius') or 0.0,
        )


Geometry = Union[PolygonShape, RectangleShape, CircleShape]


def polygon(vertices: Sequence[Sequence[float]]) -> PolygonShape:
    """
    Build a polygon from (x, y) pairs.

    Example:
        >>> square = polygon([(0, 0), (50, 0), (50, 50), (0, 50)])
        >>> square.points
        (0.0, 0.0, 50.0, 0.0, 50.0, 50.0, 0.0, 50.0)
    """
    return PolygonShape(points=tuple(coord for vertex in vertices for coord in vertex))
