"""
Common Geometry Types
=====================

Bounded Context: Shared Spatial Value Objects

Types:
- BBox: Axis-aligned bounding box used as the cheap pre-filter for queries
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass(frozen=True)
class BBox:
    """
    Immutable axis-aligned bounding box.

    Origin is the top-left corner of the plane; (x, y) is the box's minimum
    corner.

    Attributes:
        x: Left edge x-coordinate
        y: Top edge y-coordinate
        width: Box width
        height: Box height

    Invariants:
        - width >= 0
        - height >= 0

    Example:
        >>> box = BBox(x=0, y=0, width=50, height=50)
        >>> box.contains_point(25, 25)
        True
    """
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        """Validate invariants."""
        if self.width < 0:
            raise ValueError(f"BBox width must be >= 0, got {self.width}")
        if self.height < 0:
            raise ValueError(f"BBox height must be >= 0, got {self.height}")

    @classmethod
    def empty(cls) -> 'BBox':
        """Zero-area box at the origin (bounds of an empty shape)."""
        return cls(x=0.0, y=0.0, width=0.0, height=0.0)

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BBox':
        """Deserialize from dict.

        Args:
            data: Dictionary with keys: x, y, width, height

        Returns:
            BBox instance

        Raises:
            ValueError: If required keys missing or invalid values
        """
        try:
            return cls(
                x=float(data['x']),
                y=float(data['y']),
                width=float(data['width']),
                height=float(data['height'])
            )
        except KeyError as e:
            raise ValueError(f"Missing required BBox field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid BBox data: {e}")

    @property
    def max_x(self) -> float:
        """Right edge x-coordinate."""
        return self.x + self.width

    @property
    def max_y(self) -> float:
        """Bottom edge y-coordinate."""
        return self.y + self.height

    def contains_point(self, x: float, y: float) -> bool:
        """Closed-interval point test (edges count as inside)."""
        return self.x <= x <= self.max_x and self.y <= y <= self.max_y

    def intersects(self, other: 'BBox') -> bool:
        """
        Standard AABB overlap test.

        Boxes that merely touch along an edge intersect.
        """
        return not (
            self.max_x < other.x
            or other.max_x < self.x
            or self.max_y < other.y
            or other.max_y < self.y
        )
