"""Tests for realms_zone.geometry."""

import math

import numpy as np
import pytest

from realms_zone.geometry import (
    BBox,
    CircleShape,
    PolygonShape,
    RectangleShape,
    ShapeType,
    bounds,
    boxes_intersect,
    contains,
    geometry_from_dict,
    geometry_to_dict,
    polygon,
)


class TestBBox:
    """Test the BBox value type."""

    def test_negative_extent_rejected(self):
        with pytest.raises(ValueError, match="width"):
            BBox(x=0, y=0, width=-1, height=1)

    def test_empty_is_zero_box_at_origin(self):
        assert BBox.empty() == BBox(x=0, y=0, width=0, height=0)

    def test_contains_point_is_closed(self):
        box = BBox(x=0, y=0, width=10, height=10)
        assert box.contains_point(0, 0)
        assert box.contains_point(10, 10)
        assert not box.contains_point(10.01, 5)

    def test_intersects_overlapping_and_touching(self):
        a = BBox(x=0, y=0, width=10, height=10)
        assert a.intersects(BBox(x=5, y=5, width=10, height=10))
        assert a.intersects(BBox(x=10, y=0, width=5, height=5))

    def test_intersects_disjoint(self):
        a = BBox(x=0, y=0, width=10, height=10)
        assert not a.intersects(BBox(x=20, y=0, width=5, height=5))
        assert not a.intersects(BBox(x=0, y=-20, width=5, height=5))

    def test_from_dict_missing_field(self):
        with pytest.raises(ValueError, match="Missing required BBox field"):
            BBox.from_dict({'x': 0, 'y': 0, 'width': 1})


class TestPolygonShape:
    """Test polygon containment and degenerate input."""

    def test_square_contains_interior_point(self):
        square = polygon([(0, 0), (50, 0), (50, 50), (0, 50)])
        assert square.contains_point(25, 25)
        assert not square.contains_point(75, 25)
        assert not square.contains_point(-1, 25)

    def test_concave_polygon(self):
        # U shape: notch between x=10 and x=20 above y=10
        u_shape = polygon([(0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30)])
        assert u_shape.contains_point(5, 20)
        assert u_shape.contains_point(25, 20)
        assert not u_shape.contains_point(15, 20)
        assert u_shape.contains_point(15, 5)

    @pytest.mark.parametrize("vertices", [
        [(0, 0), (10, 0), (5, 8)],
        [(0, 0), (40, 0), (40, 10), (0, 10)],
        [(-5, -5), (5, -5), (8, 3), (0, 9), (-8, 3)],
        [(100, 100), (130, 110), (120, 140)],
    ])
    def test_contains_centroid(self, vertices):
        shape = polygon(vertices)
        centroid = np.asarray(vertices, dtype=float).mean(axis=0)
        assert shape.contains_point(*centroid)

    def test_fewer_than_three_vertices_is_empty(self):
        line = polygon([(0, 0), (10, 10)])
        assert line.is_empty
        assert not line.contains_point(5, 5)
        assert line.bbox == BBox.empty()

    def test_odd_coordinate_count_is_empty(self):
        shape = PolygonShape(points=(0, 0, 10, 0, 10))
        assert shape.is_empty
        assert not shape.contains_point(1, 1)

    def test_non_finite_coordinates_are_empty(self):
        shape = PolygonShape(points=(0, 0, 10, 0, float('nan'), 10))
        assert shape.is_empty

    def test_non_numeric_points_raise(self):
        with pytest.raises(TypeError):
            PolygonShape(points=("a", "b", "c", "d", "e", "f"))

    def test_oversized_points_raise_type_error(self):
        with pytest.raises(TypeError):
            PolygonShape(points=(0, 0, 10 ** 400, 0, 5, 5))

    def test_accepts_nx2_array(self):
        shape = PolygonShape(points=np.array([[0, 0], [4, 0], [4, 4]]))
        assert shape.points == (0.0, 0.0, 4.0, 0.0, 4.0, 4.0)
        assert shape.vertices.shape == (3, 2)

    def test_bbox_spans_vertices(self):
        shape = polygon([(10, 20), (40, 25), (30, 60)])
        assert shape.bbox == BBox(x=10, y=20, width=30, height=40)


class TestRectangleShape:
    """Test centered, optionally rotated rectangles."""

    def test_axis_aligned_contains(self):
        rect = RectangleShape(x=10, y=10, width=20, height=10)
        assert rect.contains_point(0, 5)
        assert rect.contains_point(20, 15)
        assert not rect.contains_point(10, 16)

    def test_rotated_contains(self):
        # 10x2 bar rotated 90 degrees becomes a 2x10 bar
        rect = RectangleShape(x=0, y=0, width=10, height=2, rotation=math.pi / 2)
        assert rect.contains_point(0, 4.5)
        assert not rect.contains_point(4.5, 0)

    def test_rotated_bbox_covers_corners(self):
        rect = RectangleShape(x=0, y=0, width=10, height=10, rotation=math.pi / 4)
        half_diagonal = math.sqrt(50)
        assert rect.bbox.width == pytest.approx(2 * half_diagonal)
        assert rect.bbox.x == pytest.approx(-half_diagonal)
        assert rect.contains_point(0, half_diagonal - 0.01)

    def test_unrotated_bbox(self):
        rect = RectangleShape(x=10, y=20, width=4, height=6)
        assert rect.bbox == BBox(x=8, y=17, width=4, height=6)

    def test_negative_size_is_empty(self):
        rect = RectangleShape(x=0, y=0, width=-5, height=5)
        assert rect.is_empty
        assert not rect.contains_point(0, 0)
        assert rect.bbox == BBox.empty()


class TestCircleShape:
    """Test circle containment."""

    def test_contains_boundary_and_interior(self):
        circle = CircleShape(x=75, y=75, radius=25)
        assert circle.contains_point(75, 75)
        assert circle.contains_point(100, 75)
        assert not circle.contains_point(100, 100)

    def test_bbox(self):
        assert CircleShape(x=75, y=75, radius=25).bbox == BBox(x=50, y=50, width=50, height=50)

    def test_negative_radius_is_empty(self):
        circle = CircleShape(x=0, y=0, radius=-1)
        assert circle.is_empty
        assert circle.bbox == BBox.empty()


class TestSpatialFunctions:
    """Test the dispatching helpers and the wire form."""

    @pytest.mark.parametrize("geometry", [
        polygon([(0, 0), (50, 0), (50, 50), (0, 50)]),
        polygon([(1, 1)]),
        RectangleShape(x=3, y=3, width=2, height=8, rotation=1.2),
        RectangleShape(x=0, y=0, width=-2, height=2),
        CircleShape(x=-10, y=4, radius=3),
        CircleShape(x=0, y=0, radius=float('inf')),
    ])
    def test_bounds_never_negative(self, geometry):
        box = bounds(geometry)
        assert box.width >= 0
        assert box.height >= 0

    def test_contains_dispatches(self):
        assert contains(CircleShape(x=0, y=0, radius=1), 0.5, 0.5)
        assert not contains(RectangleShape(x=0, y=0, width=1, height=1), 2, 2)

    def test_boxes_intersect(self):
        assert boxes_intersect(BBox(0, 0, 5, 5), BBox(4, 4, 5, 5))
        assert not boxes_intersect(BBox(0, 0, 5, 5), BBox(6, 0, 5, 5))

    def test_wire_form_round_trip(self):
        for geometry in (
            polygon([(0, 0), (5, 0), (5, 5)]),
            RectangleShape(x=1, y=2, width=3, height=4, rotation=0.5),
            CircleShape(x=1, y=2, radius=3),
        ):
            assert geometry_from_dict(geometry_to_dict(geometry)) == geometry

    def test_missing_type_defaults_to_polygon(self):
        geometry = geometry_from_dict({'points': [0, 0, 1, 0, 1, 1]})
        assert isinstance(geometry, PolygonShape)
        assert geometry.shape_type == ShapeType.POLYGON

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown geometry type"):
            geometry_from_dict({'type': 'hexagon'})

    def test_non_numeric_fields_raise(self):
        with pytest.raises(ValueError):
            geometry_from_dict({'type': 'circle', 'x': 'left', 'radius': 2})

    def test_non_mapping_raises(self):
        with pytest.raises(ValueError):
            geometry_from_dict(["polygon"])

    @pytest.mark.parametrize("data", [
        {'type': 'circle', 'x': 10 ** 400, 'radius': 2},
        {'type': 'rectangle', 'width': 10 ** 400, 'height': 1},
        {'type': 'polygon', 'points': [0, 0, 10 ** 400, 0, 5, 5]},
    ])
    def test_coordinates_beyond_float_range_raise(self, data):
        with pytest.raises(ValueError, match="Invalid"):
            geometry_from_dict(data)
