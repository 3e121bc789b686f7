"""Tests for 2-D vector and bounding box primitives."""

import math

import pytest

from platenest.geometry.primitives import GeometryError, Rect2D, Vec2


class TestVec2:
    """Tests for Vec2."""

    def test_arithmetic(self):
        """Test addition, subtraction and scaling."""
        a = Vec2(1.0, 2.0)
        b = Vec2(3.0, -1.0)

        assert a + b == Vec2(4.0, 1.0)
        assert a - b == Vec2(-2.0, 3.0)
        assert a * 2 == Vec2(2.0, 4.0)
        assert 2 * a == Vec2(2.0, 4.0)
        assert a / 2 == Vec2(0.5, 1.0)
        assert -a == Vec2(-1.0, -2.0)

    def test_dot_and_cross(self):
        """Test dot and cross products."""
        a = Vec2(1.0, 0.0)
        b = Vec2(0.0, 1.0)

        assert a.dot(b) == 0.0
        assert a.cross(b) == 1.0
        assert b.cross(a) == -1.0

    def test_length(self):
        """Test vector length."""
        assert Vec2(3.0, 4.0).length() == 5.0

    def test_normalize(self):
        """Test unit vector."""
        n = Vec2(3.0, 4.0).normalize()
        assert abs(n.length() - 1.0) < 1e-12
        assert abs(n.x - 0.6) < 1e-12

    def test_normalize_zero_vector(self):
        """Test zero vector is returned unchanged."""
        zero = Vec2(0.0, 0.0)
        assert zero.normalize() == zero

    def test_rotate_quarter_turn(self):
        """Test rotation about the origin."""
        r = Vec2(1.0, 0.0).rotate(math.pi / 2)
        assert r.almost_equals(Vec2(0.0, 1.0), 1e-12)

    def test_rotate_round_trip(self):
        """Test rotating by an angle and back."""
        v = Vec2(2.5, -7.25)
        back = v.rotate(1.234).rotate(-1.234)
        assert back.almost_equals(v, 1e-9)

    def test_immutable(self):
        """Test vectors are frozen."""
        v = Vec2(1.0, 1.0)
        with pytest.raises(Exception):
            v.x = 2.0

    def test_tuple_conversion(self):
        """Test conversion to and from tuples."""
        v = Vec2.from_tuple((1, 2))
        assert v == Vec2(1.0, 2.0)
        assert v.to_tuple() == (1.0, 2.0)


class TestRect2D:
    """Tests for Rect2D."""

    def test_from_points_corners_any_order(self):
        """Test box from the four corners in shuffled orders."""
        corners = [Vec2(0, 0), Vec2(3, 0), Vec2(3, 2), Vec2(0, 2)]
        orders = [
            corners,
            list(reversed(corners)),
            [corners[2], corners[0], corners[3], corners[1]],
        ]
        for order in orders:
            box = Rect2D.from_points(order)
            assert box == Rect2D(0, 0, 3, 2)

    def test_from_points_empty(self):
        """Test empty point set fails."""
        with pytest.raises(GeometryError):
            Rect2D.from_points([])

    def test_geometry_error_is_value_error(self):
        """Test error taxonomy."""
        with pytest.raises(ValueError):
            Rect2D.from_points(iter([]))

    def test_size(self):
        """Test derived width, height and area."""
        box = Rect2D(1, 2, 4, 7)
        assert box.width == 3
        assert box.height == 5
        assert box.area == 15
        assert box.center == Vec2(2.5, 4.5)

    def test_intersects_overlap(self):
        """Test overlapping boxes intersect."""
        assert Rect2D(0, 0, 2, 2).intersects(Rect2D(1, 1, 3, 3))

    def test_intersects_touching_edge(self):
        """Test boxes sharing only an edge do not intersect."""
        a = Rect2D(0, 0, 1, 1)
        assert not a.intersects(Rect2D(1, 0, 2, 1))
        assert not a.intersects(Rect2D(0, 1, 1, 2))
        assert not a.intersects(Rect2D(1, 1, 2, 2))

    def test_intersects_disjoint(self):
        """Test separated boxes."""
        assert not Rect2D(0, 0, 1, 1).intersects(Rect2D(5, 5, 6, 6))

    def test_contains_closed_interval(self):
        """Test point containment includes the edges."""
        box = Rect2D(0, 0, 1, 1)
        assert box.contains(Vec2(0, 0))
        assert box.contains(Vec2(1, 0.5))
        assert box.contains(Vec2(0.5, 0.5))
        assert not box.contains(Vec2(1.01, 0.5))

    def test_translate_and_inflate(self):
        """Test box transforms."""
        box = Rect2D(0, 0, 2, 1)
        assert box.translate(Vec2(1, 1)) == Rect2D(1, 1, 3, 2)
        assert box.inflate(0.5) == Rect2D(-0.5, -0.5, 2.5, 1.5)
        assert box.inflate(-0.5) == Rect2D(0.5, 0.5, 1.5, 0.5)

    def test_union(self):
        """Test union of two boxes."""
        assert Rect2D(0, 0, 1, 1).union(Rect2D(2, -1, 3, 0)) == Rect2D(0, -1, 3, 1)

    def test_contains_rect(self):
        """Test box containment."""
        outer = Rect2D(0, 0, 10, 10)
        assert outer.contains_rect(Rect2D(0, 0, 10, 10))
        assert outer.contains_rect(Rect2D(1, 1, 2, 2))
        assert not outer.contains_rect(Rect2D(9, 9, 11, 10))

    def test_to_dict(self):
        """Test box serialization."""
        d = Rect2D(0, 0, 2, 3).to_dict()
        assert d["width"] == 2
        assert d["height"] == 3
