"""Tests for contour reconstruction from segments."""

import math

import pytest

from platenest.geometry.contour_builder import (
    ContourBuilder,
    NoClosedRegionError,
    build_contours,
    trace_line_loop,
)
from platenest.geometry.primitives import GeometryError, Rect2D, Vec2
from platenest.geometry.segments import ArcSegment, LineSegment, SegmentKind, arc, line


def square_lines(x0=0.0, y0=0.0, size=1.0):
    """Four CCW lines of an axis-aligned square."""
    x1 = x0 + size
    y1 = y0 + size
    return [
        line(x0, y0, x1, y0),
        line(x1, y0, x1, y1),
        line(x1, y1, x0, y1),
        line(x0, y1, x0, y0),
    ]


def flipped(segment):
    return LineSegment(segment.end, segment.start)


@pytest.fixture
def builder():
    """Create a contour builder."""
    return ContourBuilder()


class TestSegments:
    """Tests for segment variants."""

    def test_kinds(self):
        """Test segment kind tags."""
        assert line(0, 0, 1, 0).kind == SegmentKind.LINE
        assert arc(0, 0, 1, 0, math.pi).kind == SegmentKind.ARC
        assert SegmentKind.LINE.value == "line"
        assert SegmentKind.ARC.value == "arc"

    def test_arc_endpoints(self):
        """Test arc endpoints from angles."""
        a = arc(0, 0, 2, 0, math.pi / 2)
        assert a.start.almost_equals(Vec2(2, 0), 1e-12)
        assert a.end.almost_equals(Vec2(0, 2), 1e-12)

    def test_arc_sweep(self):
        """Test sweep in both directions."""
        assert abs(arc(0, 0, 1, 0, math.pi / 2).sweep - math.pi / 2) < 1e-12
        assert abs(arc(0, 0, 1, 0, math.pi / 2, ccw=False).sweep - 1.5 * math.pi) < 1e-12
        assert abs(arc(0, 0, 1, 1.0, 1.0).sweep - 2 * math.pi) < 1e-12

    def test_arc_steps_minimum(self):
        """Test short arcs use the minimum resolution."""
        small = arc(0, 0, 0.01, 0, math.pi / 2)
        assert small.steps(resolution=24) == 24
        assert small.steps(resolution=2) == 6

    def test_arc_steps_adaptive_and_capped(self):
        """Test step count follows arc length and is capped."""
        medium = arc(0, 0, 1, 0, math.pi)
        assert medium.steps(resolution=24, tolerance=0.05) == int(math.pi / 0.05)

        huge = arc(0, 0, 1000, 0, 0)
        assert huge.steps(max_segments=256) == 256

    def test_arc_sample_endpoints(self):
        """Test sampled polyline runs from start to end."""
        a = arc(1, 1, 1, 0, math.pi, ccw=False)
        pts = a.sample(resolution=8)
        assert pts[0].almost_equals(a.start, 1e-12)
        assert pts[-1] == a.end
        # Clockwise from angle 0 to pi passes below the center
        assert min(p.y for p in pts) < 0.01

    def test_arc_bad_radius(self):
        """Test non-positive radius fails."""
        with pytest.raises(GeometryError):
            ArcSegment(Vec2(0, 0), -1.0, 0.0, 1.0)


class TestBuild:
    """Tests for ContourBuilder.build."""

    def test_square_in_order(self, builder):
        """Test four ordered lines make one loop."""
        contours = builder.build(square_lines())

        assert len(contours) == 1
        assert len(contours[0]) == 4
        assert contours[0].is_outer
        assert abs(contours[0].signed_area() - 1.0) < 1e-12

    def test_square_shuffled_and_flipped(self, builder):
        """Test shuffled segments with mixed directions."""
        s = square_lines()
        segments = [s[2], flipped(s[0]), s[3], flipped(s[1])]

        contours = builder.build(segments)

        assert len(contours) == 1
        assert len(contours[0]) == 4
        assert contours[0].signed_area() > 0
        assert contours[0].bounds() == Rect2D(0, 0, 1, 1)

    def test_clockwise_input(self, builder):
        """Test a CW square still yields a CCW outer contour."""
        segments = [flipped(s) for s in reversed(square_lines())]
        contours = builder.build(segments)

        assert contours[0].signed_area() > 0

    def test_collinear_points_removed(self, builder):
        """Test a split edge collapses back to four vertices."""
        segments = [
            line(0, 0, 0.5, 0),
            line(0.5, 0, 1, 0),
            line(1, 0, 1, 1),
            line(1, 1, 0, 1),
            line(0, 1, 0, 0),
        ]
        contours = builder.build(segments)

        assert len(contours[0]) == 4

    def test_near_duplicate_endpoints_join(self, builder):
        """Test endpoints within tolerance are joined."""
        segments = [
            line(0, 0, 1, 0),
            line(1 + 1e-7, 0, 1, 1),
            line(1, 1, 0, 1 - 1e-7),
            line(0, 1, 0, 0),
        ]
        contours = builder.build(segments)

        assert len(contours) == 1
        assert len(contours[0]) == 4

    def test_outer_and_hole(self, builder):
        """Test the largest loop is outer and the rest are holes."""
        segments = square_lines(2, 2, 2) + square_lines(0, 0, 10)
        contours = builder.build(segments)

        assert len(contours) == 2
        outer, hole = contours
        assert outer.is_outer
        assert abs(outer.area - 100.0) < 1e-9
        assert outer.signed_area() > 0
        assert not hole.is_outer
        assert abs(hole.area - 4.0) < 1e-9
        assert hole.signed_area() < 0

    def test_half_disk_with_arc(self, builder):
        """Test a line closed by a CCW arc."""
        segments = [
            line(-1, 0, 1, 0),
            arc(0, 0, 1, 0, math.pi),
        ]
        contours = builder.build(segments)

        assert len(contours) == 1
        assert abs(contours[0].area - math.pi / 2) < 0.01

    def test_half_disk_with_clockwise_arc(self, builder):
        """Test a CW arc is sampled in its own direction."""
        segments = [
            arc(0, 0, 1, math.pi, 0, ccw=False),
            line(1, 0, -1, 0),
        ]
        contours = builder.build(segments)

        assert abs(contours[0].area - math.pi / 2) < 0.01
        assert contours[0].bounds().max_y > 0.99

    def test_full_circle_arc(self, builder):
        """Test a full-circle arc closes on its own."""
        contours = builder.build([arc(5, 5, 2, 0, 0)])

        assert len(contours) == 1
        assert abs(contours[0].area - math.pi * 4) < 0.05

    def test_small_circle_keeps_vertices(self, builder):
        """Test corners of a tiny sampled circle are not taken as collinear."""
        contours = builder.build([arc(0, 0, 2e-4, 0, 0)])

        assert len(contours[0]) == 24
        expected = 0.5 * 24 * (2e-4) ** 2 * math.sin(2 * math.pi / 24)
        assert abs(contours[0].area - expected) < 1e-12

    def test_collinear_removal_scale_independent(self, builder):
        """Test a split edge collapses on a tiny square too."""
        s = 1e-3
        segments = [
            line(0, 0, s / 2, 0),
            line(s / 2, 0, s, 0),
            line(s, 0, s, s),
            line(s, s, 0, s),
            line(0, s, 0, 0),
        ]
        assert len(builder.build(segments)[0]) == 4

    def test_plate_with_round_hole(self, builder):
        """Test a square with a circular hole."""
        segments = square_lines(0, 0, 10) + [arc(5, 5, 1, 0, 0)]
        contours = builder.build(segments)

        assert len(contours) == 2
        assert not contours[1].is_outer
        assert abs(contours[1].area - math.pi) < 0.01

    def test_open_geometry_fails(self, builder):
        """Test segments that never close."""
        with pytest.raises(NoClosedRegionError):
            builder.build(square_lines()[:3])

    def test_empty_fails(self, builder):
        """Test no segments at all."""
        with pytest.raises(NoClosedRegionError):
            builder.build([])

    def test_no_region_is_geometry_error(self, builder):
        """Test error taxonomy."""
        with pytest.raises(GeometryError):
            builder.build([line(0, 0, 1, 1)])

    def test_open_chain_discarded(self, builder):
        """Test a stray open chain does not prevent closed loops."""
        segments = square_lines() + [line(5, 5, 6, 6)]
        contours = builder.build(segments)

        assert len(contours) == 1

    def test_unsupported_segment(self, builder):
        """Test unknown segment objects are rejected."""
        with pytest.raises(GeometryError):
            builder.chain("not a segment")


class TestJoinLoops:
    """Tests for chain joining."""

    def test_loop_cap(self):
        """Test the loop cap bounds the work."""
        builder = ContourBuilder(max_loops=1)
        chains = builder.chains(square_lines() + square_lines(5, 5))
        loops = builder.join_loops(chains)

        assert len(loops) == 1

    def test_join_cap(self):
        """Test the join cap stops a loop early."""
        builder = ContourBuilder(max_joins=2)
        loops = builder.join_loops(builder.chains(square_lines()))

        assert loops == []

    def test_chains_not_modified(self, builder):
        """Test joining works on copies."""
        chains = builder.chains(square_lines())
        before = [list(c) for c in chains]
        builder.join_loops(chains)

        assert chains == before


class TestCleanup:
    """Tests for loop cleanup."""

    def test_drops_closing_duplicate(self, builder):
        """Test the repeated first point is removed."""
        pts = [Vec2(0, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 0)]
        assert builder.cleanup(pts) == pts[:3]

    def test_merges_duplicates(self, builder):
        """Test consecutive near-duplicates merge."""
        pts = [Vec2(0, 0), Vec2(0, 0), Vec2(1, 0), Vec2(1, 1e-7), Vec2(1, 1)]
        assert len(builder.cleanup(pts)) == 3

    def test_empty(self, builder):
        """Test empty input."""
        assert builder.cleanup([]) == []


class TestTraceLines:
    """Tests for the simple line walk."""

    def test_square(self, builder):
        """Test walking a shuffled square."""
        s = square_lines()
        contour = builder.trace_lines([s[0], s[2], flipped(s[1]), s[3]])

        assert len(contour) == 4
        assert abs(contour.area - 1.0) < 1e-12

    def test_triangle(self, builder):
        """Test the smallest closed walk."""
        contour = builder.trace_lines([
            line(0, 0, 1, 0),
            line(0, 1, 0, 0),
            line(1, 0, 0, 1),
        ])
        assert len(contour) == 3

    def test_clockwise_walk_is_ccw(self, builder):
        """Test a clockwise walk comes back as a CCW outer loop."""
        contour = builder.trace_lines([
            line(0, 0, 0, 1),
            line(0, 1, 1, 1),
            line(1, 1, 1, 0),
            line(1, 0, 0, 0),
        ])

        assert contour.is_outer
        assert contour.signed_area() > 0

    def test_dead_end(self, builder):
        """Test a walk that never returns fails."""
        with pytest.raises(NoClosedRegionError):
            builder.trace_lines(square_lines()[:3])

    def test_empty(self, builder):
        """Test no lines."""
        with pytest.raises(NoClosedRegionError):
            builder.trace_lines([])


class TestFallbackAndHelpers:
    """Tests for the bounding fallback and module helpers."""

    def test_bounding_rectangle(self, builder):
        """Test explicit fallback rectangle around open geometry."""
        segments = square_lines(0, 0, 4)[:3]
        with pytest.raises(NoClosedRegionError):
            builder.build(segments)

        rect = builder.bounding_rectangle(segments)
        assert rect.bounds() == Rect2D(0, 0, 4, 4)
        assert rect.is_outer

    def test_bounding_rectangle_empty(self, builder):
        """Test fallback needs some geometry."""
        with pytest.raises(GeometryError):
            builder.bounding_rectangle([])

    def test_build_contours_helper(self):
        """Test module-level build helper."""
        contours = build_contours(square_lines(0, 0, 3))
        assert abs(contours[0].area - 9.0) < 1e-9

    def test_build_contours_with_options(self):
        """Test helper with explicit builder options."""
        contours = build_contours([arc(0, 0, 1, 0, 0)], arc_resolution=12, max_arc_segments=12)
        assert len(contours[0]) == 12

    def test_trace_line_loop_helper(self):
        """Test module-level walk helper."""
        contour = trace_line_loop(square_lines())
        assert len(contour) == 4
