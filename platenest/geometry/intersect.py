"""
Polygon overlap predicates.

Polygons are ordered vertex loops with wrap-around edges. Two polygons
overlap when their interiors share area; polygons whose boundaries merely
touch (shared edges, a vertex resting on an edge) do not overlap.

The test short-circuits in three stages:

1. Bounding boxes (open interval) reject most pairs.
2. Any proper crossing of two edges means overlap.
3. Otherwise one polygon may sit inside the other. Without boundary
   contact a single vertex decides; with contact, points just inside each
   polygon's edges are probed against the other polygon.

The nesters use ``polygons_within``, which additionally treats a gap
narrower than the required spacing as a collision.
"""

from enum import Enum
from typing import Iterable, List, Sequence

from .contour import Contour, signed_area
from .primitives import Rect2D, Vec2

EPS = 1e-9
# Inward probe offset, relative to polygon extent
PROBE_RATIO = 1e-6
MIN_PROBE = 1e-7


class SegmentRelation(str, Enum):
    """How two segments meet."""
    DISJOINT = "disjoint"
    TOUCHING = "touching"
    CROSSING = "crossing"


def orientation(a: Vec2, b: Vec2, c: Vec2) -> float:
    """Cross product of (b - a) and (c - a); > 0 when c lies left of a->b."""
    return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)


def on_segment(a: Vec2, p: Vec2, b: Vec2, eps: float = EPS) -> bool:
    """True if p lies within the box spanned by a and b (use with collinear p)."""
    return (min(a.x, b.x) - eps <= p.x <= max(a.x, b.x) + eps and
            min(a.y, b.y) - eps <= p.y <= max(a.y, b.y) + eps)


def segment_relation(p1: Vec2, p2: Vec2, q1: Vec2, q2: Vec2, eps: float = EPS) -> SegmentRelation:
    """Classify two segments as disjoint, touching or properly crossing."""
    o1 = orientation(p1, p2, q1)
    o2 = orientation(p1, p2, q2)
    o3 = orientation(q1, q2, p1)
    o4 = orientation(q1, q2, p2)

    if ((o1 > eps and o2 < -eps) or (o1 < -eps and o2 > eps)) and \
            ((o3 > eps and o4 < -eps) or (o3 < -eps and o4 > eps)):
        return SegmentRelation.CROSSING

    if abs(o1) <= eps and on_segment(p1, q1, p2, eps):
        return SegmentRelation.TOUCHING
    if abs(o2) <= eps and on_segment(p1, q2, p2, eps):
        return SegmentRelation.TOUCHING
    if abs(o3) <= eps and on_segment(q1, p1, q2, eps):
        return SegmentRelation.TOUCHING
    if abs(o4) <= eps and on_segment(q1, p2, q2, eps):
        return SegmentRelation.TOUCHING

    return SegmentRelation.DISJOINT


def segments_intersect(p1: Vec2, p2: Vec2, q1: Vec2, q2: Vec2, eps: float = EPS) -> bool:
    """True when the segments properly cross; touching does not count."""
    return segment_relation(p1, p2, q1, q2, eps) == SegmentRelation.CROSSING


def segments_touch_or_cross(p1: Vec2, p2: Vec2, q1: Vec2, q2: Vec2, eps: float = EPS) -> bool:
    return segment_relation(p1, p2, q1, q2, eps) != SegmentRelation.DISJOINT


def point_in_polygon(point: Vec2, polygon: Sequence[Vec2]) -> bool:
    """Ray-crossing test. Points on the boundary may fall either way."""
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        pi = polygon[i]
        pj = polygon[j]
        if (pi.y > point.y) != (pj.y > point.y):
            dy = pj.y - pi.y
            if abs(dy) < EPS:
                dy = EPS if dy >= 0 else -EPS
            x_cross = (pj.x - pi.x) * (point.y - pi.y) / dy + pi.x
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def _distance_to_segment(p: Vec2, a: Vec2, b: Vec2) -> float:
    ab = b - a
    denom = ab.dot(ab)
    if denom <= 0:
        return p.distance_to(a)
    t = max(0.0, min(1.0, (p - a).dot(ab) / denom))
    return p.distance_to(a + ab * t)


def point_on_boundary(point: Vec2, polygon: Sequence[Vec2], eps: float = EPS) -> bool:
    n = len(polygon)
    return any(
        _distance_to_segment(point, polygon[i], polygon[(i + 1) % n]) <= eps
        for i in range(n)
    )


def point_strictly_inside(point: Vec2, polygon: Sequence[Vec2], eps: float = EPS) -> bool:
    return point_in_polygon(point, polygon) and not point_on_boundary(point, polygon, eps)


def _interior_probes(polygon: Sequence[Vec2]) -> List[Vec2]:
    """Edge midpoints nudged a hair towards the polygon interior."""
    n = len(polygon)
    box = Rect2D.from_points(polygon)
    offset = max(MIN_PROBE, PROBE_RATIO * max(box.width, box.height))
    # Interior is on the left of each edge for CCW loops, right for CW
    side = 1.0 if signed_area(polygon) > 0 else -1.0

    probes = []
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        edge = b - a
        if edge.length() <= EPS:
            continue
        normal = Vec2(-edge.y, edge.x).normalize() * side
        probes.append((a + b) * 0.5 + normal * offset)
    return probes


def _penetrates(a: Sequence[Vec2], b: Sequence[Vec2]) -> bool:
    """Whether some interior point of a lies strictly inside b."""
    if any(point_strictly_inside(v, b) for v in a):
        return True
    return any(point_strictly_inside(p, b) for p in _interior_probes(a))


def polygons_intersect(a: Sequence[Vec2], b: Sequence[Vec2]) -> bool:
    """
    Whether two simple polygons overlap.

    Args:
        a: Vertices of the first polygon (closed implicitly)
        b: Vertices of the second polygon

    Returns:
        True if the interiors overlap; touching boundaries do not count
    """
    if len(a) < 3 or len(b) < 3:
        return False

    if not Rect2D.from_points(a).intersects(Rect2D.from_points(b)):
        return False

    n_a = len(a)
    n_b = len(b)
    touching = False

    for i in range(n_a):
        a0 = a[i]
        a1 = a[(i + 1) % n_a]
        for j in range(n_b):
            relation = segment_relation(a0, a1, b[j], b[(j + 1) % n_b])
            if relation == SegmentRelation.CROSSING:
                return True
            if relation == SegmentRelation.TOUCHING:
                touching = True

    if not touching:
        return point_in_polygon(a[0], b) or point_in_polygon(b[0], a)

    return _penetrates(a, b) or _penetrates(b, a)


def contours_intersect(a: Contour, b: Contour) -> bool:
    return polygons_intersect(a.vertices, b.vertices)


def contour_sets_intersect(set_a: Iterable[Contour], set_b: Iterable[Contour]) -> bool:
    """True if any contour of one set overlaps any contour of the other."""
    set_b = list(set_b)
    for ca in set_a:
        for cb in set_b:
            if polygons_intersect(ca.vertices, cb.vertices):
                return True
    return False


def segment_distance(p1: Vec2, p2: Vec2, q1: Vec2, q2: Vec2) -> float:
    """Shortest distance between two segments (0 if they meet)."""
    if segments_touch_or_cross(p1, p2, q1, q2):
        return 0.0
    return min(
        _distance_to_segment(p1, q1, q2),
        _distance_to_segment(p2, q1, q2),
        _distance_to_segment(q1, p1, p2),
        _distance_to_segment(q2, p1, p2),
    )


def polygon_distance(a: Sequence[Vec2], b: Sequence[Vec2]) -> float:
    """Boundary-to-boundary distance; 0 when the polygons overlap."""
    if polygons_intersect(a, b):
        return 0.0
    n_a = len(a)
    n_b = len(b)
    return min(
        segment_distance(a[i], a[(i + 1) % n_a], b[j], b[(j + 1) % n_b])
        for i in range(n_a)
        for j in range(n_b)
    )


def polygons_within(a: Sequence[Vec2], b: Sequence[Vec2], distance: float) -> bool:
    """
    Whether two polygons overlap or come closer than ``distance``.

    Polygons exactly ``distance`` apart are not within it.
    """
    if len(a) < 3 or len(b) < 3:
        return False

    if distance <= 0:
        return polygons_intersect(a, b)

    if not Rect2D.from_points(a).inflate(distance).intersects(Rect2D.from_points(b)):
        return False
    if polygons_intersect(a, b):
        return True

    limit = distance - EPS
    n_a = len(a)
    n_b = len(b)
    for i in range(n_a):
        a0 = a[i]
        a1 = a[(i + 1) % n_a]
        for j in range(n_b):
            if segment_distance(a0, a1, b[j], b[(j + 1) % n_b]) < limit:
                return True
    return False


def contour_sets_within(
    set_a: Iterable[Contour],
    set_b: Iterable[Contour],
    distance: float,
) -> bool:
    """True if any contour pair overlaps or is closer than ``distance``."""
    set_b = list(set_b)
    for ca in set_a:
        for cb in set_b:
            if polygons_within(ca.vertices, cb.vertices, distance):
                return True
    return False
