"""Closed polygon contours.

A contour is an ordered loop of vertices whose first vertex is not repeated
at the end. Outer contours describe a part silhouette, holes describe voids.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple, Union

from .primitives import GeometryError, Rect2D, Vec2, ZERO

PointLike = Union[Vec2, Tuple[float, float]]

# Below this absolute area a loop is treated as degenerate
DEGENERATE_AREA = 1e-12


def _as_vec(point: PointLike) -> Vec2:
    if isinstance(point, Vec2):
        return point
    return Vec2.from_tuple(point)


def signed_area(points: Sequence[Vec2]) -> float:
    """Shoelace area of an implicitly closed loop, positive when CCW."""
    n = len(points)
    if n < 3:
        return 0.0

    total = 0.0
    for i in range(n):
        p0 = points[i]
        p1 = points[(i + 1) % n]
        total += p0.x * p1.y - p1.x * p0.y
    return 0.5 * total


@dataclass
class Contour:
    """A closed polygon, outer silhouette or hole."""
    vertices: List[Vec2] = field(default_factory=list)
    is_outer: bool = True

    def __post_init__(self):
        self.vertices = [_as_vec(v) for v in self.vertices]

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self):
        return iter(self.vertices)

    def signed_area(self) -> float:
        return signed_area(self.vertices)

    @property
    def area(self) -> float:
        return abs(self.signed_area())

    @property
    def is_ccw(self) -> bool:
        return self.signed_area() > 0

    def bounds(self) -> Rect2D:
        return Rect2D.from_points(self.vertices)

    def perimeter(self) -> float:
        n = len(self.vertices)
        return sum(
            self.vertices[i].distance_to(self.vertices[(i + 1) % n])
            for i in range(n)
        ) if n > 1 else 0.0

    def centroid(self) -> Vec2:
        """Area centroid; falls back to the vertex mean for degenerate loops."""
        area = self.signed_area()
        n = len(self.vertices)
        if n == 0:
            return ZERO
        if abs(area) < DEGENERATE_AREA:
            sx = sum(v.x for v in self.vertices)
            sy = sum(v.y for v in self.vertices)
            return Vec2(sx / n, sy / n)

        cx = cy = 0.0
        for i in range(n):
            p0 = self.vertices[i]
            p1 = self.vertices[(i + 1) % n]
            cross = p0.x * p1.y - p1.x * p0.y
            cx += (p0.x + p1.x) * cross
            cy += (p0.y + p1.y) * cross
        return Vec2(cx / (6.0 * area), cy / (6.0 * area))

    def validate(self) -> "Contour":
        """
        Reject contours that cannot bound a region.

        Raises:
            GeometryError: Fewer than 3 vertices or near-zero area
        """
        if len(self.vertices) < 3:
            raise GeometryError(
                f"Contour needs at least 3 vertices, got {len(self.vertices)}"
            )
        if self.area < DEGENERATE_AREA:
            raise GeometryError("Contour is degenerate (zero area)")
        return self

    def transform(self, translation: Vec2, rotation_rad: float) -> "Contour":
        """New contour with every vertex rotated about the origin, then translated."""
        return Contour(
            [v.rotate(rotation_rad) + translation for v in self.vertices],
            is_outer=self.is_outer,
        )

    def translated(self, offset: Vec2) -> "Contour":
        return Contour([v + offset for v in self.vertices], is_outer=self.is_outer)

    def mirrored(self) -> "Contour":
        """Reflect about the local vertical axis (x -> -x).

        The vertex order is reversed so the winding sign is unchanged.
        """
        return Contour(
            [Vec2(-v.x, v.y) for v in reversed(self.vertices)],
            is_outer=self.is_outer,
        )

    def reversed(self) -> "Contour":
        return Contour(list(reversed(self.vertices)), is_outer=self.is_outer)

    def oriented(self, ccw: bool) -> "Contour":
        """Copy wound counter-clockwise (ccw=True) or clockwise."""
        if self.is_ccw == ccw:
            return Contour(list(self.vertices), is_outer=self.is_outer)
        return self.reversed()

    def to_list(self) -> List[Tuple[float, float]]:
        return [v.to_tuple() for v in self.vertices]

    @classmethod
    def rectangle(
        cls,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float,
        is_outer: bool = True,
    ) -> "Contour":
        """Axis-aligned rectangle, wound CCW."""
        return cls(Rect2D(min_x, min_y, max_x, max_y).corners(), is_outer=is_outer)

    @classmethod
    def circle(
        cls,
        center: PointLike,
        radius: float,
        segments: int = 32,
        is_outer: bool = True,
    ) -> "Contour":
        """Regular polygon approximation of a circle, wound CCW."""
        if radius <= 0:
            raise GeometryError(f"Circle radius must be positive, got {radius}")
        segments = max(3, segments)
        c = _as_vec(center)
        return cls(
            [
                Vec2(
                    c.x + radius * math.cos(2.0 * math.pi * i / segments),
                    c.y + radius * math.sin(2.0 * math.pi * i / segments),
                )
                for i in range(segments)
            ],
            is_outer=is_outer,
        )


def contours_bounds(contours: Iterable[Contour]) -> Rect2D:
    """Bounding box of all vertices of several contours."""
    return Rect2D.from_points(v for c in contours for v in c.vertices)
