"""2-D point algebra and axis-aligned bounding boxes."""

import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple


class GeometryError(ValueError):
    """Raised when geometry cannot be constructed from the given input."""
    pass


@dataclass(frozen=True)
class Vec2:
    """An immutable 2-D vector / point."""
    x: float
    y: float

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scale: float) -> "Vec2":
        return Vec2(self.x * scale, self.y * scale)

    __rmul__ = __mul__

    def __truediv__(self, scale: float) -> "Vec2":
        return Vec2(self.x / scale, self.y / scale)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vec2") -> float:
        """Z component of the 3-D cross product."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Vec2":
        """Unit vector in the same direction; a zero vector is returned as-is."""
        length = self.length()
        return self / length if length > 0 else self

    def rotate(self, radians: float) -> "Vec2":
        """Rotate about the origin, counter-clockwise for positive angles."""
        c = math.cos(radians)
        s = math.sin(radians)
        return Vec2(self.x * c - self.y * s, self.x * s + self.y * c)

    def distance_to(self, other: "Vec2") -> float:
        return (self - other).length()

    def almost_equals(self, other: "Vec2", tolerance: float = 1e-9) -> bool:
        """Per-axis comparison within an absolute tolerance."""
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, point: Tuple[float, float]) -> "Vec2":
        return cls(float(point[0]), float(point[1]))

    def __repr__(self) -> str:
        return f"Vec2({self.x:.6g}, {self.y:.6g})"


ZERO = Vec2(0.0, 0.0)


@dataclass(frozen=True)
class Rect2D:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def min(self) -> Vec2:
        return Vec2(self.min_x, self.min_y)

    @property
    def max(self) -> Vec2:
        return Vec2(self.max_x, self.max_y)

    @property
    def center(self) -> Vec2:
        return Vec2((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    @classmethod
    def from_points(cls, points: Iterable[Vec2]) -> "Rect2D":
        """
        Smallest box containing every point.

        Raises:
            GeometryError: If the point set is empty
        """
        iterator = iter(points)
        try:
            first = next(iterator)
        except StopIteration:
            raise GeometryError("Cannot create Rect2D from empty point set") from None

        min_x = max_x = first.x
        min_y = max_y = first.y
        for p in iterator:
            if p.x < min_x:
                min_x = p.x
            elif p.x > max_x:
                max_x = p.x
            if p.y < min_y:
                min_y = p.y
            elif p.y > max_y:
                max_y = p.y

        return cls(min_x, min_y, max_x, max_y)

    def intersects(self, other: "Rect2D") -> bool:
        """Open-interval overlap: boxes sharing only an edge do not intersect."""
        return not (
            other.min_x >= self.max_x or
            other.max_x <= self.min_x or
            other.min_y >= self.max_y or
            other.max_y <= self.min_y
        )

    def contains(self, point: Vec2) -> bool:
        """Closed-interval point containment."""
        return (self.min_x <= point.x <= self.max_x and
                self.min_y <= point.y <= self.max_y)

    def contains_rect(self, other: "Rect2D", tolerance: float = 0.0) -> bool:
        return (other.min_x >= self.min_x - tolerance and
                other.min_y >= self.min_y - tolerance and
                other.max_x <= self.max_x + tolerance and
                other.max_y <= self.max_y + tolerance)

    def translate(self, offset: Vec2) -> "Rect2D":
        return Rect2D(
            self.min_x + offset.x,
            self.min_y + offset.y,
            self.max_x + offset.x,
            self.max_y + offset.y,
        )

    def inflate(self, margin: float) -> "Rect2D":
        """Grow (or shrink, for negative margins) on every side."""
        return Rect2D(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )

    def union(self, other: "Rect2D") -> "Rect2D":
        return Rect2D(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def corners(self) -> List[Vec2]:
        """Corners in counter-clockwise order starting at the minimum."""
        return [
            Vec2(self.min_x, self.min_y),
            Vec2(self.max_x, self.min_y),
            Vec2(self.max_x, self.max_y),
            Vec2(self.min_x, self.max_y),
        ]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
            "width": self.width,
            "height": self.height,
        }
