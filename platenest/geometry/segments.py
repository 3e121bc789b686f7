"""Raw boundary segments handed over by geometry importers.

A segment is either a straight line or a circular arc. Both carry a
``kind`` tag so consumers can dispatch through a table instead of
inspecting types.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from .primitives import GeometryError, Vec2

TWO_PI = 2.0 * math.pi

# Arc sampling defaults
MIN_ARC_STEPS = 6
DEFAULT_ARC_RESOLUTION = 24
DEFAULT_ARC_TOLERANCE = 0.05
DEFAULT_MAX_ARC_SEGMENTS = 256


class SegmentKind(str, Enum):
    """Kinds of boundary segments."""
    LINE = "line"
    ARC = "arc"


@dataclass(frozen=True)
class LineSegment:
    """A straight segment between two points."""
    start: Vec2
    end: Vec2
    kind: SegmentKind = field(default=SegmentKind.LINE, init=False)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


@dataclass(frozen=True)
class ArcSegment:
    """A circular arc.

    Angles are in radians. With ``ccw`` the arc runs counter-clockwise from
    ``start_angle`` to ``end_angle``, otherwise clockwise. Equal angles
    describe a full circle.
    """
    center: Vec2
    radius: float
    start_angle: float
    end_angle: float
    ccw: bool = True
    kind: SegmentKind = field(default=SegmentKind.ARC, init=False)

    def __post_init__(self):
        if self.radius <= 0:
            raise GeometryError(f"Arc radius must be positive, got {self.radius}")

    @property
    def sweep(self) -> float:
        """Absolute swept angle in (0, 2*pi]."""
        if self.ccw:
            delta = self.end_angle - self.start_angle
        else:
            delta = self.start_angle - self.end_angle
        delta = math.fmod(delta, TWO_PI)
        if delta <= 0:
            delta += TWO_PI
        return delta

    @property
    def length(self) -> float:
        return self.sweep * self.radius

    def point_at(self, angle: float) -> Vec2:
        return Vec2(
            self.center.x + self.radius * math.cos(angle),
            self.center.y + self.radius * math.sin(angle),
        )

    @property
    def start(self) -> Vec2:
        return self.point_at(self.start_angle)

    @property
    def end(self) -> Vec2:
        return self.point_at(self.end_angle)

    def steps(
        self,
        resolution: int = DEFAULT_ARC_RESOLUTION,
        tolerance: float = DEFAULT_ARC_TOLERANCE,
        max_segments: int = DEFAULT_MAX_ARC_SEGMENTS,
    ) -> int:
        """Number of chords used to sample this arc."""
        steps = max(MIN_ARC_STEPS, resolution, int(self.length / tolerance))
        return max(1, min(steps, max_segments))

    def sample(
        self,
        resolution: int = DEFAULT_ARC_RESOLUTION,
        tolerance: float = DEFAULT_ARC_TOLERANCE,
        max_segments: int = DEFAULT_MAX_ARC_SEGMENTS,
    ) -> List[Vec2]:
        """Polyline from start to end, both included."""
        steps = self.steps(resolution, tolerance, max_segments)
        direction = 1.0 if self.ccw else -1.0
        sweep = self.sweep
        points = [
            self.point_at(self.start_angle + direction * sweep * i / steps)
            for i in range(steps)
        ]
        # Exact end point keeps joins with neighbouring segments tight
        points.append(self.end)
        return points


Segment = Union[LineSegment, ArcSegment]


def line(x1: float, y1: float, x2: float, y2: float) -> LineSegment:
    """Shorthand for a line segment from coordinates."""
    return LineSegment(Vec2(x1, y1), Vec2(x2, y2))


def arc(
    cx: float,
    cy: float,
    radius: float,
    start_angle: float,
    end_angle: float,
    ccw: bool = True,
) -> ArcSegment:
    """Shorthand for an arc segment from coordinates (angles in radians)."""
    return ArcSegment(Vec2(cx, cy), radius, start_angle, end_angle, ccw)
