"""
Contour reconstruction from unordered segment soup.

Importers frequently deliver a part boundary as loose lines and arcs in no
particular order or direction. The builder turns them back into closed
loops:

1. Every segment becomes a polyline chain (arcs are sampled adaptively).
2. Chains are greedily joined head-to-tail into loops, reversing a chain
   when needed, until the loop closes or nothing else connects.
3. Closed loops are cleaned (near duplicates merged, collinear points
   dropped).
4. The loop with the largest absolute area is the outer contour; the rest
   are holes.

Loops that never close are discarded. Safety caps bound the work on
malformed input.
"""

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..config import get_settings
from ..utils import get_logger
from .contour import Contour, DEGENERATE_AREA, signed_area
from .primitives import GeometryError, Rect2D, Vec2
from .segments import (
    DEFAULT_ARC_RESOLUTION,
    DEFAULT_ARC_TOLERANCE,
    DEFAULT_MAX_ARC_SEGMENTS,
    ArcSegment,
    LineSegment,
    Segment,
    SegmentKind,
)

logger = get_logger("geometry.contour_builder")

DEFAULT_TOLERANCE = 1e-5
COLLINEAR_EPS = 1e-9
MAX_LOOPS = 200
MAX_JOINS = 5000


class NoClosedRegionError(GeometryError):
    """Raised when segment data does not close into any loop."""
    pass


class ContourBuilder:
    """
    Rebuilds closed contours from line and arc segments.

    Usage:
        builder = ContourBuilder()
        contours = builder.build(segments)
        outer, holes = contours[0], contours[1:]
    """

    def __init__(
        self,
        arc_resolution: int = DEFAULT_ARC_RESOLUTION,
        tolerance: float = DEFAULT_TOLERANCE,
        arc_tolerance: float = DEFAULT_ARC_TOLERANCE,
        max_arc_segments: int = DEFAULT_MAX_ARC_SEGMENTS,
        max_loops: int = MAX_LOOPS,
        max_joins: int = MAX_JOINS,
    ):
        """
        Initialize contour builder.

        Args:
            arc_resolution: Minimum number of chords per arc
            tolerance: Absolute distance under which endpoints match
            arc_tolerance: Target chord length for adaptive arc sampling
            max_arc_segments: Upper bound on chords per arc
            max_loops: Maximum number of loops started
            max_joins: Maximum number of joins within one loop
        """
        self.arc_resolution = arc_resolution
        self.tolerance = tolerance
        self.arc_tolerance = arc_tolerance
        self.max_arc_segments = max_arc_segments
        self.max_loops = max_loops
        self.max_joins = max_joins

        self._chain_builders: Dict[SegmentKind, Callable[[Segment], List[Vec2]]] = {
            SegmentKind.LINE: self._line_chain,
            SegmentKind.ARC: self._arc_chain,
        }

    @classmethod
    def from_settings(cls) -> "ContourBuilder":
        """Create a builder using the configured defaults."""
        settings = get_settings()
        return cls(
            arc_resolution=settings.arc_resolution,
            tolerance=settings.join_tolerance,
            arc_tolerance=settings.arc_tolerance,
            max_arc_segments=settings.max_arc_segments,
        )

    def near(self, a: Vec2, b: Vec2) -> bool:
        return abs(a.x - b.x) < self.tolerance and abs(a.y - b.y) < self.tolerance

    # ------------------------------------------------------------------
    # Chains

    def _line_chain(self, segment: LineSegment) -> List[Vec2]:
        return [segment.start, segment.end]

    def _arc_chain(self, segment: ArcSegment) -> List[Vec2]:
        return segment.sample(
            self.arc_resolution, self.arc_tolerance, self.max_arc_segments
        )

    def chain(self, segment: Segment) -> List[Vec2]:
        """Polyline for one segment."""
        builder = self._chain_builders.get(getattr(segment, "kind", None))
        if builder is None:
            raise GeometryError(f"Unsupported segment: {segment!r}")
        return builder(segment)

    def chains(self, segments: Iterable[Segment]) -> List[List[Vec2]]:
        return [self.chain(s) for s in segments]

    # ------------------------------------------------------------------
    # Joining

    def _is_closed(self, loop: Sequence[Vec2]) -> bool:
        return len(loop) >= 4 and self.near(loop[0], loop[-1])

    def join_loops(self, chains: List[List[Vec2]]) -> List[List[Vec2]]:
        """
        Greedily join chains into closed loops.

        Args:
            chains: Polylines; consumed in order, not modified

        Returns:
            Closed loops, each ending with a copy of its first point
        """
        remaining = [list(c) for c in chains if len(c) >= 2]
        loops = []
        loop_count = 0

        while remaining:
            if loop_count >= self.max_loops:
                logger.warning(
                    f"Loop cap reached ({self.max_loops}); "
                    f"{len(remaining)} chains left unjoined"
                )
                break
            loop_count += 1

            loop = remaining.pop(0)
            joins = 0

            while remaining and not self._is_closed(loop):
                if joins >= self.max_joins:
                    logger.warning(f"Join cap reached ({self.max_joins}) in one loop")
                    break
                joins += 1

                if not self._extend(loop, remaining):
                    break

            if self._is_closed(loop):
                loops.append(loop)
            else:
                logger.debug(f"Discarding open chain with {len(loop)} points")

        return loops

    def _extend(self, loop: List[Vec2], remaining: List[List[Vec2]]) -> bool:
        """Attach the first matching chain to the loop's tail or head."""
        head = loop[0]
        tail = loop[-1]

        for i, chain in enumerate(remaining):
            c_head = chain[0]
            c_tail = chain[-1]

            if self.near(tail, c_head):
                loop.extend(chain[1:])
            elif self.near(tail, c_tail):
                loop.extend(reversed(chain[:-1]))
            elif self.near(head, c_tail):
                loop[:0] = chain[:-1]
            elif self.near(head, c_head):
                loop[:0] = list(reversed(chain[1:]))
            else:
                continue

            del remaining[i]
            return True

        return False

    # ------------------------------------------------------------------
    # Cleanup

    def cleanup(self, points: Sequence[Vec2]) -> List[Vec2]:
        """
        Tidy a closed loop.

        Merges consecutive near-duplicates, drops the repeated closing
        point and removes vertices collinear with both neighbours.
        """
        if not points:
            return []

        dedup = [points[0]]
        for p in points[1:]:
            if not self.near(p, dedup[-1]):
                dedup.append(p)
        while len(dedup) > 1 and self.near(dedup[0], dedup[-1]):
            dedup.pop()

        if len(dedup) < 3:
            return dedup

        # Repeat until stable; removing one point can expose another
        changed = True
        while changed and len(dedup) > 3:
            changed = False
            n = len(dedup)
            for i in range(n):
                a = dedup[i - 1]
                b = dedup[i]
                c = dedup[(i + 1) % n]
                ab = b - a
                bc = c - b
                # Relative to edge lengths so small loops keep their corners
                if abs(ab.cross(bc)) <= COLLINEAR_EPS * ab.length() * bc.length():
                    del dedup[i]
                    changed = True
                    break

        return dedup

    # ------------------------------------------------------------------
    # Public entry points

    def build(self, segments: Iterable[Segment]) -> List[Contour]:
        """
        Rebuild outer contour and holes from segments.

        Args:
            segments: Unordered line and arc segments

        Returns:
            Contours with the outer (largest area, CCW) first and holes
            (CW) after it, in descending area order

        Raises:
            NoClosedRegionError: If no loop closes
        """
        loops = []
        for raw in self.join_loops(self.chains(segments)):
            cleaned = self.cleanup(raw)
            if len(cleaned) < 3 or abs(signed_area(cleaned)) < DEGENERATE_AREA:
                logger.debug("Discarding degenerate loop")
                continue
            loops.append(cleaned)

        if not loops:
            raise NoClosedRegionError("No closed region found in segment data")

        loops.sort(key=lambda pts: abs(signed_area(pts)), reverse=True)

        contours = [Contour(loops[0], is_outer=True).oriented(ccw=True)]
        for pts in loops[1:]:
            contours.append(Contour(pts, is_outer=False).oriented(ccw=False))

        logger.debug(
            f"Rebuilt {len(contours)} contours "
            f"(outer area {contours[0].area:.4g}, {len(contours) - 1} holes)"
        )
        return contours

    def trace_lines(self, lines: Sequence[LineSegment]) -> Contour:
        """
        Walk a single loop over straight segments.

        Starts at the first segment's start point and repeatedly follows any
        unused segment touching the current point until the walk returns to
        the start. The loop is returned counter-clockwise.

        Raises:
            NoClosedRegionError: If the walk dead-ends before closing
        """
        if not lines:
            raise NoClosedRegionError("No segments to trace")

        start = lines[0].start
        current = start
        path = [current]
        used = [False] * len(lines)

        for _ in range(min(len(lines) + 1, self.max_joins)):
            next_point: Optional[Vec2] = None
            for i, seg in enumerate(lines):
                if used[i]:
                    continue
                if self.near(seg.start, current):
                    next_point = seg.end
                elif self.near(seg.end, current):
                    next_point = seg.start
                else:
                    continue
                used[i] = True
                break

            if next_point is None:
                break

            path.append(next_point)
            current = next_point

            if self._is_closed(path):
                cleaned = self.cleanup(path)
                if len(cleaned) < 3:
                    break
                return Contour(cleaned, is_outer=True).oriented(ccw=True)

        raise NoClosedRegionError("Line walk did not return to its start")

    def bounding_rectangle(self, segments: Iterable[Segment]) -> Contour:
        """
        Rectangle around all raw geometry.

        A degraded fallback for input that does not close; callers opt in
        explicitly after catching NoClosedRegionError.

        Raises:
            GeometryError: If there is no geometry at all
        """
        points = [p for chain in self.chains(segments) for p in chain]
        box = Rect2D.from_points(points)
        return Contour(box.corners(), is_outer=True)


def build_contours(segments: Iterable[Segment], **kwargs) -> List[Contour]:
    """Rebuild contours with configured defaults (see ContourBuilder.build)."""
    builder = ContourBuilder(**kwargs) if kwargs else ContourBuilder.from_settings()
    return builder.build(segments)


def trace_line_loop(lines: Sequence[LineSegment], **kwargs) -> Contour:
    """Walk a single loop over lines (see ContourBuilder.trace_lines)."""
    builder = ContourBuilder(**kwargs) if kwargs else ContourBuilder.from_settings()
    return builder.trace_lines(lines)
