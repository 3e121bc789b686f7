"""Working state of a nesting run.

Committed placements are append-only. The arena keeps each placement's
world-space contours next to it so collision checks never touch, or alias,
the part's template contours.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List

from ..geometry.contour import Contour
from ..geometry.intersect import contour_sets_within
from ..geometry.primitives import Rect2D
from .models import Placement


@dataclass(frozen=True)
class CommittedPlacement:
    """A placement together with its world-space contours."""
    placement: Placement
    contours: List[Contour]


class PlacementArena:
    """
    Append-only list of committed placements with box pruning.

    Usage:
        arena = PlacementArena(spacing=2.5)
        if not arena.collides(bounds, contours):
            arena.commit(placement, contours)
    """

    def __init__(self, spacing: float = 0.0):
        self.spacing = spacing
        self._entries: List[CommittedPlacement] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def placements(self) -> List[Placement]:
        return [e.placement for e in self._entries]

    def commit(self, placement: Placement, contours: List[Contour]) -> None:
        self._entries.append(CommittedPlacement(placement, list(contours)))

    def nearby(self, bounds: Rect2D) -> Iterator[CommittedPlacement]:
        """Entries whose spacing-inflated box intersects the given box."""
        for entry in self._entries:
            if bounds.intersects(entry.placement.bounds.inflate(self.spacing)):
                yield entry

    def collides(self, bounds: Rect2D, contours: List[Contour]) -> bool:
        """Exact test: overlap, or a gap narrower than the spacing, to any nearby placement."""
        for entry in self.nearby(bounds):
            if contour_sets_within(contours, entry.contours, self.spacing):
                return True
        return False


class OccupancyGrid:
    """
    Boolean cell grid over the plate, indexed by integer cell coordinates.

    Cell (ix, iy) covers [ix * step, (ix + 1) * step) horizontally and the
    same vertically.
    """

    def __init__(self, width: float, height: float, step: float):
        if step <= 0:
            raise ValueError(f"Cell step must be positive, got {step}")
        self.step = step
        self.columns = int(math.ceil(width / step - 1e-9))
        self.rows = int(math.ceil(height / step - 1e-9))
        self._cells = [[False] * self.columns for _ in range(self.rows)]

    def cells_for(self, length: float) -> int:
        """Number of cells needed to cover a length."""
        return max(1, int(math.ceil(length / self.step - 1e-9)))

    def is_free(self, ix: int, iy: int, nx: int, ny: int) -> bool:
        """Whether every cell of the block is free; cells off the grid count as free."""
        for y in range(max(0, iy), min(self.rows, iy + ny)):
            row = self._cells[y]
            for x in range(max(0, ix), min(self.columns, ix + nx)):
                if row[x]:
                    return False
        return True

    def mark(self, ix: int, iy: int, nx: int, ny: int) -> None:
        for y in range(max(0, iy), min(self.rows, iy + ny)):
            row = self._cells[y]
            for x in range(max(0, ix), min(self.columns, ix + nx)):
                row[x] = True

    def occupied_count(self) -> int:
        return sum(sum(row) for row in self._cells)
