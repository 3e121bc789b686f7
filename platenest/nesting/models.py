"""Parts, plates, placements and nesting results."""

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..geometry.contour import Contour, contours_bounds
from ..geometry.contour_builder import ContourBuilder
from ..geometry.primitives import GeometryError, Rect2D, Vec2
from ..geometry.segments import Segment


@dataclass(eq=False)
class Part:
    """A flat part to be nested, possibly with holes.

    ``bounds`` and ``area`` are derived from the contours; call
    ``recalculate()`` after editing ``contours``.
    """
    name: str
    contours: List[Contour] = field(default_factory=list)
    quantity: int = 1
    rotation_step_deg: float = 90.0  # 0 = no rotation

    bounds: Rect2D = field(init=False, repr=False)
    area: float = field(init=False, repr=False)

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Part '{self.name}' quantity must be >= 1, got {self.quantity}")
        self.recalculate()

    def recalculate(self) -> None:
        """
        Recompute bounds and net area from the contours.

        Raises:
            GeometryError: If the part has no contours, or a contour has
                fewer than 3 vertices or zero area
        """
        if not self.contours:
            raise GeometryError(f"Part '{self.name}' has no contours")
        for contour in self.contours:
            try:
                contour.validate()
            except GeometryError as e:
                raise GeometryError(f"Part '{self.name}': {e}") from e

        self.bounds = contours_bounds(self.contours)

        area = 0.0
        for contour in self.contours:
            if contour.is_outer:
                area += contour.area
            else:
                area -= contour.area
        self.area = abs(area)

    @property
    def outline(self) -> Contour:
        """The silhouette: first outer contour, else the largest one."""
        for contour in self.contours:
            if contour.is_outer:
                return contour
        return max(self.contours, key=lambda c: c.area)

    @property
    def holes(self) -> List[Contour]:
        return [c for c in self.contours if not c.is_outer]

    @classmethod
    def rectangle(
        cls,
        name: str,
        width: float,
        height: float,
        quantity: int = 1,
        rotation_step_deg: float = 90.0,
    ) -> "Part":
        if width <= 0 or height <= 0:
            raise GeometryError(f"Rectangle size must be positive, got {width}x{height}")
        return cls(
            name=name,
            contours=[Contour.rectangle(0.0, 0.0, width, height)],
            quantity=quantity,
            rotation_step_deg=rotation_step_deg,
        )

    @classmethod
    def circle(
        cls,
        name: str,
        radius: float,
        quantity: int = 1,
        segments: int = 32,
        rotation_step_deg: float = 0.0,
    ) -> "Part":
        return cls(
            name=name,
            contours=[Contour.circle((radius, radius), radius, segments)],
            quantity=quantity,
            rotation_step_deg=rotation_step_deg,
        )

    @classmethod
    def from_segments(
        cls,
        name: str,
        segments: Iterable[Segment],
        quantity: int = 1,
        rotation_step_deg: float = 90.0,
        builder: Optional[ContourBuilder] = None,
    ) -> "Part":
        """
        Build a part from raw line/arc segments.

        Raises:
            NoClosedRegionError: If the segments do not close
        """
        builder = builder or ContourBuilder.from_settings()
        return cls(
            name=name,
            contours=builder.build(segments),
            quantity=quantity,
            rotation_step_deg=rotation_step_deg,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "quantity": self.quantity,
            "rotation_step_deg": self.rotation_step_deg,
            "area": self.area,
            "bounds": self.bounds.to_dict(),
            "contours": [
                {"is_outer": c.is_outer, "vertices": c.to_list()}
                for c in self.contours
            ],
        }


@dataclass(frozen=True)
class Plate:
    """Rectangular stock; units must match the part geometry."""
    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise GeometryError(
                f"Plate dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def bounds(self) -> Rect2D:
        return Rect2D(0.0, 0.0, self.width, self.height)

    def usable_bounds(self, margin: float) -> Rect2D:
        """Plate shrunk by a margin on every side."""
        return self.bounds.inflate(-margin)


def orient_contours(
    contours: Iterable[Contour],
    origin: Vec2,
    rotation_deg: float,
    mirrored: bool = False,
) -> List[Contour]:
    """
    Move part contours into placement-local space.

    Each contour is shifted so ``origin`` lands on (0, 0), optionally
    reflected about the vertical axis, then rotated. Returns fresh copies.
    """
    rotation_rad = math.radians(rotation_deg)
    oriented = []
    for contour in contours:
        local = contour.translated(-origin)
        if mirrored:
            local = local.mirrored()
        oriented.append(local.transform(Vec2(0.0, 0.0), rotation_rad))
    return oriented


@dataclass(frozen=True, eq=False)
class Placement:
    """One committed part instance on the plate.

    World vertices are obtained by shifting the part's bounding box minimum
    to the origin, mirroring (if set), rotating by ``rotation_deg`` and
    finally translating by ``translation``.
    """
    part: Part
    translation: Vec2
    rotation_deg: float
    bounds: Rect2D
    mirrored: bool = False
    copy_index: int = 0

    def world_contours(self) -> List[Contour]:
        """Fresh contours of the part in plate coordinates."""
        local = orient_contours(
            self.part.contours, self.part.bounds.min, self.rotation_deg, self.mirrored
        )
        return [c.translated(self.translation) for c in local]

    def key(self) -> Tuple:
        """Comparable identity used for determinism checks."""
        return (
            self.part.name,
            self.copy_index,
            round(self.translation.x, 9),
            round(self.translation.y, 9),
            self.rotation_deg,
            self.mirrored,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "part": self.part.name,
            "copy_index": self.copy_index,
            "x": self.translation.x,
            "y": self.translation.y,
            "rotation_deg": self.rotation_deg,
            "mirrored": self.mirrored,
            "bounds": self.bounds.to_dict(),
        }


@dataclass
class NestingResult:
    """Result of a nesting run.

    ``placements`` are in commit order; ``unplaced`` holds one entry per
    instance that exhausted its search space.
    """
    placements: List[Placement] = field(default_factory=list)
    unplaced: List[Part] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def placed_count(self) -> int:
        return len(self.placements)

    @property
    def unplaced_count(self) -> int:
        return len(self.unplaced)

    @property
    def success(self) -> bool:
        """True when every instance was placed."""
        return not self.unplaced

    @property
    def placed_area(self) -> float:
        return sum(p.part.area for p in self.placements)

    def utilization(self, plate: Plate) -> float:
        """Percentage of the plate covered by placed part area."""
        return min(100.0, self.placed_area / plate.area * 100.0)

    def used_bounds(self) -> Optional[Rect2D]:
        """Bounding box of all placements, or None if nothing was placed."""
        if not self.placements:
            return None
        box = self.placements[0].bounds
        for p in self.placements[1:]:
            box = box.union(p.bounds)
        return box

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "placements": [p.to_dict() for p in self.placements],
            "unplaced": [p.name for p in self.unplaced],
            "placed_count": self.placed_count,
            "unplaced_count": self.unplaced_count,
            "processing_time": self.processing_time,
        }

    def summary(self, plate: Optional[Plate] = None) -> str:
        """Export layout as text description."""
        lines = [f"; Parts placed: {self.placed_count}"]
        if plate is not None:
            lines.insert(0, f"; Plate: {plate.width:g}x{plate.height:g}")
            lines.append(f"; Utilization: {self.utilization(plate):.1f}%")
        lines.append("")

        for i, p in enumerate(self.placements):
            mirror = " (mirrored)" if p.mirrored else ""
            lines.append(f"; Part {i + 1}: {p.part.name}{mirror}")
            lines.append(f";   Position: ({p.translation.x:.3f}, {p.translation.y:.3f})")
            lines.append(f";   Rotation: {p.rotation_deg:g}°")
            lines.append(f";   Bounds: ({p.bounds.min_x:.3f}, {p.bounds.min_y:.3f})"
                         f" - ({p.bounds.max_x:.3f}, {p.bounds.max_y:.3f})")

        if self.unplaced:
            lines.append(f"; Unplaced parts ({self.unplaced_count}):")
            for part in self.unplaced:
                lines.append(f";   - {part.name}")

        return "\n".join(lines)
