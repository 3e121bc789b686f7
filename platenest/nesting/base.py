"""Common machinery shared by the nesters."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..geometry.contour import Contour, contours_bounds
from ..geometry.primitives import Rect2D, Vec2
from ..utils import get_logger
from .models import NestingResult, Part, Placement, Plate, orient_contours
from .settings import NestSettings, resolve_rotations

logger = get_logger("nesting.base")


@dataclass(frozen=True)
class PartInstance:
    """One copy of a part waiting to be placed."""
    part: Part
    copy_index: int  # 0-based copy number within the part's quantity
    order: int  # position of the part in the caller's list

    def is_mirrored(self, settings: NestSettings) -> bool:
        """Mirroring alternates: even copies plain, odd copies mirrored."""
        return settings.allow_mirror and self.copy_index % 2 == 1


@dataclass(frozen=True)
class OrientedShape:
    """Part contours in placement-local space for one rotation/mirror state."""
    contours: List[Contour]
    bounds: Rect2D
    rotation_deg: float
    mirrored: bool

    def translation_for(self, x: float, y: float) -> Vec2:
        """Translation that puts the shape's box minimum at (x, y)."""
        return Vec2(x - self.bounds.min_x, y - self.bounds.min_y)

    def placed(self, translation: Vec2) -> List[Contour]:
        """Fresh world-space contours."""
        return [c.translated(translation) for c in self.contours]


def expand_instances(parts: Iterable[Part]) -> List[PartInstance]:
    """Flatten quantities into individual instances, in input order."""
    instances = []
    for order, part in enumerate(parts):
        for copy_index in range(part.quantity):
            instances.append(PartInstance(part, copy_index, order))
    return instances


class Nester(ABC):
    """
    Base class for placement strategies.

    Subclasses implement ``_nest``; ``nest`` validates the inputs, refreshes
    derived part properties, times the run and logs a summary.
    """

    name = "nester"

    def __init__(self):
        self._shape_cache: Dict[Tuple[int, float, bool], OrientedShape] = {}

    def nest(
        self,
        parts: Iterable[Part],
        plate: Plate,
        settings: Optional[NestSettings] = None,
    ) -> NestingResult:
        """
        Place every part instance on the plate.

        Args:
            parts: Parts to nest; quantities are expanded into copies
            plate: Target plate
            settings: Nesting settings (environment defaults if omitted)

        Returns:
            Nesting result with placements in commit order and the
            instances that did not fit

        Raises:
            GeometryError: If a part has no contours
        """
        settings = settings or NestSettings.from_settings()
        parts = list(parts)
        for part in parts:
            part.recalculate()

        self._shape_cache = {}
        start_time = time.perf_counter()
        try:
            result = self._nest(parts, plate, settings)
        finally:
            self._shape_cache = {}
        result.processing_time = time.perf_counter() - start_time

        logger.info(
            f"{self.name}: placed {result.placed_count}, "
            f"unplaced {result.unplaced_count} on {plate.width:g}x{plate.height:g} "
            f"in {result.processing_time:.3f}s"
        )
        return result

    @abstractmethod
    def _nest(self, parts: List[Part], plate: Plate, settings: NestSettings) -> NestingResult:
        """Run the strategy on already-validated inputs."""

    def rotations_for(self, part: Part, settings: NestSettings) -> List[float]:
        return resolve_rotations(part.rotation_step_deg, settings)

    def orient(self, part: Part, rotation_deg: float, mirrored: bool) -> OrientedShape:
        """Oriented contours for a part, computed once per rotation per run."""
        key = (id(part), rotation_deg, mirrored)
        shape = self._shape_cache.get(key)
        if shape is None:
            contours = orient_contours(part.contours, part.bounds.min, rotation_deg, mirrored)
            shape = OrientedShape(
                contours=contours,
                bounds=contours_bounds(contours),
                rotation_deg=rotation_deg,
                mirrored=mirrored,
            )
            self._shape_cache[key] = shape
        return shape

    def _record_unplaced(self, result: NestingResult, instance: PartInstance) -> None:
        logger.warning(
            f"{self.name}: no room for '{instance.part.name}' "
            f"copy {instance.copy_index + 1}/{instance.part.quantity}"
        )
        result.unplaced.append(instance.part)

    def _record_placed(self, result: NestingResult, placement: Placement) -> None:
        logger.debug(
            f"{self.name}: placed '{placement.part.name}' at "
            f"({placement.bounds.min_x:.3f}, {placement.bounds.min_y:.3f}) "
            f"rot={placement.rotation_deg:g} mirrored={placement.mirrored}"
        )
        result.placements.append(placement)
