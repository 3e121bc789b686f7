"""
Grid nesters.

Both nesters sweep candidate positions on a regular grid and commit the
first one that fits (first fit, not best fit):

- instances are ordered largest net area first, ties in input order
- rotations form the outer loop, then rows (y ascending), then columns
  (x ascending)
- the placed box must lie inside the plate shrunk by clearance + kerf

``GridNester`` checks candidates against committed parts with exact polygon
tests after pruning by spacing-inflated boxes. ``OccupancyGridNester``
only reserves grid cells for each placement's box plus spacing: faster,
coarser, never exact.
"""

from typing import Iterator, List, Optional, Tuple

from ..geometry.primitives import Rect2D, Vec2
from ..utils import get_logger
from .arena import OccupancyGrid, PlacementArena
from .base import Nester, OrientedShape, PartInstance, expand_instances
from .models import NestingResult, Part, Placement, Plate
from .settings import NestSettings

logger = get_logger("nesting.grid_nester")

EDGE_TOLERANCE = 1e-6


def order_by_area(instances: List[PartInstance]) -> List[PartInstance]:
    """Largest net area first; stable, so ties keep input order."""
    return sorted(instances, key=lambda inst: inst.part.area, reverse=True)


def grid_positions(
    shape_bounds: Rect2D,
    plate: Plate,
    step: float,
) -> Iterator[Tuple[int, int, float, float]]:
    """
    Candidate box minimums, rows outer and columns inner.

    Yields:
        (column, row, x, y) for every grid point where the box still fits
        inside the plate's full extent
    """
    width = shape_bounds.width
    height = shape_bounds.height

    row = 0
    while row * step + height <= plate.height + EDGE_TOLERANCE:
        y = row * step
        column = 0
        while column * step + width <= plate.width + EDGE_TOLERANCE:
            yield column, row, column * step, y
            column += 1
        row += 1


class GridNester(Nester):
    """
    Exact grid nester.

    Usage:
        nester = GridNester()
        result = nester.nest(parts, Plate(1000, 500), NestSettings(grid_step=2))
        for placement in result.placements:
            draw(placement.world_contours())
    """

    name = "grid"

    def _nest(self, parts: List[Part], plate: Plate, settings: NestSettings) -> NestingResult:
        result = NestingResult()
        arena = PlacementArena(spacing=settings.spacing)
        usable = plate.usable_bounds(settings.spacing)

        for instance in order_by_area(expand_instances(parts)):
            placement = self._place(instance, plate, usable, settings, arena)
            if placement is None:
                self._record_unplaced(result, instance)
            else:
                self._record_placed(result, placement)

        return result

    def _place(
        self,
        instance: PartInstance,
        plate: Plate,
        usable: Rect2D,
        settings: NestSettings,
        arena: PlacementArena,
    ) -> Optional[Placement]:
        mirrored = instance.is_mirrored(settings)

        for rotation in self.rotations_for(instance.part, settings):
            shape = self.orient(instance.part, rotation, mirrored)

            for _, _, x, y in grid_positions(shape.bounds, plate, settings.grid_step):
                translation = shape.translation_for(x, y)
                bounds = shape.bounds.translate(translation)
                if not usable.contains_rect(bounds, EDGE_TOLERANCE):
                    continue

                contours = shape.placed(translation)
                if arena.collides(bounds, contours):
                    continue

                placement = self._make_placement(instance, shape, translation, bounds)
                arena.commit(placement, contours)
                return placement

        return None

    @staticmethod
    def _make_placement(
        instance: PartInstance,
        shape: OrientedShape,
        translation: Vec2,
        bounds: Rect2D,
    ) -> Placement:
        return Placement(
            part=instance.part,
            translation=translation,
            rotation_deg=shape.rotation_deg,
            bounds=bounds,
            mirrored=shape.mirrored,
            copy_index=instance.copy_index,
        )


class OccupancyGridNester(GridNester):
    """
    Coarse grid nester using cell occupancy instead of polygon tests.

    Each placement reserves every cell under its box grown by clearance +
    kerf, so parts keep the same spacing as with the exact nester, only
    less tightly packed.
    """

    name = "occupancy"

    def _nest(self, parts: List[Part], plate: Plate, settings: NestSettings) -> NestingResult:
        result = NestingResult()
        grid = OccupancyGrid(plate.width, plate.height, settings.grid_step)
        usable = plate.usable_bounds(settings.spacing)

        for instance in order_by_area(expand_instances(parts)):
            placement = self._place_cells(instance, plate, usable, settings, grid)
            if placement is None:
                self._record_unplaced(result, instance)
            else:
                self._record_placed(result, placement)

        logger.debug(f"occupancy: {grid.occupied_count()} cells reserved")
        return result

    def _place_cells(
        self,
        instance: PartInstance,
        plate: Plate,
        usable: Rect2D,
        settings: NestSettings,
        grid: OccupancyGrid,
    ) -> Optional[Placement]:
        mirrored = instance.is_mirrored(settings)

        for rotation in self.rotations_for(instance.part, settings):
            shape = self.orient(instance.part, rotation, mirrored)
            cells_x = grid.cells_for(shape.bounds.width + settings.spacing)
            cells_y = grid.cells_for(shape.bounds.height + settings.spacing)

            for column, row, x, y in grid_positions(shape.bounds, plate, settings.grid_step):
                translation = shape.translation_for(x, y)
                bounds = shape.bounds.translate(translation)
                if not usable.contains_rect(bounds, EDGE_TOLERANCE):
                    continue
                if not grid.is_free(column, row, cells_x, cells_y):
                    continue

                grid.mark(column, row, cells_x, cells_y)
                return self._make_placement(instance, shape, translation, bounds)

        return None
