"""Strip (row-by-row) nester.

Fills rows left to right with parts ordered tallest first. No rotation and
no collision tests: each placement reserves its exact width in the row and
the tallest part sets the row height.
"""

from typing import List

from ..utils import get_logger
from .base import Nester, expand_instances
from .models import NestingResult, Part, Placement, Plate
from .settings import NestSettings

logger = get_logger("nesting.strip_nester")

EDGE_TOLERANCE = 1e-9


class StripNester(Nester):
    """
    Row-based nester using part bounding boxes.

    Parts are separated, and kept off the plate edge, by the clearance.
    When an instance does not fit even in a fresh row it is reported as
    unplaced and the cursor is left where it was, so smaller parts later in
    the order can still use the current row.
    """

    name = "strip"

    def _nest(self, parts: List[Part], plate: Plate, settings: NestSettings) -> NestingResult:
        result = NestingResult()
        clearance = settings.clearance

        max_x = plate.width - clearance + EDGE_TOLERANCE
        max_y = plate.height - clearance + EDGE_TOLERANCE

        x = clearance
        y = clearance
        row_height = 0.0

        # Tallest first; sorted() is stable so equal heights keep input order
        instances = sorted(
            expand_instances(parts),
            key=lambda inst: inst.part.bounds.height,
            reverse=True,
        )

        for instance in instances:
            shape = self.orient(instance.part, 0.0, instance.is_mirrored(settings))
            width = shape.bounds.width
            height = shape.bounds.height

            if x + width <= max_x and y + height <= max_y:
                px, py = x, y
                new_row = False
            elif clearance + width <= max_x and y + row_height + clearance + height <= max_y:
                px, py = clearance, y + row_height + clearance
                new_row = True
            else:
                self._record_unplaced(result, instance)
                continue

            translation = shape.translation_for(px, py)
            placement = Placement(
                part=instance.part,
                translation=translation,
                rotation_deg=0.0,
                bounds=shape.bounds.translate(translation),
                mirrored=shape.mirrored,
                copy_index=instance.copy_index,
            )
            self._record_placed(result, placement)

            if new_row:
                logger.debug(f"strip: new row at y={py:.3f}")
                y = py
                row_height = 0.0
            x = px + width + clearance
            row_height = max(row_height, height)

        return result
