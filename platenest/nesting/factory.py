"""Nester selection and convenience entry points."""

from typing import Iterable, Optional, Union

from .base import Nester
from .grid_nester import GridNester, OccupancyGridNester
from .models import NestingResult, Part, Plate
from .settings import NestAlgorithm, NestSettings
from .strip_nester import StripNester

NESTERS = {
    NestAlgorithm.GRID: GridNester,
    NestAlgorithm.OCCUPANCY: OccupancyGridNester,
    NestAlgorithm.STRIP: StripNester,
}


def create_nester(algorithm: Union[str, NestAlgorithm] = NestAlgorithm.GRID) -> Nester:
    """Create a nester for the given algorithm."""
    return NESTERS[NestAlgorithm(algorithm)]()


def nest_parts(
    parts: Iterable[Part],
    plate: Plate,
    settings: Optional[NestSettings] = None,
) -> NestingResult:
    """
    Nest parts on a plate with the algorithm chosen in the settings.

    Args:
        parts: Parts to place
        plate: Target plate
        settings: Nesting settings (environment defaults if omitted)

    Returns:
        Nesting result
    """
    settings = settings or NestSettings.from_settings()
    return create_nester(settings.algorithm).nest(parts, plate, settings)
