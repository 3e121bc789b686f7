"""Nesting module for placing flat parts on a rectangular plate.

Provides exact grid, occupancy grid and strip nesters.
"""

from .arena import OccupancyGrid, PlacementArena
from .base import Nester, PartInstance, expand_instances
from .factory import create_nester, nest_parts
from .grid_nester import GridNester, OccupancyGridNester
from .models import NestingResult, Part, Placement, Plate
from .settings import NestAlgorithm, NestSettings, resolve_rotations
from .strip_nester import StripNester

__all__ = [
    "GridNester",
    "OccupancyGridNester",
    "StripNester",
    "Nester",
    "NestAlgorithm",
    "NestSettings",
    "NestingResult",
    "OccupancyGrid",
    "Part",
    "PartInstance",
    "Placement",
    "PlacementArena",
    "Plate",
    "create_nester",
    "expand_instances",
    "nest_parts",
    "resolve_rotations",
]
