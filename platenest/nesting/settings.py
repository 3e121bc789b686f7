"""Nesting settings and per-part rotation resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..config import get_settings

FULL_TURN = 360.0


class NestAlgorithm(str, Enum):
    """Available placement strategies."""
    GRID = "grid"  # Exact polygon collision on a grid sweep
    OCCUPANCY = "occupancy"  # Coarse cell occupancy
    STRIP = "strip"  # Row-by-row, no rotation


@dataclass
class NestSettings:
    """Configuration for a nesting run."""
    grid_step: float = 5.0  # Candidate spacing in geometry units
    clearance: float = 1.0  # Gap between parts and plate edge, not incl. kerf
    kerf: float = 1.5  # Cut width

    # Explicit rotations in degrees; None derives them from each part's step
    allowed_rotations: Optional[List[float]] = None
    allow_mirror: bool = False

    algorithm: NestAlgorithm = NestAlgorithm.GRID

    def __post_init__(self):
        if self.grid_step <= 0:
            raise ValueError(f"grid_step must be positive, got {self.grid_step}")
        if self.clearance < 0:
            raise ValueError(f"clearance must be >= 0, got {self.clearance}")
        if self.kerf < 0:
            raise ValueError(f"kerf must be >= 0, got {self.kerf}")
        self.algorithm = NestAlgorithm(self.algorithm)
        if self.allowed_rotations is not None:
            self.allowed_rotations = [float(r) for r in self.allowed_rotations]

    @property
    def spacing(self) -> float:
        """Total gap kept around each part."""
        return self.clearance + self.kerf

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "grid_step": self.grid_step,
            "clearance": self.clearance,
            "kerf": self.kerf,
            "allowed_rotations": self.allowed_rotations,
            "allow_mirror": self.allow_mirror,
            "algorithm": self.algorithm.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NestSettings":
        """Create from dictionary."""
        return cls(
            grid_step=data.get("grid_step", 5.0),
            clearance=data.get("clearance", 1.0),
            kerf=data.get("kerf", 1.5),
            allowed_rotations=data.get("allowed_rotations"),
            allow_mirror=data.get("allow_mirror", False),
            algorithm=NestAlgorithm(data.get("algorithm", "grid")),
        )

    @classmethod
    def from_settings(cls) -> "NestSettings":
        """Create from the environment-driven application settings."""
        settings = get_settings()
        return cls(
            grid_step=settings.grid_step,
            clearance=settings.clearance,
            kerf=settings.kerf,
            allowed_rotations=settings.allowed_rotations,
            allow_mirror=settings.allow_mirror,
            algorithm=NestAlgorithm(settings.algorithm),
        )


def resolve_rotations(rotation_step_deg: float, settings: NestSettings) -> List[float]:
    """
    Rotations to try for a part, in degrees and ascending order.

    An explicit list in the settings wins. Otherwise a step <= 0 means 0°
    only, and any other step yields every multiple of it below 360°.
    """
    if settings.allowed_rotations:
        return list(settings.allowed_rotations)

    if rotation_step_deg <= 0:
        return [0.0]

    rotations = []
    k = 0
    while True:
        angle = k * rotation_step_deg
        # 360 is the same orientation as 0
        if angle >= FULL_TURN - 1e-9:
            break
        rotations.append(angle)
        k += 1
    return rotations
