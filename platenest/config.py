"""Configuration management for platenest."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NEST_",
        extra="ignore",
    )

    # Nesting defaults
    grid_step: float = Field(default=5.0, gt=0, description="Grid step in geometry units")
    clearance: float = Field(default=1.0, ge=0, description="Gap between parts and plate edge")
    kerf: float = Field(default=1.5, ge=0, description="Cut width added to spacing")
    allow_mirror: bool = Field(default=False, description="Mirror every other copy of a part")
    allowed_rotations: Optional[List[float]] = Field(
        default=None,
        description="Explicit rotations in degrees as a JSON list, e.g. [0, 90]",
    )
    algorithm: str = Field(default="grid", description="Nester to use: grid, occupancy or strip")

    # Contour reconstruction
    arc_resolution: int = Field(default=24, ge=1, description="Minimum steps per sampled arc")
    circle_segments: int = Field(default=32, ge=3, description="Segments for circle approximation")
    max_arc_segments: int = Field(default=256, ge=1, description="Cap on adaptive arc steps")
    arc_tolerance: float = Field(default=0.05, gt=0, description="Chord length for adaptive arc sampling")
    join_tolerance: float = Field(default=1e-5, gt=0, description="Endpoint match tolerance")

    # Logging
    log_level: str = Field(default="INFO", description="Log level for the CLI")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings]) -> None:
    """Override global settings. Passing None resets to the environment."""
    global _settings
    _settings = settings
