"""Command line interface for platenest."""

from .main import cli

__all__ = ["cli"]
