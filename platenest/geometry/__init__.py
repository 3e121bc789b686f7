"""Geometry primitives, contours and polygon predicates.

Provides the building blocks the nesters work with.
"""

from .primitives import GeometryError, Rect2D, Vec2
from .contour import Contour, contours_bounds, signed_area
from .segments import ArcSegment, LineSegment, Segment, SegmentKind, arc, line
from .contour_builder import (
    ContourBuilder,
    NoClosedRegionError,
    build_contours,
    trace_line_loop,
)
from .intersect import (
    contour_sets_intersect,
    contour_sets_within,
    point_in_polygon,
    polygon_distance,
    polygons_intersect,
    polygons_within,
    segments_intersect,
)

__all__ = [
    # Primitives
    "GeometryError",
    "Rect2D",
    "Vec2",
    # Contours
    "Contour",
    "contours_bounds",
    "signed_area",
    # Segments
    "ArcSegment",
    "LineSegment",
    "Segment",
    "SegmentKind",
    "arc",
    "line",
    # Reconstruction
    "ContourBuilder",
    "NoClosedRegionError",
    "build_contours",
    "trace_line_loop",
    # Predicates
    "contour_sets_intersect",
    "contour_sets_within",
    "point_in_polygon",
    "polygon_distance",
    "polygons_intersect",
    "polygons_within",
    "segments_intersect",
]
