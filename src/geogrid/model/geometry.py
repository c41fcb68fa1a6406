"""
Grid Geometry
=============
Builds the parallel and meridian segments covering the visible bounds.

Line values are multiples of the density inside [ceil(min / d) * d, max).
The upper bound is excluded so that a line sitting exactly on the boundary
is never emitted twice by neighbouring viewports.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

import numpy as np
import numpy.typing as npt

from geogrid.config import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from geogrid.model.types import GridLine, LineKind, Position, ViewportBounds

Segment = List[Position]


def grid_values(density: float, lower: float, upper: float) -> npt.NDArray[np.float64]:
    """
    Multiples of `density` in [ceil(lower / density) * density, upper).

    Args:
        density: Spacing between lines in degrees, must be positive.
        lower: Inclusive lower bound in degrees.
        upper: Exclusive upper bound in degrees.

    Returns:
        Ascending array of line values, empty for degenerate bounds.
    """
    if lower >= upper:
        return np.empty(0, dtype=np.float64)

    # Integer multipliers, a float arange can land on or past `upper`
    first = math.ceil(lower / density)
    last = math.ceil(upper / density) + 1
    values = np.arange(first, last, dtype=np.float64) * density
    return values[values < upper]


def parallel_values(density: float, bounds: ViewportBounds) -> npt.NDArray[np.float64]:
    if bounds.is_degenerate:
        return np.empty(0, dtype=np.float64)
    return grid_values(density, bounds.south, bounds.north)


def meridian_values(density: float, bounds: ViewportBounds) -> npt.NDArray[np.float64]:
    if bounds.is_degenerate:
        return np.empty(0, dtype=np.float64)
    return grid_values(density, bounds.west, bounds.east)


def create_parallels_geometry(density: float, bounds: ViewportBounds) -> List[Segment]:
    """Parallels spanning the full longitude range, one segment per latitude."""
    return [
        [(MIN_LONGITUDE, float(lat)), (MAX_LONGITUDE, float(lat))]
        for lat in parallel_values(density, bounds)
    ]


def create_meridians_geometry(density: float, bounds: ViewportBounds) -> List[Segment]:
    """Meridians running pole to pole, one segment per longitude."""
    return [
        [(float(lng), MIN_LATITUDE), (float(lng), MAX_LATITUDE)]
        for lng in meridian_values(density, bounds)
    ]


def create_grid_lines(density: float, bounds: ViewportBounds) -> List[GridLine]:
    """Parallels followed by meridians as typed GridLine records."""
    lines = [
        GridLine(kind=LineKind.PARALLEL, value=segment[0][1], segment=(segment[0], segment[1]))
        for segment in create_parallels_geometry(density, bounds)
    ]
    lines.extend(
        GridLine(kind=LineKind.MERIDIAN, value=segment[0][0], segment=(segment[0], segment[1]))
        for segment in create_meridians_geometry(density, bounds)
    )
    return lines


def create_multi_line_string(coordinates: Sequence[Segment]) -> Dict[str, Any]:
    """Wrap segments into a GeoJSON MultiLineString geometry."""
    return {
        "type": "MultiLineString",
        "coordinates": [list(segment) for segment in coordinates],
    }
