"""
Grid Density
Maps the integer zoom level to the spacing between grid lines in degrees.
"""
from typing import Tuple

# Index = floored zoom level
GRID_DENSITY_BY_ZOOM: Tuple[float, ...] = (
    30.0, 15.0, 10.0, 7.5, 5.0, 3.0, 2.0, 1.5,
    0.75, 0.5, 0.25, 0.125, 0.075, 0.05, 0.025,
)
DEFAULT_GRID_DENSITY: float = 30.0


def grid_density(zoom: int) -> float:
    """
    Degrees between adjacent grid lines for the given zoom level.

    Zoom levels outside the table fall back to the coarsest spacing.
    """
    if 0 <= zoom < len(GRID_DENSITY_BY_ZOOM):
        return GRID_DENSITY_BY_ZOOM[int(zoom)]
    return DEFAULT_GRID_DENSITY
