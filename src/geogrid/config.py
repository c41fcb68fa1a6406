"""
Configuration & Constants
=========================
This module serves as the central registry for grid constants and the
immutable plugin options.

Why is this file needed?
------------------------
1. Abstraction: Layer/source names and coordinate limits are defined once
   instead of being scattered through the controllers.
2. Validation: Options are checked a single time when the grid is created,
   afterwards they never change.

Exports:
    PLUGIN_PREFIX (str): Prefix of every source and layer id.
    GridStyle: Line paint options.
    GeoGridOptions: Validated, frozen plugin options.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from geogrid.model.density import grid_density
from geogrid.model.formatters import format_degrees

if TYPE_CHECKING:
    from geogrid.model.map_view import MapView


# Coordinate limits
MIN_LATITUDE: float = -90.0
MAX_LATITUDE: float = 90.0
MIN_LONGITUDE: float = -180.0
MAX_LONGITUDE: float = 180.0

# Source / Layer naming
PLUGIN_PREFIX: str = "geo-grid"
PARALLELS_LAYER_ID: str = f"{PLUGIN_PREFIX}_parallels"
PARALLELS_SOURCE_ID: str = f"{PLUGIN_PREFIX}_parallels_source"
MERIDIANS_LAYER_ID: str = f"{PLUGIN_PREFIX}_meridians"
MERIDIANS_SOURCE_ID: str = f"{PLUGIN_PREFIX}_meridians_source"

# Defaults
DEFAULT_LINE_COLOR: str = "#000000"
DEFAULT_LINE_WIDTH: float = 1.0
DEFAULT_ZOOM_LEVEL_RANGE: Tuple[float, float] = (0, 22)


@dataclass(frozen=True)
class GridStyle:
    color: str = DEFAULT_LINE_COLOR
    width: float = DEFAULT_LINE_WIDTH

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"GeoGrid: line width must be positive, got {self.width}.")


@dataclass(frozen=True)
class GeoGridOptions:
    """
    Options of a single GeoGrid instance.

    Attributes:
        map_view: The host map. Required.
        before_layer_id: Id of the layer the grid layers are inserted before.
            None places them on top of all layers.
        style: Line paint options.
        zoom_level_range: Inclusive (min, max) zoom range in which the grid
            is shown.
        grid_density: zoom level -> degrees between lines.
        format_labels: degrees -> label text.
    """
    map_view: Optional[MapView]
    before_layer_id: Optional[str] = None
    style: Optional[GridStyle] = field(default_factory=GridStyle)
    zoom_level_range: Tuple[float, float] = DEFAULT_ZOOM_LEVEL_RANGE
    grid_density: Optional[Callable[[int], float]] = grid_density
    format_labels: Optional[Callable[[float], str]] = format_degrees

    def __post_init__(self) -> None:
        if self.map_view is None:
            raise ValueError('GeoGrid: "map" option is required')

        # None means "use the default", as for omitted options
        if self.style is None:
            object.__setattr__(self, "style", GridStyle())
        if self.grid_density is None:
            object.__setattr__(self, "grid_density", grid_density)
        if self.format_labels is None:
            object.__setattr__(self, "format_labels", format_degrees)

        if len(self.zoom_level_range) != 2:
            raise ValueError(
                f"GeoGrid: zoom_level_range must be a (min, max) pair, got {self.zoom_level_range}."
            )
        min_zoom, max_zoom = self.zoom_level_range
        if min_zoom > max_zoom:
            raise ValueError(
                f"GeoGrid: zoom_level_range minimum {min_zoom} is above maximum {max_zoom}."
            )
        # Store as an immutable tuple even when a list was passed in
        object.__setattr__(self, "zoom_level_range", (min_zoom, max_zoom))

        if not callable(self.grid_density):
            raise TypeError("GeoGrid: grid_density must be callable.")
        if not callable(self.format_labels):
            raise TypeError("GeoGrid: format_labels must be callable.")

    @property
    def min_zoom(self) -> float:
        return self.zoom_level_range[0]

    @property
    def max_zoom(self) -> float:
        return self.zoom_level_range[1]

    def is_zoom_in_range(self, zoom: float) -> bool:
        return self.min_zoom <= zoom <= self.max_zoom
