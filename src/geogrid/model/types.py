"""
Grid Data Types
===============
Small value objects shared by the model, the controllers and the view.

Classes:
    LngLat: Geographic position in degrees.
    ScreenPoint: Pixel position, origin top-left, y pointing down.
    ViewportSize: Pixel size of the map viewport.
    ViewportBounds: Geographic rectangle currently visible on screen.
    GridLine: A single parallel or meridian segment.
    LabelDescriptor: A positioned coordinate label.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Tuple


class ProjectionType(StrEnum):
    MERCATOR = "mercator"
    GLOBE = "globe"


class LineKind(StrEnum):
    PARALLEL = "parallel"
    MERIDIAN = "meridian"


class Anchor(StrEnum):
    """Screen side a label is pinned to."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @property
    def is_horizontal_edge(self) -> bool:
        return self in (Anchor.TOP, Anchor.BOTTOM)


@dataclass(frozen=True)
class LngLat:
    lng: float
    lat: float

    def as_tuple(self) -> Tuple[float, float]:
        return self.lng, self.lat


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class ViewportSize:
    width: int
    height: int


@dataclass(frozen=True)
class ViewportBounds:
    west: float
    south: float
    east: float
    north: float

    @property
    def is_degenerate(self) -> bool:
        return self.south >= self.north or self.west >= self.east


# GeoJSON style position: (longitude, latitude)
Position = Tuple[float, float]


@dataclass(frozen=True)
class GridLine:
    kind: LineKind
    value: float
    segment: Tuple[Position, Position]


@dataclass(frozen=True)
class LabelDescriptor:
    """
    A label pinned to one screen edge.

    `screen_x`/`screen_y` are the absolute screen coordinates of the anchor
    point, e.g. a right label sits at x == viewport width.
    """
    value: float
    anchor: Anchor
    screen_x: float
    screen_y: float
    text: str
