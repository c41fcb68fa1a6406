"""
Camera Transforms
=================
Geographic <-> screen conversions for the two supported projections.

Screen space has its origin in the top-left corner, x to the right and
y downwards. Bearing rotates the map around the viewport centre.

Classes:
    MapTransform: Shared camera state and bearing rotation.
    MercatorTransform: Web Mercator (planar), never occluded.
    GlobeTransform: Orthographic sphere with horizon occlusion.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import math
from typing import List, Tuple

import numpy as np

from geogrid.config import MAX_LATITUDE, MIN_LATITUDE
from geogrid.model.types import LngLat, ScreenPoint, ViewportBounds

TILE_SIZE: float = 512.0
MAX_MERCATOR_LATITUDE: float = 85.051129
# Samples per viewport edge when estimating globe bounds
BOUNDS_SAMPLES_PER_EDGE: int = 32


def world_size(zoom: float) -> float:
    return TILE_SIZE * 2.0 ** zoom


def wrap_longitude(lng: float, center: float = 0.0) -> float:
    """Shift `lng` by whole turns into [center - 180, center + 180)."""
    return (lng - center + 180.0) % 360.0 - 180.0 + center


@dataclass(frozen=True)
class MapTransform(ABC):
    center: LngLat
    zoom: float
    bearing: float
    width: int
    height: int

    # ------------------------------------------------------------------------------
    # Rotation helpers
    # ------------------------------------------------------------------------------

    def _to_screen(self, dx: float, dy: float) -> ScreenPoint:
        """Offset from the viewport centre (north-up) -> rotated screen point."""
        angle = math.radians(-self.bearing)
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        rx = dx * cos_a - dy * sin_a
        ry = dx * sin_a + dy * cos_a
        return ScreenPoint(self.width / 2.0 + rx, self.height / 2.0 + ry)

    def _from_screen(self, point: ScreenPoint) -> Tuple[float, float]:
        """Rotated screen point -> offset from the viewport centre (north-up)."""
        angle = math.radians(self.bearing)
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        dx = point.x - self.width / 2.0
        dy = point.y - self.height / 2.0
        return dx * cos_a - dy * sin_a, dx * sin_a + dy * cos_a

    def _corners(self) -> List[ScreenPoint]:
        return [
            ScreenPoint(0.0, 0.0),
            ScreenPoint(float(self.width), 0.0),
            ScreenPoint(float(self.width), float(self.height)),
            ScreenPoint(0.0, float(self.height)),
        ]

    # ------------------------------------------------------------------------------
    # Projection API
    # ------------------------------------------------------------------------------

    @abstractmethod
    def project(self, lnglat: LngLat) -> ScreenPoint:
        ...

    @abstractmethod
    def unproject(self, point: ScreenPoint) -> LngLat:
        ...

    @abstractmethod
    def is_location_occluded(self, lnglat: LngLat) -> bool:
        ...

    @abstractmethod
    def get_bounds(self) -> ViewportBounds:
        ...


@dataclass(frozen=True)
class MercatorTransform(MapTransform):

    @staticmethod
    def mercator_x(lng: float, size: float) -> float:
        return (180.0 + lng) / 360.0 * size

    @staticmethod
    def mercator_y(lat: float, size: float) -> float:
        lat = max(min(lat, MAX_MERCATOR_LATITUDE), -MAX_MERCATOR_LATITUDE)
        y = math.degrees(math.log(math.tan(math.pi / 4.0 + math.radians(lat) / 2.0)))
        return (180.0 - y) / 360.0 * size

    def project(self, lnglat: LngLat) -> ScreenPoint:
        size = world_size(self.zoom)
        dx = self.mercator_x(lnglat.lng, size) - self.mercator_x(self.center.lng, size)
        dy = self.mercator_y(lnglat.lat, size) - self.mercator_y(self.center.lat, size)
        return self._to_screen(dx, dy)

    def unproject(self, point: ScreenPoint) -> LngLat:
        size = world_size(self.zoom)
        dx, dy = self._from_screen(point)
        x = self.mercator_x(self.center.lng, size) + dx
        y = self.mercator_y(self.center.lat, size) + dy
        lng = x / size * 360.0 - 180.0
        y2 = 180.0 - y / size * 360.0
        lat = 360.0 / math.pi * math.atan(math.exp(math.radians(y2))) - 90.0
        return LngLat(lng, lat)

    def is_location_occluded(self, lnglat: LngLat) -> bool:
        return False

    def get_bounds(self) -> ViewportBounds:
        corners = [self.unproject(p) for p in self._corners()]
        lngs = [c.lng for c in corners]
        lats = [c.lat for c in corners]
        return ViewportBounds(west=min(lngs), south=min(lats), east=max(lngs), north=max(lats))


@dataclass(frozen=True)
class GlobeTransform(MapTransform):

    @property
    def radius(self) -> float:
        """Globe radius in pixels."""
        return world_size(self.zoom) / (2.0 * math.pi)

    def _cos_c(self, lnglat: LngLat) -> float:
        """Cosine of the angular distance between the point and the centre."""
        phi = math.radians(lnglat.lat)
        phi0 = math.radians(self.center.lat)
        d_lambda = math.radians(lnglat.lng - self.center.lng)
        return math.sin(phi0) * math.sin(phi) + math.cos(phi0) * math.cos(phi) * math.cos(d_lambda)

    def project(self, lnglat: LngLat) -> ScreenPoint:
        r = self.radius
        phi = math.radians(lnglat.lat)
        phi0 = math.radians(self.center.lat)
        d_lambda = math.radians(lnglat.lng - self.center.lng)

        x = r * math.cos(phi) * math.sin(d_lambda)
        y = r * (math.cos(phi0) * math.sin(phi) - math.sin(phi0) * math.cos(phi) * math.cos(d_lambda))
        return self._to_screen(x, -y)

    def unproject(self, point: ScreenPoint) -> LngLat:
        r = self.radius
        dx, dy = self._from_screen(point)
        x, y = dx, -dy
        rho = math.hypot(x, y)
        if rho < 1e-12:
            return self.center

        # Pixels off the disc resolve to the horizon
        c = math.asin(min(rho / r, 1.0))
        phi0 = math.radians(self.center.lat)
        sin_c, cos_c = math.sin(c), math.cos(c)

        lat = math.asin(max(-1.0, min(1.0, cos_c * math.sin(phi0) + y * sin_c * math.cos(phi0) / rho)))
        lng = self.center.lng + math.degrees(
            math.atan2(x * sin_c, rho * cos_c * math.cos(phi0) - y * sin_c * math.sin(phi0))
        )
        return LngLat(wrap_longitude(lng, self.center.lng), math.degrees(lat))

    def is_location_occluded(self, lnglat: LngLat) -> bool:
        return self._cos_c(lnglat) < 0.0

    def _is_on_screen(self, lnglat: LngLat) -> bool:
        if self.is_location_occluded(lnglat):
            return False
        p = self.project(lnglat)
        return 0.0 <= p.x <= self.width and 0.0 <= p.y <= self.height

    def get_bounds(self) -> ViewportBounds:
        ts = np.linspace(0.0, 1.0, BOUNDS_SAMPLES_PER_EDGE)
        w, h = float(self.width), float(self.height)
        samples = [ScreenPoint(w / 2.0, h / 2.0)]
        for t in ts:
            samples.extend((
                ScreenPoint(t * w, 0.0),
                ScreenPoint(t * w, h),
                ScreenPoint(0.0, t * h),
                ScreenPoint(w, t * h),
            ))

        points = [self.unproject(p) for p in samples]
        lngs = [wrap_longitude(p.lng, self.center.lng) for p in points]
        lats = [p.lat for p in points]
        west, east = min(lngs), max(lngs)
        south, north = min(lats), max(lats)

        if self._is_on_screen(LngLat(self.center.lng, MAX_LATITUDE)):
            north = MAX_LATITUDE
            west, east = self.center.lng - 180.0, self.center.lng + 180.0
        if self._is_on_screen(LngLat(self.center.lng, MIN_LATITUDE)):
            south = MIN_LATITUDE
            west, east = self.center.lng - 180.0, self.center.lng + 180.0

        return ViewportBounds(west=west, south=south, east=east, north=north)
