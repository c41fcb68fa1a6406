"""
Edge & Occlusion Calculations (Globe)
=====================================
Locate where grid lines leave the screen and how far they stay in front of
the globe's horizon.

Two kinds of searches live here:

1. Occlusion scans walk from the map centre towards a pole (or sideways)
   and return the most extreme sample that is NOT occluded. The scan keeps
   going after an occluded sample, so a later visible sample still wins.
2. Edge searches walk 1° at a time from the centre until the projected
   point crosses a screen edge. Some lines never cross an edge; after
   EDGE_SEARCH_MAX_STEPS the search gives up and returns None.
"""
from __future__ import annotations

import math
from typing import Optional

import numpy as np

from geogrid.config import MAX_LATITUDE, MIN_LATITUDE
from geogrid.model.map_view import MapView
from geogrid.model.types import LngLat

# Occlusion scan limits
OCCLUSION_SCAN_MAX_LATITUDE: float = 85.0
OCCLUSION_SCAN_LONGITUDE_SPAN: float = 90.0
OCCLUSION_SCAN_LONGITUDE_STEP: float = 0.5
FINE_LATITUDE_STEP_MIN_ZOOM: float = 12.0
FINE_LATITUDE_STEP: float = 0.01
COARSE_LATITUDE_STEP: float = 1.0

# Edge search limits
EDGE_SEARCH_STEP: float = 1.0
EDGE_SEARCH_MAX_STEPS: int = 180


def _latitude_step(map_view: MapView) -> float:
    if map_view.get_zoom() > FINE_LATITUDE_STEP_MIN_ZOOM:
        return FINE_LATITUDE_STEP
    return COARSE_LATITUDE_STEP


def _scan_samples(start: float, stop: float, step: float) -> np.ndarray:
    """start, start + step, ... strictly before `stop`; `step` may be negative."""
    # Integer multipliers, a float arange can land on `stop`
    count = max(math.ceil((stop - start) / step) + 1, 0)
    samples = start + np.arange(count, dtype=np.float64) * step
    if step > 0:
        return samples[samples < stop]
    return samples[samples > stop]


def _last_visible_latitude(map_view: MapView, longitude: float, latitudes: np.ndarray) -> Optional[float]:
    result: Optional[float] = None
    for latitude in latitudes:
        if not map_view.is_location_occluded(LngLat(longitude, float(latitude))):
            result = float(latitude)
    return result


def _last_visible_longitude(map_view: MapView, latitude: float, longitudes: np.ndarray) -> Optional[float]:
    result: Optional[float] = None
    for longitude in longitudes:
        if not map_view.is_location_occluded(LngLat(float(longitude), latitude)):
            result = float(longitude)
    return result


# ------------------------------------------------------------------------------
# Occlusion scans
# ------------------------------------------------------------------------------

def top_most_not_occluded_latitude(map_view: MapView, longitude: float) -> Optional[float]:
    """Northern-most visible latitude on the meridian, scanning up from the centre."""
    center_lat = map_view.get_center().lat
    latitudes = _scan_samples(center_lat, OCCLUSION_SCAN_MAX_LATITUDE, _latitude_step(map_view))
    return _last_visible_latitude(map_view, longitude, latitudes)


def bottom_most_not_occluded_latitude(map_view: MapView, longitude: float) -> Optional[float]:
    """Southern-most visible latitude on the meridian, scanning down from the centre."""
    center_lat = map_view.get_center().lat
    latitudes = _scan_samples(center_lat, -OCCLUSION_SCAN_MAX_LATITUDE, -_latitude_step(map_view))
    return _last_visible_latitude(map_view, longitude, latitudes)


def left_most_not_occluded_longitude(map_view: MapView, latitude: float) -> Optional[float]:
    """Western-most visible longitude on the parallel, within 90° of the centre."""
    center_lng = map_view.get_center().lng
    longitudes = _scan_samples(
        center_lng, center_lng - OCCLUSION_SCAN_LONGITUDE_SPAN, -OCCLUSION_SCAN_LONGITUDE_STEP
    )
    return _last_visible_longitude(map_view, latitude, longitudes)


def right_most_not_occluded_longitude(map_view: MapView, latitude: float) -> Optional[float]:
    """Eastern-most visible longitude on the parallel, within 90° of the centre."""
    center_lng = map_view.get_center().lng
    longitudes = _scan_samples(
        center_lng, center_lng + OCCLUSION_SCAN_LONGITUDE_SPAN, OCCLUSION_SCAN_LONGITUDE_STEP
    )
    return _last_visible_longitude(map_view, latitude, longitudes)


# ------------------------------------------------------------------------------
# Screen edge searches
# ------------------------------------------------------------------------------

def left_edge_longitude(map_view: MapView, latitude: float) -> Optional[float]:
    """Longitude where the parallel reaches x <= 0, or None."""
    lng = map_view.get_center().lng
    for _ in range(EDGE_SEARCH_MAX_STEPS):
        lng -= EDGE_SEARCH_STEP
        if map_view.project(LngLat(lng, latitude)).x <= 0:
            return lng
    return None


def right_edge_longitude(map_view: MapView, latitude: float) -> Optional[float]:
    """Longitude where the parallel reaches x >= viewport width, or None."""
    lng = map_view.get_center().lng
    screen_width = map_view.get_viewport_size().width
    for _ in range(EDGE_SEARCH_MAX_STEPS):
        lng += EDGE_SEARCH_STEP
        if map_view.project(LngLat(lng, latitude)).x >= screen_width:
            return lng
    return None


def top_edge_latitude(map_view: MapView, longitude: float) -> Optional[float]:
    """Latitude where the meridian reaches y <= 0, or None (never past the pole)."""
    lat = map_view.get_center().lat
    for _ in range(EDGE_SEARCH_MAX_STEPS):
        lat += EDGE_SEARCH_STEP
        if lat > MAX_LATITUDE:
            return None
        if map_view.project(LngLat(longitude, lat)).y <= 0:
            return lat
    return None


def bottom_edge_latitude(map_view: MapView, longitude: float) -> Optional[float]:
    """Latitude where the meridian reaches y >= viewport height, or None (never past the pole)."""
    lat = map_view.get_center().lat
    screen_height = map_view.get_viewport_size().height
    for _ in range(EDGE_SEARCH_MAX_STEPS):
        lat -= EDGE_SEARCH_STEP
        if lat < MIN_LATITUDE:
            return None
        if map_view.project(LngLat(longitude, lat)).y >= screen_height:
            return lat
    return None
