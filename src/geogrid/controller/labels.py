"""
Label Placement
===============
Builds the list of coordinate labels for the current viewport.

Mercator: every visible parallel gets a left and a right label, every
visible meridian a top and a bottom label, no checks.

Globe: each label is placed independently. A label survives only when
1. part of its line is in front of the horizon,
2. the line actually crosses the screen edge, and
3. the crossing point itself is not occluded.
Meridian labels additionally drop out when the visible part of the
meridian ends before the viewport's own north/south bound, which happens
when the screen edge lies beyond a pole.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional

from geogrid.controller import calculations as calc
from geogrid.model.geometry import meridian_values, parallel_values
from geogrid.model.map_view import MapView
from geogrid.model.types import Anchor, LabelDescriptor, LngLat, ProjectionType, ViewportBounds

logger = logging.getLogger(__name__)


class LabelPlacer:
    def __init__(self, map_view: MapView, format_labels: Callable[[float], str]) -> None:
        self.map_view = map_view
        self.format_labels = format_labels

    def place(self, density: float) -> List[LabelDescriptor]:
        """Labels for every grid line visible at `density`, parallels first."""
        bounds = self.map_view.get_bounds()
        is_globe = self.map_view.get_projection() == ProjectionType.GLOBE

        labels: List[LabelDescriptor] = []
        for latitude in parallel_values(density, bounds):
            latitude = float(latitude)
            if is_globe:
                candidates = [self._left_label(latitude), self._right_label(latitude)]
                labels.extend(label for label in candidates if label is not None)
            else:
                labels.extend(self._planar_parallel_labels(latitude))

        for longitude in meridian_values(density, bounds):
            longitude = float(longitude)
            if is_globe:
                candidates = [self._top_label(longitude, bounds), self._bottom_label(longitude, bounds)]
                labels.extend(label for label in candidates if label is not None)
            else:
                labels.extend(self._planar_meridian_labels(longitude))

        logger.debug(f"Placed {len(labels)} labels ({'globe' if is_globe else 'mercator'}, {density}°).")
        return labels

    def _label(self, value: float, anchor: Anchor, x: float, y: float) -> LabelDescriptor:
        return LabelDescriptor(
            value=value,
            anchor=anchor,
            screen_x=x,
            screen_y=y,
            text=self.format_labels(value),
        )

    # ------------------------------------------------------------------------------
    # Mercator
    # ------------------------------------------------------------------------------

    def _planar_parallel_labels(self, latitude: float) -> List[LabelDescriptor]:
        y = self.map_view.project(LngLat(0.0, latitude)).y
        width = self.map_view.get_viewport_size().width
        return [
            self._label(latitude, Anchor.LEFT, 0.0, y),
            self._label(latitude, Anchor.RIGHT, float(width), y),
        ]

    def _planar_meridian_labels(self, longitude: float) -> List[LabelDescriptor]:
        x = self.map_view.project(LngLat(longitude, 0.0)).x
        height = self.map_view.get_viewport_size().height
        return [
            self._label(longitude, Anchor.TOP, x, 0.0),
            self._label(longitude, Anchor.BOTTOM, x, float(height)),
        ]

    # ------------------------------------------------------------------------------
    # Globe
    # ------------------------------------------------------------------------------

    def _left_label(self, latitude: float) -> Optional[LabelDescriptor]:
        if calc.left_most_not_occluded_longitude(self.map_view, latitude) is None:
            return None

        edge_lng = calc.left_edge_longitude(self.map_view, latitude)
        if edge_lng is None:
            return None

        crossing = LngLat(edge_lng, latitude)
        if self.map_view.is_location_occluded(crossing):
            return None

        y = self.map_view.project(crossing).y
        return self._label(latitude, Anchor.LEFT, 0.0, y)

    def _right_label(self, latitude: float) -> Optional[LabelDescriptor]:
        if calc.right_most_not_occluded_longitude(self.map_view, latitude) is None:
            return None

        edge_lng = calc.right_edge_longitude(self.map_view, latitude)
        if edge_lng is None:
            return None

        crossing = LngLat(edge_lng, latitude)
        if self.map_view.is_location_occluded(crossing):
            return None

        y = self.map_view.project(crossing).y
        width = self.map_view.get_viewport_size().width
        return self._label(latitude, Anchor.RIGHT, float(width), y)

    def _top_label(self, longitude: float, bounds: ViewportBounds) -> Optional[LabelDescriptor]:
        top_most = calc.top_most_not_occluded_latitude(self.map_view, longitude)
        if top_most is None:
            return None

        # Top of the screen is on the far side of the north pole
        if math.fmod(top_most, 90.0) < bounds.north:
            return None

        edge_lat = calc.top_edge_latitude(self.map_view, longitude)
        if edge_lat is None:
            return None

        crossing = LngLat(longitude, edge_lat)
        if self.map_view.is_location_occluded(crossing):
            return None

        x = self.map_view.project(crossing).x
        return self._label(longitude, Anchor.TOP, x, 0.0)

    def _bottom_label(self, longitude: float, bounds: ViewportBounds) -> Optional[LabelDescriptor]:
        bottom_most = calc.bottom_most_not_occluded_latitude(self.map_view, longitude)
        if bottom_most is None:
            return None

        # Bottom of the screen is on the far side of the south pole
        if math.fmod(bottom_most, -90.0) > bounds.south:
            return None

        edge_lat = calc.bottom_edge_latitude(self.map_view, longitude)
        if edge_lat is None:
            return None

        crossing = LngLat(longitude, edge_lat)
        if self.map_view.is_location_occluded(crossing):
            return None

        x = self.map_view.project(crossing).x
        height = self.map_view.get_viewport_size().height
        return self._label(longitude, Anchor.BOTTOM, x, float(height))
