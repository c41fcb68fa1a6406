"""
In-Memory Map
=============
A complete `MapView` that keeps its camera, sources, layers and label
containers in plain Python objects.

Why is this file needed?
------------------------
1. Rendering: The PyVista view subclasses it and only adds drawing.
2. Headless use: The grid (and its tests) can run without any window.

Classes:
    ListLabelContainer: Label container storing descriptors in a list.
    InMemoryMap: Camera state + event dispatch + source/layer registry.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from geogrid.model.map_view import Disposer, EventEmitter, Handler, LayerSpec, MapEvent
from geogrid.model.transform import GlobeTransform, MapTransform, MercatorTransform
from geogrid.model.types import (
    LabelDescriptor, LngLat, ProjectionType, ScreenPoint, ViewportBounds, ViewportSize
)

logger = logging.getLogger(__name__)

MIN_ZOOM: float = 0.0
MAX_ZOOM: float = 22.0


class ListLabelContainer:
    """Label container that only records what it was given."""

    def __init__(self, owner: Optional[InMemoryMap] = None) -> None:
        self._owner = owner
        self._labels: List[LabelDescriptor] = []
        self._visible: bool = True
        self.destroyed: bool = False

    @property
    def labels(self) -> Tuple[LabelDescriptor, ...]:
        return tuple(self._labels)

    def clear(self) -> None:
        self._labels.clear()

    def append(self, label: LabelDescriptor) -> None:
        self._labels.append(label)

    def set_visible(self, visible: bool) -> None:
        self._visible = visible

    def is_visible(self) -> bool:
        return self._visible

    def destroy(self) -> None:
        self._labels.clear()
        self.destroyed = True
        if self._owner is not None:
            self._owner._detach_label_container(self)
            self._owner = None


class InMemoryMap:
    def __init__(
        self,
        center: LngLat = LngLat(0.0, 0.0),
        zoom: float = 0.0,
        bearing: float = 0.0,
        projection: ProjectionType = ProjectionType.MERCATOR,
        width: int = 800,
        height: int = 600,
    ) -> None:
        self._center = center
        self._zoom = self._clamp_zoom(zoom)
        self._bearing = bearing
        self._projection = ProjectionType(projection)
        self._width = int(width)
        self._height = int(height)

        self._events = EventEmitter()
        self._loaded: bool = False
        self._removed: bool = False

        self._sources: Dict[str, Dict[str, Any]] = {}
        self._layers: List[LayerSpec] = []
        self._label_containers: List[ListLabelContainer] = []

    # ------------------------------------------------------------------------------
    # MapView: queries
    # ------------------------------------------------------------------------------

    @property
    def supported_events(self) -> FrozenSet[MapEvent]:
        return frozenset(MapEvent)

    def is_loaded(self) -> bool:
        return self._loaded

    def get_zoom(self) -> float:
        return self._zoom

    def get_bearing(self) -> float:
        return self._bearing

    def get_center(self) -> LngLat:
        return self._center

    def get_projection(self) -> ProjectionType:
        return self._projection

    def get_viewport_size(self) -> ViewportSize:
        return ViewportSize(self._width, self._height)

    def get_bounds(self) -> ViewportBounds:
        return self.transform.get_bounds()

    def project(self, lnglat: LngLat) -> ScreenPoint:
        return self.transform.project(lnglat)

    def unproject(self, point: ScreenPoint) -> LngLat:
        return self.transform.unproject(point)

    def is_location_occluded(self, lnglat: LngLat) -> bool:
        return self.transform.is_location_occluded(lnglat)

    @property
    def transform(self) -> MapTransform:
        cls = GlobeTransform if self._projection == ProjectionType.GLOBE else MercatorTransform
        return cls(
            center=self._center,
            zoom=self._zoom,
            bearing=self._bearing,
            width=self._width,
            height=self._height,
        )

    # ------------------------------------------------------------------------------
    # MapView: events
    # ------------------------------------------------------------------------------

    def on(self, event: MapEvent, handler: Handler) -> Disposer:
        return self._events.on(MapEvent(event), handler)

    def once(self, event: MapEvent, handler: Handler) -> Disposer:
        return self._events.once(MapEvent(event), handler)

    def listener_count(self, event: MapEvent) -> int:
        return self._events.listener_count(MapEvent(event))

    # ------------------------------------------------------------------------------
    # MapView: sources, layers, labels
    # ------------------------------------------------------------------------------

    @property
    def sources(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._sources)

    @property
    def layers(self) -> Tuple[LayerSpec, ...]:
        return tuple(self._layers)

    @property
    def label_containers(self) -> Tuple[ListLabelContainer, ...]:
        return tuple(self._label_containers)

    def get_source_data(self, source_id: str) -> Dict[str, Any]:
        if source_id not in self._sources:
            raise KeyError(f"Source '{source_id}' does not exist.")
        return self._sources[source_id]

    def get_layer(self, layer_id: str) -> LayerSpec:
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        raise KeyError(f"Layer '{layer_id}' does not exist.")

    def has_layer(self, layer_id: str) -> bool:
        return any(layer.id == layer_id for layer in self._layers)

    def add_source(self, source_id: str, data: Dict[str, Any]) -> None:
        if source_id in self._sources:
            raise ValueError(f"Source '{source_id}' already exists.")
        self._sources[source_id] = copy.deepcopy(data)

    def set_source_data(self, source_id: str, data: Dict[str, Any]) -> None:
        if source_id not in self._sources:
            raise KeyError(f"Source '{source_id}' does not exist.")
        self._sources[source_id] = copy.deepcopy(data)

    def remove_source(self, source_id: str) -> None:
        if any(layer.source == source_id for layer in self._layers):
            raise ValueError(f"Source '{source_id}' is still used by a layer.")
        if source_id not in self._sources:
            raise KeyError(f"Source '{source_id}' does not exist.")
        del self._sources[source_id]

    def add_layer(self, layer: LayerSpec, before_id: Optional[str] = None) -> None:
        if self.has_layer(layer.id):
            raise ValueError(f"Layer '{layer.id}' already exists.")
        if layer.source not in self._sources:
            raise KeyError(f"Layer '{layer.id}' references missing source '{layer.source}'.")

        if before_id is not None and self.has_layer(before_id):
            index = next(i for i, existing in enumerate(self._layers) if existing.id == before_id)
            self._layers.insert(index, layer)
        else:
            if before_id is not None:
                logger.warning(f"Layer '{before_id}' not found, adding '{layer.id}' on top.")
            self._layers.append(layer)

    def remove_layer(self, layer_id: str) -> None:
        layer = self.get_layer(layer_id)
        self._layers.remove(layer)

    def create_label_container(self) -> ListLabelContainer:
        container = ListLabelContainer(owner=self)
        self._label_containers.append(container)
        return container

    def _detach_label_container(self, container: ListLabelContainer) -> None:
        if container in self._label_containers:
            self._label_containers.remove(container)

    # ------------------------------------------------------------------------------
    # Camera & lifecycle
    # ------------------------------------------------------------------------------

    def load(self) -> None:
        """Marks the map as ready and fires "load" (only the first time)."""
        if self._loaded:
            return
        self._loaded = True
        self._events.fire(MapEvent.LOAD)

    def remove(self) -> None:
        """Tears the map down; listeners get a final "remove"."""
        if self._removed:
            return
        self._removed = True
        self._events.fire(MapEvent.REMOVE)

    def jump_to(
        self,
        center: Optional[LngLat] = None,
        zoom: Optional[float] = None,
        bearing: Optional[float] = None,
    ) -> None:
        if center is not None:
            self._center = center
        if zoom is not None:
            self._zoom = self._clamp_zoom(zoom)
        if bearing is not None:
            self._bearing = bearing
        self._events.fire(MapEvent.MOVE)

    def set_bearing(self, bearing: float) -> None:
        self.jump_to(bearing=bearing)

    def zoom_by(self, delta: float) -> None:
        self.jump_to(zoom=self._zoom + delta)

    def pan_by(self, dx: float, dy: float) -> None:
        """Moves the camera so the map content shifts by (dx, dy) pixels."""
        new_center = self.unproject(ScreenPoint(self._width / 2.0 - dx, self._height / 2.0 - dy))
        lat = max(min(new_center.lat, 85.0), -85.0)
        self.jump_to(center=LngLat(new_center.lng, lat))

    def resize(self, width: int, height: int) -> None:
        self._width, self._height = int(width), int(height)
        self._events.fire(MapEvent.MOVE)

    def set_projection(self, projection: ProjectionType) -> None:
        projection = ProjectionType(projection)
        if projection == self._projection:
            return
        self._projection = projection
        logger.info(f"Projection changed to '{projection.value}'.")
        self._events.fire(MapEvent.PROJECTION_CHANGED)

    @staticmethod
    def _clamp_zoom(zoom: float) -> float:
        return max(MIN_ZOOM, min(MAX_ZOOM, float(zoom)))
