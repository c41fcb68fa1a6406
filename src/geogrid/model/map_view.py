"""
Map View Interface
==================
The narrow set of renderer capabilities the grid depends on.

Why is this file needed?
------------------------
1. Decoupling: Controllers only talk to `MapView` and `LabelContainer`, so
   the same grid code runs against the PyVista view and the in-memory map.
2. Events: `EventEmitter` gives every subscription an explicit disposer
   instead of relying on handler identity for unsubscribing.

Classes:
    MapEvent: Names of the renderer events.
    LayerSpec: Paint description of a line layer.
    LabelContainer: Protocol of the label overlay.
    MapView: Protocol of the host map.
    EventEmitter: Synchronous event dispatch with disposers.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Protocol, Sequence

from geogrid.model.types import (
    LabelDescriptor, LngLat, ProjectionType, ScreenPoint, ViewportBounds, ViewportSize
)

Handler = Callable[[], None]
Disposer = Callable[[], None]


class MapEvent(StrEnum):
    LOAD = "load"
    MOVE = "move"
    REMOVE = "remove"
    PROJECTION_CHANGED = "projection-changed"


@dataclass(frozen=True)
class LayerSpec:
    id: str
    source: str
    color: str
    width: float
    min_zoom: float = 0
    max_zoom: float = 22

    def is_visible_at(self, zoom: float) -> bool:
        return self.min_zoom <= zoom <= self.max_zoom


class LabelContainer(Protocol):
    @property
    def labels(self) -> Sequence[LabelDescriptor]: ...
    def clear(self) -> None: ...
    def append(self, label: LabelDescriptor) -> None: ...
    def set_visible(self, visible: bool) -> None: ...
    def is_visible(self) -> bool: ...
    def destroy(self) -> None: ...


class MapView(Protocol):
    @property
    def supported_events(self) -> FrozenSet[MapEvent]: ...

    # --- Queries ---
    def is_loaded(self) -> bool: ...
    def get_zoom(self) -> float: ...
    def get_bearing(self) -> float: ...
    def get_center(self) -> LngLat: ...
    def get_bounds(self) -> ViewportBounds: ...
    def get_projection(self) -> ProjectionType: ...
    def get_viewport_size(self) -> ViewportSize: ...
    def project(self, lnglat: LngLat) -> ScreenPoint: ...
    def unproject(self, point: ScreenPoint) -> LngLat: ...
    def is_location_occluded(self, lnglat: LngLat) -> bool: ...

    # --- Events ---
    def on(self, event: MapEvent, handler: Handler) -> Disposer: ...
    def once(self, event: MapEvent, handler: Handler) -> Disposer: ...

    # --- Mutations ---
    def add_source(self, source_id: str, data: Dict[str, Any]) -> None: ...
    def set_source_data(self, source_id: str, data: Dict[str, Any]) -> None: ...
    def remove_source(self, source_id: str) -> None: ...
    def add_layer(self, layer: LayerSpec, before_id: Optional[str] = None) -> None: ...
    def remove_layer(self, layer_id: str) -> None: ...
    def create_label_container(self) -> LabelContainer: ...


class EventEmitter:
    """Synchronous dispatcher; handlers run in registration order."""

    def __init__(self) -> None:
        self._handlers: Dict[MapEvent, List[Handler]] = defaultdict(list)

    def on(self, event: MapEvent, handler: Handler) -> Disposer:
        self._handlers[event].append(handler)
        return self._make_disposer(event, handler)

    def once(self, event: MapEvent, handler: Handler) -> Disposer:
        def wrapper() -> None:
            dispose()
            handler()

        dispose = self.on(event, wrapper)
        return dispose

    def fire(self, event: MapEvent) -> None:
        # Snapshot, handlers may dispose themselves while running
        for handler in list(self._handlers.get(event, ())):
            handler()

    def listener_count(self, event: MapEvent) -> int:
        return len(self._handlers.get(event, ()))

    def _make_disposer(self, event: MapEvent, handler: Handler) -> Disposer:
        disposed = False

        def dispose() -> None:
            nonlocal disposed
            if disposed:
                return
            disposed = True
            handlers = self._handlers.get(event)
            if handlers and handler in handlers:
                handlers.remove(handler)

        return dispose
