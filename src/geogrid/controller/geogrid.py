"""
GeoGrid (Viewport Reconciler)
=============================
Keeps the grid lines and coordinate labels in sync with the map camera.

Why is this file needed?
------------------------
1. Lifecycle: It attaches the grid when the map is loaded and detaches it
   on explicit removal or when the map itself goes away.
2. Reconciliation: Every "move"/"projection-changed" event rebuilds the
   labels and replaces both line sources wholesale.

Classes:
    GeoGridState: Everything that exists only while the grid is attached.
    GeoGrid: The public plugin object.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from geogrid.config import (
    GeoGridOptions, MERIDIANS_LAYER_ID, MERIDIANS_SOURCE_ID, PARALLELS_LAYER_ID, PARALLELS_SOURCE_ID
)
from geogrid.controller.labels import LabelPlacer
from geogrid.model.geometry import (
    create_meridians_geometry, create_multi_line_string, create_parallels_geometry
)
from geogrid.model.map_view import Disposer, LabelContainer, LayerSpec, MapEvent, MapView
from geogrid.model.types import LabelDescriptor

logger = logging.getLogger(__name__)


@dataclass
class GeoGridState:
    """Owned and mutated by GeoGrid only; dropped on detach."""
    label_container: LabelContainer
    subscriptions: List[Disposer] = field(default_factory=list)
    labels: Tuple[LabelDescriptor, ...] = ()
    zoom_bucket: Optional[int] = None
    density: Optional[float] = None


class GeoGrid:
    """
    Geographic grid (parallels, meridians and their labels) on a map.

    The grid attaches itself as soon as the map is loaded. `remove()` takes
    it off the map and `add()` puts it back.
    """

    def __init__(self, options: GeoGridOptions) -> None:
        self.options = options
        self.map: MapView = options.map_view
        self._placer = LabelPlacer(self.map, options.format_labels)
        self._state: Optional[GeoGridState] = None
        self._load_subscription: Optional[Disposer] = None

        if self.map.is_loaded():
            self.add()
        else:
            self._load_subscription = self.map.once(MapEvent.LOAD, self.add)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def is_attached(self) -> bool:
        return self._state is not None

    @property
    def labels(self) -> Tuple[LabelDescriptor, ...]:
        """Labels of the last cycle, empty while detached."""
        return self._state.labels if self._state is not None else ()

    def add(self) -> None:
        """
        Adds the grid to the map.
        Only needed after remove(); calling it while attached does nothing.
        """
        if self._state is not None:
            logger.debug("GeoGrid already attached, add() ignored.")
            return

        if self._load_subscription is not None:
            self._load_subscription()
            self._load_subscription = None

        state = GeoGridState(label_container=self.map.create_label_container())
        self._state = state

        state.subscriptions.append(self.map.on(MapEvent.MOVE, self._on_move))
        state.subscriptions.append(self.map.on(MapEvent.REMOVE, self._on_map_remove))
        if MapEvent.PROJECTION_CHANGED in self.map.supported_events:
            state.subscriptions.append(self.map.on(MapEvent.PROJECTION_CHANGED, self._on_projection_changed))

        density = self._resolve_density(state)
        self._add_layers_and_sources(density)
        self._update_labels_visibility(state)
        self._draw_labels(state, density)
        logger.info(f"GeoGrid attached (density {density}°).")

    def remove(self) -> None:
        """Removes the grid from the map. Calling it while detached does nothing."""
        if self._load_subscription is not None:
            self._load_subscription()
            self._load_subscription = None

        state = self._state
        if state is None:
            return
        self._state = None

        for dispose in state.subscriptions:
            dispose()
        state.subscriptions.clear()

        state.label_container.clear()
        state.label_container.destroy()

        self.map.remove_layer(PARALLELS_LAYER_ID)
        self.map.remove_layer(MERIDIANS_LAYER_ID)
        self.map.remove_source(PARALLELS_SOURCE_ID)
        self.map.remove_source(MERIDIANS_SOURCE_ID)
        logger.info("GeoGrid removed.")

    # ------------------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------------------

    def _on_move(self) -> None:
        state = self._state
        if state is None:
            return
        self._update_labels_visibility(state)
        density = self._resolve_density(state)
        self._draw_labels(state, density)
        self._update_grid(density)

    def _on_projection_changed(self) -> None:
        logger.info(f"Projection changed to '{self.map.get_projection()}', rebuilding grid.")
        self._on_move()

    def _on_map_remove(self) -> None:
        self.remove()

    # ------------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------------

    def _resolve_density(self, state: GeoGridState) -> float:
        """Density for the current zoom bucket; only re-evaluated when the bucket changes."""
        zoom_bucket = math.floor(self.map.get_zoom())
        if state.density is None or zoom_bucket != state.zoom_bucket:
            state.density = float(self.options.grid_density(zoom_bucket))
            logger.debug(f"Zoom bucket {state.zoom_bucket} -> {zoom_bucket}, density {state.density}°.")
            state.zoom_bucket = zoom_bucket
        return state.density

    def _parallels_data(self, density: float) -> Dict[str, Any]:
        return create_multi_line_string(create_parallels_geometry(density, self.map.get_bounds()))

    def _meridians_data(self, density: float) -> Dict[str, Any]:
        return create_multi_line_string(create_meridians_geometry(density, self.map.get_bounds()))

    def _layer_spec(self, layer_id: str, source_id: str) -> LayerSpec:
        return LayerSpec(
            id=layer_id,
            source=source_id,
            color=self.options.style.color,
            width=self.options.style.width,
            min_zoom=self.options.min_zoom,
            max_zoom=self.options.max_zoom,
        )

    def _add_layers_and_sources(self, density: float) -> None:
        before_id = self.options.before_layer_id

        self.map.add_source(PARALLELS_SOURCE_ID, self._parallels_data(density))
        self.map.add_layer(self._layer_spec(PARALLELS_LAYER_ID, PARALLELS_SOURCE_ID), before_id)

        self.map.add_source(MERIDIANS_SOURCE_ID, self._meridians_data(density))
        self.map.add_layer(self._layer_spec(MERIDIANS_LAYER_ID, MERIDIANS_SOURCE_ID), before_id)

    def _update_grid(self, density: float) -> None:
        parallels = self._parallels_data(density)
        meridians = self._meridians_data(density)
        self.map.set_source_data(PARALLELS_SOURCE_ID, parallels)
        self.map.set_source_data(MERIDIANS_SOURCE_ID, meridians)
        logger.debug(
            f"Grid updated: {len(parallels['coordinates'])} parallels, "
            f"{len(meridians['coordinates'])} meridians."
        )

    def _draw_labels(self, state: GeoGridState, density: float) -> None:
        """Replaces all labels: clear the container, then rebuild it."""
        state.label_container.clear()

        # Raw zoom, as in LayerSpec.is_visible_at
        if not self.options.is_zoom_in_range(self.map.get_zoom()):
            state.labels = ()
            return

        labels = tuple(self._placer.place(density))
        for label in labels:
            state.label_container.append(label)
        state.labels = labels

    def _update_labels_visibility(self, state: GeoGridState) -> None:
        # Labels are anchored north-up, rotated maps hide them
        is_facing_north = abs(self.map.get_bearing()) == 0
        state.label_container.set_visible(is_facing_north)
