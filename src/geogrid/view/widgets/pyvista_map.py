"""
PyVista Map
===========
An `InMemoryMap` that also draws its line layers and labels into a
PyVista plotter.

The plotter camera is fixed in parallel projection over display space
(one world unit per pixel); the map camera lives in the transform and
every layer is re-projected whenever the view changes.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import pyvista as pv

from geogrid.model.map_view import LayerSpec, MapEvent
from geogrid.model.memory_map import InMemoryMap
from geogrid.model.types import ProjectionType
from geogrid.view.widgets.label_overlay import TextActorLabelContainer
from geogrid.view.widgets.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)

GLOBE_DISC_NAME = "geogrid-globe-disc"
GLOBE_FILL_COLOR = "#DCE9F5"
BACKGROUND_COLOR = "white"
# Depth between stacked layers
LAYER_Z_STEP = 0.01


class PyVistaMap(InMemoryMap):
    def __init__(self, plotter: pv.Plotter, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.plotter = plotter
        self._init_plotter()

        self.on(MapEvent.MOVE, self.redraw)
        self.on(MapEvent.PROJECTION_CHANGED, self.redraw)

    # ------------------------------------------------------------------------------
    # MapView overrides
    # ------------------------------------------------------------------------------

    def add_layer(self, layer: LayerSpec, before_id: Optional[str] = None) -> None:
        super().add_layer(layer, before_id)
        self._render_layers()

    def remove_layer(self, layer_id: str) -> None:
        super().remove_layer(layer_id)
        self.plotter.remove_actor(layer_id, render=False)
        self._render_layers()

    def set_source_data(self, source_id: str, data: Dict[str, Any]) -> None:
        super().set_source_data(source_id, data)
        for index, layer in enumerate(self.layers):
            if layer.source == source_id:
                self._render_layer(layer, index)

    def create_label_container(self) -> TextActorLabelContainer:
        container = TextActorLabelContainer(
            self.plotter.renderer,
            self.get_viewport_size,
            owner=self,
        )
        self._label_containers.append(container)
        return container

    # ------------------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------------------

    def redraw(self) -> None:
        """Re-projects everything for the current camera. Does not render."""
        self._fit_camera()
        self._update_globe_disc()
        self._render_layers()

    def _init_plotter(self) -> None:
        self.plotter.set_background(BACKGROUND_COLOR)
        self.plotter.enable_parallel_projection()
        self._fit_camera()

    def _fit_camera(self) -> None:
        size = self.get_viewport_size()
        cx, cy = size.width / 2.0, size.height / 2.0

        cam = self.plotter.camera
        cam.position = (cx, cy, 10.0)
        cam.focal_point = (cx, cy, 0.0)
        cam.up = (0.0, 1.0, 0.0)
        cam.parallel_scale = max(size.height, 1) / 2.0

    def _update_globe_disc(self) -> None:
        if self.get_projection() != ProjectionType.GLOBE:
            self.plotter.remove_actor(GLOBE_DISC_NAME, render=False)
            return

        size = self.get_viewport_size()
        disc = pv.Disc(
            center=(size.width / 2.0, size.height / 2.0, -LAYER_Z_STEP),
            inner=0.0,
            outer=self.transform.radius,
            normal=(0.0, 0.0, 1.0),
            c_res=180,
        )
        self.plotter.add_mesh(
            disc, name=GLOBE_DISC_NAME, color=GLOBE_FILL_COLOR, pickable=False, reset_camera=False
        )

    def _render_layers(self) -> None:
        for index, layer in enumerate(self.layers):
            self._render_layer(layer, index)

    def _render_layer(self, layer: LayerSpec, index: int) -> None:
        if not layer.is_visible_at(self.get_zoom()):
            self.plotter.remove_actor(layer.id, render=False)
            return

        try:
            mesh = VtkUtils.multi_line_string_to_polydata(
                self.get_source_data(layer.source),
                self.transform,
                z=index * LAYER_Z_STEP,
            )
        except (KeyError, ValueError) as e:
            logger.error(f"Failed to build geometry for layer '{layer.id}': {e}")
            mesh = pv.PolyData()

        if mesh.n_points == 0:
            self.plotter.remove_actor(layer.id, render=False)
            return

        self.plotter.add_mesh(
            mesh,
            name=layer.id,
            color=layer.color,
            line_width=layer.width,
            pickable=False,
            reset_camera=False,
        )
