"""
Map Widget (PyVista Wrapper)
Qt widget hosting a PyVistaMap with mouse pan and wheel zoom.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout
from PySide6.QtGui import QCloseEvent, QResizeEvent

from pyvistaqt import QtInteractor
from vtkmodules.vtkInteractionStyle import vtkInteractorStyleUser

from geogrid.model.types import LngLat, ProjectionType
from geogrid.view.widgets.pyvista_map import PyVistaMap

logger = logging.getLogger(__name__)

WHEEL_ZOOM_STEP = 0.25


class MapWidget(QWidget):
    def __init__(
        self,
        parent: Optional[QWidget] = None,
        center: LngLat = LngLat(15.0, 50.0),
        zoom: float = 2.0,
        projection: ProjectionType = ProjectionType.MERCATOR,
    ) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        width, height = self._window_size()
        self.map = PyVistaMap(
            self.plotter,
            center=center,
            zoom=zoom,
            projection=projection,
            width=width,
            height=height,
        )

        self._drag_origin: Optional[Tuple[int, int]] = None
        self._attach_observers()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def render(self) -> None:
        self.plotter.render()

    def set_projection(self, projection: ProjectionType) -> None:
        self.map.set_projection(projection)
        self.render()

    def set_bearing(self, bearing: float) -> None:
        self.map.set_bearing(bearing)
        self.render()

    def zoom_by(self, delta: float) -> None:
        self.map.zoom_by(delta)
        self.render()

    # ------------------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------------------

    def _attach_observers(self) -> None:
        iren = self.plotter.iren
        # The map camera is driven by the handlers below, not by VTK
        iren.interactor.SetInteractorStyle(vtkInteractorStyleUser())
        iren.add_observer("LeftButtonPressEvent", lambda *_: self._on_press())
        iren.add_observer("LeftButtonReleaseEvent", lambda *_: self._on_release())
        iren.add_observer("MouseMoveEvent", lambda *_: self._on_mouse_move())
        iren.add_observer("MouseWheelForwardEvent", lambda *_: self.zoom_by(WHEEL_ZOOM_STEP))
        iren.add_observer("MouseWheelBackwardEvent", lambda *_: self.zoom_by(-WHEEL_ZOOM_STEP))
        iren.add_observer("ConfigureEvent", lambda *_: self._sync_size())

    def _event_position(self) -> Tuple[int, int]:
        x, y = self.plotter.iren.interactor.GetEventPosition()
        return int(x), int(y)

    def _on_press(self) -> None:
        self._drag_origin = self._event_position()

    def _on_release(self) -> None:
        self._drag_origin = None

    def _on_mouse_move(self) -> None:
        if self._drag_origin is None:
            return
        x, y = self._event_position()
        x0, y0 = self._drag_origin
        self._drag_origin = (x, y)
        if (x, y) == (x0, y0):
            return
        # VTK display y points up, screen y points down
        self.map.pan_by(x - x0, -(y - y0))
        self.render()

    def _window_size(self) -> Tuple[int, int]:
        w, h = self.plotter.window_size
        return max(int(w), 1), max(int(h), 1)

    def _sync_size(self) -> None:
        width, height = self._window_size()
        size = self.map.get_viewport_size()
        if (width, height) != (size.width, size.height):
            logger.debug(f"Viewport resized to {width}x{height}.")
            self.map.resize(width, height)
            self.render()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._sync_size()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.map.remove()
        self.plotter.close()
        event.accept()
