"""
Main Application Window
=======================
Demo window: a map with the geographic grid and a toolbar.

Why is this file needed?
------------------------
1. Layout: It hosts the map widget and the toolbar.
2. Routing: It connects toolbar actions (projection, rotation, zoom, grid
   on/off) to the map and to the GeoGrid instance.
"""
from PySide6.QtWidgets import QMainWindow, QLabel
from PySide6.QtGui import QAction

from geogrid.config import GeoGridOptions, GridStyle
from geogrid.controller.geogrid import GeoGrid
from geogrid.model.map_view import MapEvent
from geogrid.model.types import ProjectionType
from geogrid.view.widgets.map_widget import MapWidget

VISIBLE_APP_NAME = "GeoGrid"
ZOOM_STEP = 1.0
ROTATE_STEP = 90.0


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1200, 800)

        # --- MAP ---
        self.map_widget = MapWidget(self)
        self.setCentralWidget(self.map_widget)
        self.map = self.map_widget.map

        # --- GRID ---
        self.grid = GeoGrid(GeoGridOptions(
            map_view=self.map,
            style=GridStyle(color="#5A5A5A", width=1.0),
        ))

        self.map.load()

        # --- STATUS ---
        # Subscribed after the grid so the label count is current
        self.status_label = QLabel()
        self.statusBar().addPermanentWidget(self.status_label)
        self.map.on(MapEvent.MOVE, self._update_status)
        self.map.on(MapEvent.PROJECTION_CHANGED, self._update_status)

        self._create_actions()

        self._update_status()
        self.map_widget.render()

    def _create_actions(self) -> None:
        toolbar = self.addToolBar("Map")

        self.act_globe = QAction("Globe", self)
        self.act_globe.setCheckable(True)
        self.act_globe.toggled.connect(self.on_toggle_globe)
        toolbar.addAction(self.act_globe)

        self.act_grid = QAction("Grid", self)
        self.act_grid.setCheckable(True)
        self.act_grid.setChecked(True)
        self.act_grid.toggled.connect(self.on_toggle_grid)
        toolbar.addAction(self.act_grid)

        toolbar.addSeparator()

        act_zoom_in = QAction("Zoom In", self)
        act_zoom_in.triggered.connect(lambda: self.map_widget.zoom_by(ZOOM_STEP))
        toolbar.addAction(act_zoom_in)

        act_zoom_out = QAction("Zoom Out", self)
        act_zoom_out.triggered.connect(lambda: self.map_widget.zoom_by(-ZOOM_STEP))
        toolbar.addAction(act_zoom_out)

        toolbar.addSeparator()

        act_rotate = QAction("Rotate 90°", self)
        act_rotate.triggered.connect(
            lambda: self.map_widget.set_bearing((self.map.get_bearing() + ROTATE_STEP) % 360.0)
        )
        toolbar.addAction(act_rotate)

        act_north = QAction("Reset North", self)
        act_north.triggered.connect(lambda: self.map_widget.set_bearing(0.0))
        toolbar.addAction(act_north)

    def on_toggle_globe(self, checked: bool) -> None:
        projection = ProjectionType.GLOBE if checked else ProjectionType.MERCATOR
        self.map_widget.set_projection(projection)

    def on_toggle_grid(self, checked: bool) -> None:
        if checked:
            self.grid.add()
        else:
            self.grid.remove()
        self.map_widget.render()

    def _update_status(self) -> None:
        center = self.map.get_center()
        self.status_label.setText(
            f"{self.map.get_projection().value} | zoom {self.map.get_zoom():.2f} | "
            f"center {center.lng:.3f}, {center.lat:.3f} | bearing {self.map.get_bearing():.0f}° | "
            f"labels {len(self.grid.labels)}"
        )
