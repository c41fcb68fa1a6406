import logging

import pytest

from geogrid.config import (
    GeoGridOptions, GridStyle, MERIDIANS_LAYER_ID, MERIDIANS_SOURCE_ID, PARALLELS_LAYER_ID,
    PARALLELS_SOURCE_ID,
)
from geogrid.controller.geogrid import GeoGrid
from geogrid.model.density import grid_density
from geogrid.model.geometry import (
    create_meridians_geometry, create_multi_line_string, create_parallels_geometry
)
from geogrid.model.map_view import LayerSpec, MapEvent
from geogrid.model.memory_map import InMemoryMap
from geogrid.model.types import Anchor, LngLat, ProjectionType

GRID_LAYERS = [PARALLELS_LAYER_ID, MERIDIANS_LAYER_ID]
GRID_SOURCES = {PARALLELS_SOURCE_ID, MERIDIANS_SOURCE_ID}


@pytest.fixture
def loaded_map() -> InMemoryMap:
    m = InMemoryMap(center=LngLat(0.0, 0.0), zoom=2.0, width=800, height=600)
    m.load()
    return m


def make_grid(map_view, **kwargs) -> GeoGrid:
    return GeoGrid(GeoGridOptions(map_view=map_view, **kwargs))


def layer_ids(map_view):
    return [layer.id for layer in map_view.layers]


# ------------------------------------------------------------------------------
# Lifecycle
# ------------------------------------------------------------------------------

def test_grid_waits_for_load():
    m = InMemoryMap(zoom=2.0)
    grid = make_grid(m)

    assert not grid.is_attached
    assert m.sources == {}

    m.load()

    assert grid.is_attached
    assert set(m.sources) == GRID_SOURCES
    assert layer_ids(m) == GRID_LAYERS
    assert len(m.label_containers) == 1
    assert m.listener_count(MapEvent.LOAD) == 0


def test_grid_attaches_immediately_on_loaded_map(loaded_map):
    grid = make_grid(loaded_map)
    assert grid.is_attached
    assert layer_ids(loaded_map) == GRID_LAYERS
    assert len(grid.labels) > 0
    assert loaded_map.label_containers[0].labels == grid.labels


def test_add_while_attached_does_nothing(loaded_map):
    grid = make_grid(loaded_map)
    grid.add()
    assert layer_ids(loaded_map) == GRID_LAYERS
    assert len(loaded_map.label_containers) == 1
    assert loaded_map.listener_count(MapEvent.MOVE) == 1


def test_remove_cleans_up_everything(loaded_map):
    grid = make_grid(loaded_map)
    container = loaded_map.label_containers[0]

    grid.remove()

    assert not grid.is_attached
    assert grid.labels == ()
    assert loaded_map.sources == {}
    assert loaded_map.layers == ()
    assert loaded_map.label_containers == ()
    assert container.destroyed
    for event in MapEvent:
        assert loaded_map.listener_count(event) == 0


def test_remove_twice_and_before_load_is_safe():
    m = InMemoryMap()
    grid = make_grid(m)
    grid.remove()
    grid.remove()

    # Removed before load: the pending load subscription is gone too
    m.load()
    assert not grid.is_attached


def test_grid_can_be_added_again(loaded_map):
    grid = make_grid(loaded_map)
    grid.remove()
    grid.add()

    assert grid.is_attached
    assert layer_ids(loaded_map) == GRID_LAYERS
    assert len(loaded_map.label_containers) == 1
    assert loaded_map.listener_count(MapEvent.MOVE) == 1


def test_map_removal_detaches_grid(loaded_map):
    grid = make_grid(loaded_map)
    loaded_map.remove()
    assert not grid.is_attached
    assert loaded_map.sources == {}


# ------------------------------------------------------------------------------
# Reconciliation
# ------------------------------------------------------------------------------

def test_move_replaces_line_sources(loaded_map):
    make_grid(loaded_map)
    loaded_map.jump_to(center=LngLat(30.0, 40.0), zoom=5.0)

    density = grid_density(5)
    bounds = loaded_map.get_bounds()
    assert loaded_map.get_source_data(PARALLELS_SOURCE_ID) == create_multi_line_string(
        create_parallels_geometry(density, bounds)
    )
    assert loaded_map.get_source_data(MERIDIANS_SOURCE_ID) == create_multi_line_string(
        create_meridians_geometry(density, bounds)
    )


def test_move_rebuilds_labels(loaded_map):
    grid = make_grid(loaded_map)
    before = grid.labels

    loaded_map.jump_to(center=LngLat(30.0, 40.0))

    assert grid.labels != before
    assert loaded_map.label_containers[0].labels == grid.labels


def test_rotated_map_hides_labels(loaded_map):
    make_grid(loaded_map)
    container = loaded_map.label_containers[0]
    assert container.is_visible()

    loaded_map.set_bearing(90.0)
    assert not container.is_visible()

    loaded_map.set_bearing(0.0)
    assert container.is_visible()


def test_projection_change_rebuilds_labels(loaded_map):
    grid = make_grid(loaded_map)
    assert any(label.anchor == Anchor.LEFT for label in grid.labels)

    # At zoom 2 the globe is narrower than the viewport
    loaded_map.set_projection(ProjectionType.GLOBE)

    assert not any(label.anchor == Anchor.LEFT for label in grid.labels)
    assert loaded_map.label_containers[0].labels == grid.labels


def test_projection_change_is_logged(loaded_map, caplog):
    make_grid(loaded_map)
    with caplog.at_level(logging.INFO, logger="geogrid"):
        loaded_map.set_projection(ProjectionType.GLOBE)
    assert "rebuilding grid" in caplog.text


def test_labels_outside_zoom_range(loaded_map):
    grid = make_grid(loaded_map, zoom_level_range=(3, 22))

    assert grid.labels == ()
    assert set(loaded_map.sources) == GRID_SOURCES

    loaded_map.jump_to(zoom=3.0)
    assert len(grid.labels) > 0


def test_density_only_reevaluated_on_zoom_bucket_change(loaded_map):
    calls = []

    def density(zoom):
        calls.append(zoom)
        return grid_density(zoom)

    make_grid(loaded_map, grid_density=density)
    assert calls == [2]

    loaded_map.jump_to(zoom=2.7)
    loaded_map.pan_by(50.0, 20.0)
    assert calls == [2]

    loaded_map.jump_to(zoom=3.1)
    assert calls == [2, 3]


def test_layers_inserted_before_given_layer(loaded_map):
    loaded_map.add_source("water", {"type": "MultiLineString", "coordinates": []})
    loaded_map.add_layer(LayerSpec(id="water", source="water", color="#00f", width=1.0))

    make_grid(loaded_map, before_layer_id="water")

    assert layer_ids(loaded_map) == GRID_LAYERS + ["water"]


def test_layers_carry_style_and_zoom_range(loaded_map):
    make_grid(loaded_map, style=GridStyle(color="#ff0000", width=2.5), zoom_level_range=(1, 10))

    for layer_id in GRID_LAYERS:
        layer = loaded_map.get_layer(layer_id)
        assert layer.color == "#ff0000"
        assert layer.width == 2.5
        assert (layer.min_zoom, layer.max_zoom) == (1, 10)


def test_custom_label_formatter(loaded_map):
    grid = make_grid(loaded_map, format_labels=lambda value: f"{value:+.0f}")
    assert all(label.text == f"{label.value:+.0f}" for label in grid.labels)


@pytest.mark.parametrize(
    "zoom_range, zoom, shown",
    [((2.5, 22), 2.7, True), ((2.5, 22), 2.2, False), ((0, 5), 5.5, False), ((0, 5), 5.0, True)],
)
def test_labels_and_lines_share_zoom_range(loaded_map, zoom_range, zoom, shown):
    grid = make_grid(loaded_map, zoom_level_range=zoom_range)

    loaded_map.jump_to(zoom=zoom)

    assert (len(grid.labels) > 0) == shown
    for layer_id in GRID_LAYERS:
        assert loaded_map.get_layer(layer_id).is_visible_at(zoom) == shown
