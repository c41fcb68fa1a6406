import pytest

from geogrid.model.density import DEFAULT_GRID_DENSITY, GRID_DENSITY_BY_ZOOM, grid_density

EXPECTED_TABLE = [30, 15, 10, 7.5, 5, 3, 2, 1.5, 0.75, 0.5, 0.25, 0.125, 0.075, 0.05, 0.025]


def test_grid_density_matches_table_for_zoom_0_to_14():
    assert [grid_density(z) for z in range(15)] == EXPECTED_TABLE


@pytest.mark.parametrize("zoom", [-1, 15, 16, 22, 100])
def test_grid_density_out_of_range_clamps_to_30(zoom):
    assert grid_density(zoom) == 30
    assert DEFAULT_GRID_DENSITY == 30


def test_grid_density_table_is_strictly_decreasing():
    assert all(a > b for a, b in zip(GRID_DENSITY_BY_ZOOM, GRID_DENSITY_BY_ZOOM[1:]))
