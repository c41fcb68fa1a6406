import math

import pytest

from geogrid.model.geometry import (
    create_grid_lines, create_meridians_geometry, create_multi_line_string,
    create_parallels_geometry, grid_values, meridian_values, parallel_values,
)
from geogrid.model.types import LineKind, ViewportBounds


def test_parallels_exclude_upper_bound():
    bounds = ViewportBounds(west=-1, south=-1, east=1, north=1)
    assert list(parallel_values(1.0, bounds)) == [-1.0, 0.0]


@pytest.mark.parametrize(
    "density, south, north",
    [(1.0, -1.0, 1.0), (30.0, -85.0, 85.0), (0.25, 10.1, 12.9), (7.5, -3.0, 44.9), (5.0, 0.0, 5.0)],
)
def test_parallel_values_are_multiples_inside_bounds(density, south, north):
    bounds = ViewportBounds(west=-10, south=south, east=10, north=north)
    values = parallel_values(density, bounds)

    start = math.ceil(south / density) * density
    assert len(values) == math.ceil((north - start) / density)
    for v in values:
        assert south <= v < north
        assert v / density == pytest.approx(round(v / density))


def test_meridian_values_follow_west_east():
    bounds = ViewportBounds(west=-70.3, south=-40, east=70.3, north=40)
    values = meridian_values(10.0, bounds)
    assert values[0] == -70.0
    assert values[-1] == 70.0
    assert len(values) == 15


@pytest.mark.parametrize(
    "bounds",
    [
        ViewportBounds(west=-10, south=5, east=10, north=5),
        ViewportBounds(west=-10, south=6, east=10, north=5),
        ViewportBounds(west=10, south=-5, east=10, north=5),
    ],
)
def test_degenerate_bounds_yield_no_lines(bounds):
    assert create_parallels_geometry(1.0, bounds) == []
    assert create_meridians_geometry(1.0, bounds) == []


def test_negative_zero_start_is_normalised():
    values = grid_values(1.0, -0.5, 1.5)
    assert values[0] == 0.0
    assert math.copysign(1.0, values[0]) == 1.0


def test_parallel_segments_span_all_longitudes():
    bounds = ViewportBounds(west=-1, south=-1, east=1, north=1)
    assert create_parallels_geometry(1.0, bounds) == [
        [(-180.0, -1.0), (180.0, -1.0)],
        [(-180.0, 0.0), (180.0, 0.0)],
    ]


def test_meridian_segments_run_pole_to_pole():
    bounds = ViewportBounds(west=-1, south=-1, east=1, north=1)
    assert create_meridians_geometry(1.0, bounds) == [
        [(-1.0, -90.0), (-1.0, 90.0)],
        [(0.0, -90.0), (0.0, 90.0)],
    ]


def test_create_grid_lines_tags_kind_and_value():
    bounds = ViewportBounds(west=-1, south=-1, east=1, north=1)
    lines = create_grid_lines(1.0, bounds)

    assert [(line.kind, line.value) for line in lines] == [
        (LineKind.PARALLEL, -1.0),
        (LineKind.PARALLEL, 0.0),
        (LineKind.MERIDIAN, -1.0),
        (LineKind.MERIDIAN, 0.0),
    ]
    assert lines[0].segment == ((-180.0, -1.0), (180.0, -1.0))


def test_multi_line_string_wraps_coordinates():
    data = create_multi_line_string([[(0.0, -90.0), (0.0, 90.0)]])
    assert data == {"type": "MultiLineString", "coordinates": [[(0.0, -90.0), (0.0, 90.0)]]}


def test_multi_line_string_empty():
    assert create_multi_line_string([]) == {"type": "MultiLineString", "coordinates": []}


@pytest.mark.parametrize(
    "density, south, north, count",
    [
        (0.075, -89.37, -89.1, 3),
        (0.1, 1.0, 1.3, 3),
        (0.075, 0.0, 0.75, 10),
        (0.05, 0.0, 1.0, 20),
        (0.025, 10.0, 10.5, 20),
    ],
)
def test_upper_bound_excluded_for_fractional_densities(density, south, north, count):
    bounds = ViewportBounds(west=-10, south=south, east=10, north=north)

    values = parallel_values(density, bounds)

    assert len(values) == count
    assert all(v < north for v in values)
    assert all(v / density == pytest.approx(round(v / density)) for v in values)


def test_meridians_exclude_east_bound_for_fractional_density():
    bounds = ViewportBounds(west=1.0, south=-1, east=1.3, north=1)
    values = meridian_values(0.1, bounds)
    assert len(values) == 3
    assert values[-1] < 1.3
