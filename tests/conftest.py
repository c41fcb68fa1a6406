from typing import Callable, List

import pytest

from geogrid.model.memory_map import InMemoryMap
from geogrid.model.types import LngLat, ProjectionType, ScreenPoint, ViewportBounds


class StubMap(InMemoryMap):
    """
    In-memory map with fixed bounds and a linear projection.
    `occluded` decides which locations count as hidden behind the horizon.
    """

    def __init__(
        self,
        bounds: ViewportBounds = ViewportBounds(west=-10, south=-10, east=10, north=10),
        occluded: Callable[[LngLat], bool] = lambda _p: False,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.bounds = bounds
        self.occluded = occluded
        self.projected: List[LngLat] = []
        self.occlusion_queries: List[LngLat] = []

    def get_bounds(self) -> ViewportBounds:
        return self.bounds

    def project(self, lnglat: LngLat) -> ScreenPoint:
        self.projected.append(lnglat)
        size = self.get_viewport_size()
        b = self.bounds
        x = (lnglat.lng - b.west) / (b.east - b.west) * size.width
        y = (b.north - lnglat.lat) / (b.north - b.south) * size.height
        return ScreenPoint(x, y)

    def unproject(self, point: ScreenPoint) -> LngLat:
        size = self.get_viewport_size()
        b = self.bounds
        lng = b.west + point.x / size.width * (b.east - b.west)
        lat = b.north - point.y / size.height * (b.north - b.south)
        return LngLat(lng, lat)

    def is_location_occluded(self, lnglat: LngLat) -> bool:
        self.occlusion_queries.append(lnglat)
        return self.occluded(lnglat)


@pytest.fixture
def stub_map() -> StubMap:
    return StubMap(width=800, height=600)


@pytest.fixture
def stub_globe() -> StubMap:
    return StubMap(projection=ProjectionType.GLOBE, width=800, height=600)


@pytest.fixture
def mercator_map() -> InMemoryMap:
    return InMemoryMap(center=LngLat(0.0, 0.0), zoom=2.0, width=800, height=600)


@pytest.fixture
def globe_map() -> InMemoryMap:
    return InMemoryMap(
        center=LngLat(0.0, 0.0), zoom=4.0, projection=ProjectionType.GLOBE, width=800, height=600
    )
