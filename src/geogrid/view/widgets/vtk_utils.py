"""
VTK and Geometry Utilities
Helper functions for turning GeoJSON line geometry into screen-space PolyData.
"""
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import numpy.typing as npt
import pyvista as pv

from geogrid.model.transform import MapTransform
from geogrid.model.types import LngLat

# Points per segment when following a line across the globe
DEFAULT_SEGMENT_SAMPLES = 64


class VtkUtils:
    @staticmethod
    def densify_segment(
        start: Sequence[float], end: Sequence[float], n_samples: int = DEFAULT_SEGMENT_SAMPLES
    ) -> npt.NDArray[np.float64]:
        """
        Linearly interpolate a (lng, lat) segment.

        Returns:
            (n_samples, 2) array of (lng, lat) including both end points.
        """
        return np.linspace(np.asarray(start, dtype=np.float64), np.asarray(end, dtype=np.float64), n_samples)

    @staticmethod
    def visible_runs(mask: npt.NDArray[np.bool_]) -> List[Tuple[int, int]]:
        """
        Return (start, stop) index pairs of consecutive True values.
        Runs shorter than 2 samples cannot form a line and are skipped.
        """
        runs: List[Tuple[int, int]] = []
        start = None
        for i, visible in enumerate(mask):
            if visible and start is None:
                start = i
            elif not visible and start is not None:
                if i - start >= 2:
                    runs.append((start, i))
                start = None
        if start is not None and len(mask) - start >= 2:
            runs.append((start, len(mask)))
        return runs

    @staticmethod
    def multi_line_string_to_polydata(
        data: Dict[str, Any],
        transform: MapTransform,
        n_samples: int = DEFAULT_SEGMENT_SAMPLES,
        z: float = 0.0,
    ) -> pv.PolyData:
        """
        Project a GeoJSON MultiLineString into display space.

        Points are placed at (x, height - y, z) so that the VTK display
        origin (bottom-left) matches the map's top-left screen origin.
        Parts of the lines behind the globe horizon are dropped.

        Args:
            data: GeoJSON geometry with "coordinates" as a list of lines.
            transform: Camera transform used for projection and occlusion.
            n_samples: Samples per segment.
            z: Depth offset used to stack layers.

        Returns:
            PolyData with one polyline cell per visible run.
        """
        height = float(transform.height)
        pts3_list: List[npt.NDArray[np.float64]] = []
        cells_list: List[npt.NDArray[np.int_]] = []
        offset = 0

        for line in data.get("coordinates", []):
            for start, end in zip(line[:-1], line[1:]):
                samples = VtkUtils.densify_segment(start, end, n_samples)
                lnglats = [LngLat(float(lng), float(lat)) for lng, lat in samples]
                mask = np.array([not transform.is_location_occluded(p) for p in lnglats], dtype=bool)

                for run_start, run_stop in VtkUtils.visible_runs(mask):
                    projected = [transform.project(p) for p in lnglats[run_start:run_stop]]
                    n = len(projected)
                    pts3 = np.array([(p.x, height - p.y, z) for p in projected], dtype=np.float64)
                    pts3_list.append(pts3)
                    cells_list.append(np.hstack([[n], np.arange(offset, offset + n, dtype=np.int_)]))
                    offset += n

        if not pts3_list:
            return pv.PolyData()

        pd = pv.PolyData(np.vstack(pts3_list))
        pd.lines = np.concatenate(cells_list).astype(np.int_)
        return pd
