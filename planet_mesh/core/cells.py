"""Cell records and the finished mesh."""

from dataclasses import dataclass
from functools import cached_property
from typing import FrozenSet, Iterator, Sequence, Tuple

import numpy as np
import structlog
from sklearn.neighbors import KDTree

from .elevation import ElevationFunction
from .sampler import Point, PointSet
from .tessellation import Bounds, Polygon
from .triangulation import Triangulation

logger = structlog.get_logger()


@dataclass(frozen=True)
class Cell:
    """One Voronoi cell: its generating point, boundary and elevation."""
    center: Point
    polygon: Polygon  # counter-clockwise, implicitly closed
    elevation: float

    @property
    def area(self) -> float:
        """Polygon area (shoelace formula)."""
        xs = np.array([p[0] for p in self.polygon])
        ys = np.array([p[1] for p in self.polygon])
        return float(0.5 * abs(np.dot(xs, np.roll(ys, -1)) - np.dot(ys, np.roll(xs, -1))))


@dataclass(frozen=True)
class Mesh:
    """
    Finished planet mesh.

    ``cells[i]`` belongs to sample point ``i``. Two cells are adjacent when
    their points share a Delaunay triangle.
    """
    cells: Tuple[Cell, ...]
    triangulation: Triangulation
    bounds: Bounds

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def adjacent(self, a: int, b: int) -> bool:
        """True if cells ``a`` and ``b`` share a triangulation edge; False for a == b."""
        return self.triangulation.adjacent(a, b)

    def neighbors(self, index: int) -> FrozenSet[int]:
        """Indices of the cells adjacent to ``index``."""
        return self.triangulation.neighbors(index)

    @property
    def elevations(self) -> np.ndarray:
        return np.array([cell.elevation for cell in self.cells])

    @cached_property
    def _center_tree(self) -> KDTree:
        return KDTree(np.array([cell.center for cell in self.cells]))

    def find_cell(self, x: float, y: float) -> int:
        """
        Index of the cell containing (x, y).

        A Voronoi cell holds every location closer to its center than to any
        other center, so this is a nearest-center lookup.

        Raises:
            ValueError: (x, y) lies outside the mesh bounds
        """
        if not (0 <= x <= self.bounds.width and 0 <= y <= self.bounds.height):
            raise ValueError(f"({x}, {y}) is outside the mesh bounds {tuple(self.bounds)}")
        _, index = self._center_tree.query([[x, y]], k=1)
        return int(index[0][0])


def build(points: PointSet, polygons: Sequence[Polygon], elevation_fn: ElevationFunction,
          triangulation: Triangulation, bounds: Bounds = None) -> Mesh:
    """
    Assemble cell records.

    Args:
        points: Sampled points
        polygons: Cell polygons, index-aligned with ``points``
        elevation_fn: Maps (coordinates, indices) to one height per point
        triangulation: Triangulation used for adjacency queries
        bounds: Clipping rectangle; inferred from the polygons if omitted

    Returns:
        Mesh with one Cell per point, same order
    """
    if len(polygons) != len(points):
        raise ValueError(f"Got {len(polygons)} polygons for {len(points)} points")
    if triangulation.point_count != len(points):
        raise ValueError(
            f"Triangulation covers {triangulation.point_count} points, expected {len(points)}"
        )

    coordinates = np.asarray(points.coordinates, dtype=np.float64)
    indices = np.arange(len(coordinates))
    elevations = np.asarray(elevation_fn(coordinates, indices), dtype=np.float64).reshape(-1)
    if len(elevations) != len(coordinates):
        raise ValueError(
            f"Elevation function returned {len(elevations)} values for {len(coordinates)} points"
        )

    if bounds is None:
        xs = [x for polygon in polygons for x, _ in polygon]
        ys = [y for polygon in polygons for _, y in polygon]
        bounds = Bounds(width=max(xs), height=max(ys))

    cells = tuple(
        Cell(center=points[i], polygon=tuple(polygons[i]), elevation=float(elevations[i]))
        for i in range(len(points))
    )

    logger.info("Cells built", cells=len(cells),
                min_elevation=float(elevations.min()), max_elevation=float(elevations.max()))

    return Mesh(cells=cells, triangulation=triangulation, bounds=bounds)
