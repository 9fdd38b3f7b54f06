"""Seeded jittered-grid point sampling."""

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np
import structlog

from ..utils.random import sampling_stream

logger = structlog.get_logger()

Point = Tuple[float, float]


@dataclass(frozen=True, eq=False)
class PointSet:
    """
    Ordered, index-stable set of sample points.

    The row index of a point in ``coordinates`` is its identity for the rest
    of the pipeline: triangles, cells and adjacency queries all refer to it.
    Points are stored column-major over the sampling grid (x outer, y inner).
    """
    coordinates: np.ndarray  # (n, 2), read-only
    columns: int
    rows: int

    def __len__(self) -> int:
        return len(self.coordinates)

    def __getitem__(self, index: int) -> Point:
        x, y = self.coordinates[index]
        return (float(x), float(y))

    def __iter__(self) -> Iterator[Point]:
        for i in range(len(self)):
            yield self[i]


def grid_shape(width: float, height: float, space: float) -> Tuple[int, int]:
    """Number of grid columns and rows that fit in the rectangle."""
    return math.floor(width / space), math.floor(height / space)


def get_regular_grid(width: float, height: float, space: float) -> np.ndarray:
    """
    Unperturbed sampling grid.

    Grid point (i, j) sits at ((i + 1) * space, (j + 1) * space), so the
    first point is at (space, space).

    Returns:
        (columns * rows, 2) array in column-major order
    """
    columns, rows = grid_shape(width, height, space)
    points = [
        [(i + 1) * space, (j + 1) * space]
        for i in range(columns)
        for j in range(rows)
    ]
    return np.array(points, dtype=np.float64).reshape(-1, 2)


def sample(seed: str, width: float, height: float, space: float, chaos: float) -> PointSet:
    """
    Generate jittered grid points.

    Each grid point is moved by ``(r - 0.5) * chaos * space`` on each axis,
    with ``r`` drawn from the seed's Alea stream (x first, then y). Jittered
    coordinates are clamped to the rectangle.

    Args:
        seed: Seed string; identical seeds give identical point sets
        width: Rectangle width
        height: Rectangle height
        space: Grid spacing
        chaos: Jitter magnitude as a fraction of ``space``, in [0, 1]

    Returns:
        PointSet in column-major grid order
    """
    columns, rows = grid_shape(width, height, space)
    grid = get_regular_grid(width, height, space)
    prng = sampling_stream(seed)

    amplitude = chaos * space
    points = np.empty_like(grid)
    for i, (x, y) in enumerate(grid):
        r1 = prng.random()
        r2 = prng.random()
        points[i, 0] = min(max(x + (r1 - 0.5) * amplitude, 0.0), width)
        points[i, 1] = min(max(y + (r2 - 0.5) * amplitude, 0.0), height)

    points.setflags(write=False)

    logger.info("Points sampled", seed=seed, columns=columns, rows=rows, points=len(points))

    return PointSet(coordinates=points, columns=columns, rows=rows)
