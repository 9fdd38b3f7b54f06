"""Delaunay triangulation of sampled points."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

import numpy as np
import structlog
from scipy.spatial import Delaunay, QhullError

from .exceptions import DegenerateInput, InsufficientPoints
from .sampler import PointSet

logger = structlog.get_logger()

QHULL_OPTIONS = "Qbb Qc Qz Q12"


@dataclass(frozen=True, eq=False)
class Triangulation:
    """
    Delaunay triangulation over a PointSet.

    Triangles are stored in canonical form: counter-clockwise, smallest
    point index first, sorted lexicographically. Identical input therefore
    always gives identical arrays.
    """
    simplices: np.ndarray            # (m, 3) point indices per triangle
    triangle_neighbors: np.ndarray   # (m, 3) triangle opposite each vertex, -1 on the hull
    circumcenters: np.ndarray        # (m, 2)
    hull: np.ndarray                 # sorted indices of points on the convex hull
    point_count: int
    point_neighbors: Tuple[FrozenSet[int], ...] = field(repr=False)

    def __len__(self) -> int:
        return len(self.simplices)

    def incident_triangles(self, index: int) -> np.ndarray:
        """Indices of the triangles that use point ``index``."""
        return np.flatnonzero(np.any(self.simplices == index, axis=1))

    def neighbors(self, index: int) -> FrozenSet[int]:
        """Points sharing a triangle edge with point ``index``."""
        self._check_index(index)
        return self.point_neighbors[index]

    def adjacent(self, a: int, b: int) -> bool:
        """True if some triangle contains both ``a`` and ``b``; never for a == b."""
        self._check_index(a)
        self._check_index(b)
        if a == b:
            return False
        return b in self.point_neighbors[a]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.point_count:
            raise IndexError(f"Point index {index} out of range [0, {self.point_count})")


def compute_circumcenters(coordinates: np.ndarray, simplices: np.ndarray) -> np.ndarray:
    """Circumcenter of every triangle."""
    a = coordinates[simplices[:, 0]]
    b = coordinates[simplices[:, 1]]
    c = coordinates[simplices[:, 2]]

    bx, by = b[:, 0] - a[:, 0], b[:, 1] - a[:, 1]
    cx, cy = c[:, 0] - a[:, 0], c[:, 1] - a[:, 1]
    d = 2.0 * (bx * cy - by * cx)

    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (cy * b2 - by * c2) / d
    uy = (bx * c2 - cx * b2) / d

    return np.column_stack([a[:, 0] + ux, a[:, 1] + uy])


def doubled_areas(coordinates: np.ndarray, simplices: np.ndarray) -> np.ndarray:
    """Twice the signed area of every triangle, positive when counter-clockwise."""
    a = coordinates[simplices[:, 0]]
    b = coordinates[simplices[:, 1]]
    c = coordinates[simplices[:, 2]]
    return (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])


def canonicalize_simplices(coordinates: np.ndarray, simplices: np.ndarray) -> np.ndarray:
    """
    Put triangles in canonical order.

    Each triangle is made counter-clockwise and rotated so its smallest index
    comes first; triangles are then sorted lexicographically.
    """
    tris = np.array(simplices, dtype=np.int64).reshape(-1, 3)

    clockwise = doubled_areas(coordinates, tris) < 0
    tris[clockwise] = tris[clockwise][:, [0, 2, 1]]

    shift = np.argmin(tris, axis=1)
    order = (shift[:, None] + np.arange(3)[None, :]) % 3
    tris = np.take_along_axis(tris, order, axis=1)

    return tris[np.lexsort((tris[:, 2], tris[:, 1], tris[:, 0]))]


def build_triangle_neighbors(simplices: np.ndarray) -> np.ndarray:
    """
    Triangle adjacency across shared edges.

    ``neighbors[t, k]`` is the triangle sharing the edge opposite vertex k of
    triangle t, or -1 if that edge is on the hull.
    """
    neighbors = np.full(simplices.shape, -1, dtype=np.int64)
    edges: Dict[Tuple[int, int], Tuple[int, int]] = {}

    for t, tri in enumerate(simplices):
        for k in range(3):
            u, v = int(tri[(k + 1) % 3]), int(tri[(k + 2) % 3])
            key = (u, v) if u < v else (v, u)
            other = edges.pop(key, None)
            if other is None:
                edges[key] = (t, k)
            else:
                other_t, other_k = other
                neighbors[t, k] = other_t
                neighbors[other_t, other_k] = t

    return neighbors


def build_point_neighbors(simplices: np.ndarray, n_points: int) -> Tuple[FrozenSet[int], ...]:
    """Per-point set of points that share a triangle with it."""
    neighbors: List[set] = [set() for _ in range(n_points)]
    for a, b, c in simplices:
        a, b, c = int(a), int(b), int(c)
        neighbors[a].update((b, c))
        neighbors[b].update((a, c))
        neighbors[c].update((a, b))
    return tuple(frozenset(n) for n in neighbors)


def _check_input(coordinates: np.ndarray) -> None:
    n_points = len(coordinates)
    if n_points < 3:
        raise InsufficientPoints(n_points)

    n_distinct = len(np.unique(coordinates, axis=0))
    if n_distinct < 3:
        raise DegenerateInput(f"Only {n_distinct} distinct points, at least 3 are required")
    if n_distinct < n_points:
        raise DegenerateInput(f"{n_points - n_distinct} duplicate points in input")

    centered = coordinates - coordinates[0]
    scale = float(np.abs(centered).max())
    if np.linalg.matrix_rank(centered, tol=scale * 1e-12) < 2:
        raise DegenerateInput("All points are collinear")


def triangulate(points: PointSet) -> Triangulation:
    """
    Compute the Delaunay triangulation of a point set.

    Delegates to Qhull through scipy.spatial.Delaunay. Co-circular ties are
    resolved by Qhull, which is deterministic for identical input; the output
    is then put in canonical order (see canonicalize_simplices).

    Args:
        points: Sampled points

    Returns:
        Triangulation with triangle and point adjacency

    Raises:
        InsufficientPoints: fewer than 3 points
        DegenerateInput: duplicate or collinear points, or Qhull failure
    """
    coordinates = np.asarray(points.coordinates, dtype=np.float64)
    _check_input(coordinates)

    logger.info("Starting triangulation", points=len(coordinates))

    try:
        delaunay = Delaunay(coordinates, qhull_options=QHULL_OPTIONS)
    except QhullError as e:
        raise DegenerateInput(f"Qhull could not triangulate the points: {e}") from e

    if len(delaunay.coplanar):
        skipped = sorted(int(i) for i in delaunay.coplanar[:, 0])
        raise DegenerateInput(f"Points {skipped} were left out of the triangulation")

    simplices = canonicalize_simplices(coordinates, delaunay.simplices)

    # Triangulated output can contain zero-area slivers on co-circular input
    extent = float(np.ptp(coordinates, axis=0).max())
    flat = doubled_areas(coordinates, simplices) <= extent * extent * 1e-12
    if flat.any():
        logger.debug("Dropping zero-area triangles", count=int(flat.sum()))
        simplices = simplices[~flat]

    hull = np.unique(delaunay.convex_hull)

    for array in (simplices, hull):
        array.setflags(write=False)
    triangle_neighbors = build_triangle_neighbors(simplices)
    triangle_neighbors.setflags(write=False)
    circumcenters = compute_circumcenters(coordinates, simplices)
    circumcenters.setflags(write=False)

    logger.info("Triangulation complete", triangles=len(simplices), hull_points=len(hull))

    return Triangulation(
        simplices=simplices,
        triangle_neighbors=triangle_neighbors,
        circumcenters=circumcenters,
        hull=hull,
        point_count=len(coordinates),
        point_neighbors=build_point_neighbors(simplices, len(coordinates)),
    )
