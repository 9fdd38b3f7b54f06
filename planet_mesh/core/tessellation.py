"""Voronoi tessellation dual to the Delaunay triangulation."""

from typing import List, NamedTuple, Tuple

import numpy as np
import structlog

from .exceptions import OrphanPoint
from .sampler import Point, PointSet
from .triangulation import Triangulation

logger = structlog.get_logger()

Polygon = Tuple[Point, ...]


class Bounds(NamedTuple):
    """Clipping rectangle [0, width] x [0, height]."""
    width: float
    height: float

    def corners(self) -> List[Point]:
        """Rectangle corners, counter-clockwise from the origin."""
        return [(0.0, 0.0), (self.width, 0.0), (self.width, self.height), (0.0, self.height)]


def clip_half_plane(polygon: List[Point], origin: Point, normal: Point, eps: float) -> List[Point]:
    """
    Clip a convex polygon to the half-plane ``(p - origin) . normal <= 0``.

    Sutherland-Hodgman against a single edge; vertex order is preserved.
    """
    if not polygon:
        return polygon

    ox, oy = origin
    nx, ny = normal

    def side(p: Point) -> float:
        return (p[0] - ox) * nx + (p[1] - oy) * ny

    clipped: List[Point] = []
    prev = polygon[-1]
    prev_side = side(prev)
    for current in polygon:
        current_side = side(current)
        if current_side <= eps:
            if prev_side > eps:
                clipped.append(_intersect(prev, current, prev_side, current_side))
            clipped.append(current)
        elif prev_side <= eps:
            clipped.append(_intersect(prev, current, prev_side, current_side))
        prev, prev_side = current, current_side

    return clipped


def _intersect(p: Point, q: Point, p_side: float, q_side: float) -> Point:
    t = p_side / (p_side - q_side)
    return (p[0] + t * (q[0] - p[0]), p[1] + t * (q[1] - p[1]))


def dedupe_vertices(polygon: List[Point], eps: float) -> List[Point]:
    """Drop consecutive vertices closer than ``eps``, including last-to-first."""
    result: List[Point] = []
    for p in polygon:
        if result and abs(p[0] - result[-1][0]) <= eps and abs(p[1] - result[-1][1]) <= eps:
            continue
        result.append(p)
    while len(result) > 1 and abs(result[0][0] - result[-1][0]) <= eps and abs(result[0][1] - result[-1][1]) <= eps:
        result.pop()
    return result


def cell_polygon(index: int, coordinates: np.ndarray, triangulation: Triangulation,
                 bounds: Bounds) -> Polygon:
    """
    Voronoi cell of one point, clipped to the bounds.

    The bounding rectangle is cut by the perpendicular bisector of every
    Delaunay neighbor. Interior vertices of the result are the circumcenters
    of the triangles around the point, in counter-clockwise order.
    """
    if not triangulation.point_neighbors[index]:
        raise OrphanPoint(index)

    eps = max(bounds.width, bounds.height) * 1e-12
    px, py = coordinates[index]
    polygon = bounds.corners()

    for neighbor in sorted(triangulation.point_neighbors[index]):
        qx, qy = coordinates[neighbor]
        midpoint = ((px + qx) / 2.0, (py + qy) / 2.0)
        polygon = clip_half_plane(polygon, midpoint, (qx - px, qy - py), eps)

    polygon = dedupe_vertices(polygon, eps * 1e3)
    if len(polygon) < 3:
        raise OrphanPoint(index, reason="a degenerate Voronoi cell")

    return tuple((float(x), float(y)) for x, y in polygon)


def tessellate(points: PointSet, triangulation: Triangulation, bounds: Bounds) -> Tuple[Polygon, ...]:
    """
    Compute the clipped Voronoi cell of every point.

    Args:
        points: Sampled points
        triangulation: Delaunay triangulation of ``points``
        bounds: Clipping rectangle

    Returns:
        One counter-clockwise polygon per point, index-aligned with
        ``points``; the closing vertex is implicit

    Raises:
        OrphanPoint: a point has no incident triangle or no usable cell
    """
    coordinates = np.asarray(points.coordinates, dtype=np.float64)
    logger.info("Starting tessellation", points=len(coordinates),
                width=bounds.width, height=bounds.height)

    polygons = tuple(
        cell_polygon(i, coordinates, triangulation, bounds)
        for i in range(len(coordinates))
    )

    logger.info("Tessellation complete", cells=len(polygons),
                vertices=sum(len(p) for p in polygons))
    return polygons
