"""Error types raised by the mesh generation pipeline."""

from typing import Optional


class MeshGenerationError(Exception):
    """Base class for every failure raised while generating a mesh."""


class InvalidOptions(MeshGenerationError, ValueError):
    """Generation options failed validation before any computation started."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DegenerateInput(MeshGenerationError):
    """The sampled points cannot be triangulated (collinear, duplicated...)."""


class InsufficientPoints(DegenerateInput):
    """Fewer than three points were sampled."""

    def __init__(self, count: int):
        super().__init__(f"At least 3 points are required to triangulate, got {count}")
        self.count = count


class OrphanPoint(MeshGenerationError):
    """
    A sample point has no usable Voronoi cell.

    This should never happen after a successful triangulation and points to
    a bug in the triangulation or tessellation stage.
    """

    def __init__(self, index: int, reason: str = "no incident triangles"):
        super().__init__(f"Point {index} has {reason}")
        self.index = index
