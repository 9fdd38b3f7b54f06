"""
Procedural planet-surface meshes: seeded jittered sampling, Delaunay
triangulation and clipped Voronoi cells.
"""

from .core import (
    Cell, DegenerateInput, GenerationOptions, InsufficientPoints, InvalidOptions, Mesh,
    MeshGenerationError, OrphanPoint, generate
)

__version__ = "0.1.0"

__all__ = ['Cell', 'DegenerateInput', 'GenerationOptions', 'InsufficientPoints', 'InvalidOptions',
           'Mesh', 'MeshGenerationError', 'OrphanPoint', 'generate', '__version__']
