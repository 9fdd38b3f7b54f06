"""
Core mesh generation functionality.
"""

from .alea_prng import AleaPRNG
from .cells import Cell, Mesh, build
from .elevation import NoiseElevation, flat_elevation, per_point
from .exceptions import (
    DegenerateInput, InsufficientPoints, InvalidOptions, MeshGenerationError, OrphanPoint
)
from .pipeline import GenerationOptions, generate, validate_options
from .sampler import PointSet, sample
from .tessellation import Bounds, tessellate
from .triangulation import Triangulation, triangulate

__all__ = ['AleaPRNG', 'Cell', 'Mesh', 'build', 'NoiseElevation', 'flat_elevation', 'per_point',
           'DegenerateInput', 'InsufficientPoints', 'InvalidOptions', 'MeshGenerationError',
           'OrphanPoint', 'GenerationOptions', 'generate', 'validate_options',
           'PointSet', 'sample', 'Bounds', 'tessellate', 'Triangulation', 'triangulate']
