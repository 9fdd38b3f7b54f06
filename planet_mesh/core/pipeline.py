"""Mesh generation pipeline: sample, triangulate, tessellate, build cells."""

import math
import time
from dataclasses import dataclass

import structlog

from .cells import Mesh, build
from .elevation import ElevationFunction, NoiseElevation
from .exceptions import InvalidOptions
from .sampler import sample
from .tessellation import Bounds, tessellate
from .triangulation import triangulate

logger = structlog.get_logger()


@dataclass(frozen=True)
class GenerationOptions:
    """Parameters of one mesh generation."""
    seed: str
    width: float
    height: float
    space: float    # target spacing between sample points
    chaos: float    # jitter magnitude as a fraction of space, in [0, 1]

    @property
    def bounds(self) -> Bounds:
        return Bounds(width=self.width, height=self.height)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_options(options: GenerationOptions) -> None:
    """
    Check options before any computation starts.

    ``space`` larger than the rectangle is not rejected here: it yields too
    few points and is reported by the triangulator as InsufficientPoints.

    Raises:
        InvalidOptions: on the first invalid field
    """
    if not isinstance(options.seed, str) or not options.seed:
        raise InvalidOptions("seed must be a non-empty string", field="seed")

    for name in ("width", "height", "space"):
        value = getattr(options, name)
        if not _is_number(value) or not math.isfinite(value) or value <= 0:
            raise InvalidOptions(f"{name} must be a finite positive number, got {value!r}", field=name)

    chaos = options.chaos
    if not _is_number(chaos) or not 0 <= chaos <= 1:
        raise InvalidOptions(f"chaos must be a number in [0, 1], got {chaos!r}", field="chaos")


def generate(options: GenerationOptions, elevation_fn: ElevationFunction = None) -> Mesh:
    """
    Generate a complete mesh.

    Runs sampler, triangulator, tessellator and cell builder in sequence.
    The first failure of any stage propagates unchanged; no partial mesh is
    ever returned.

    Args:
        options: Generation parameters
        elevation_fn: Elevation policy; defaults to NoiseElevation keyed off
            the seed

    Returns:
        Mesh index-aligned with the sampled points
    """
    validate_options(options)

    log = logger.bind(seed=options.seed)
    log.info("Generating mesh", width=options.width, height=options.height,
             space=options.space, chaos=options.chaos)
    start = time.perf_counter()

    points = sample(options.seed, options.width, options.height, options.space, options.chaos)
    sampled = time.perf_counter()

    triangulation = triangulate(points)
    triangulated = time.perf_counter()

    polygons = tessellate(points, triangulation, options.bounds)
    tessellated = time.perf_counter()

    if elevation_fn is None:
        elevation_fn = NoiseElevation(options.seed, options.width, options.height)
    mesh = build(points, polygons, elevation_fn, triangulation, options.bounds)
    end = time.perf_counter()

    log.info("Mesh generated",
             cells=len(mesh),
             sample_ms=round((sampled - start) * 1000, 2),
             triangulate_ms=round((triangulated - sampled) * 1000, 2),
             tessellate_ms=round((tessellated - triangulated) * 1000, 2),
             build_ms=round((end - tessellated) * 1000, 2),
             total_ms=round((end - start) * 1000, 2))
    return mesh
