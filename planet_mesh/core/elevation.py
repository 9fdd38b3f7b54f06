"""
Elevation policies for mesh cells.

An elevation function maps sample points to heights. It receives the point
coordinates and their indices as arrays and returns one float per point:

    fn(coordinates: np.ndarray (n, 2), indices: np.ndarray (n,)) -> np.ndarray (n,)

Geometry never depends on elevation, so any callable with that signature
can be injected into the cell builder.
"""

from typing import Callable, Tuple

import numpy as np

from ..utils.random import elevation_stream

ElevationFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]

# Unit gradient directions used by the noise lattice
_GRADIENTS = np.array([
    [1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0],
    [0.7071067811865476, 0.7071067811865476], [-0.7071067811865476, 0.7071067811865476],
    [0.7071067811865476, -0.7071067811865476], [-0.7071067811865476, -0.7071067811865476],
])

# Continent lacunarity from the libnoise complex planet recipe
CONTINENT_LACUNARITY = 2.208984375


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6 - 15) + 10)


def perlin_noise_2d(perm: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    2D gradient noise.

    Args:
        perm: Permutation table of length 512 (a shuffled 0..255 repeated)
        x, y: Sample coordinates

    Returns:
        Noise values, roughly in [-1, 1]
    """
    xi = np.floor(x).astype(np.int64)
    yi = np.floor(y).astype(np.int64)
    xf = x - xi
    yf = y - yi
    xi &= 255
    yi &= 255

    def corner(dx: int, dy: int) -> np.ndarray:
        h = perm[perm[xi + dx] + yi + dy] & 7
        g = _GRADIENTS[h]
        return g[..., 0] * (xf - dx) + g[..., 1] * (yf - dy)

    u = _fade(xf)
    v = _fade(yf)
    bottom = corner(0, 0) + u * (corner(1, 0) - corner(0, 0))
    top = corner(0, 1) + u * (corner(1, 1) - corner(0, 1))
    # Gradient noise on this lattice peaks at sqrt(2)/2
    return (bottom + v * (top - bottom)) * np.sqrt(2.0)


class NoiseElevation:
    """
    Seeded fractal noise elevation.

    The rectangle is mapped onto the plane [-2, 2] x [-2, 2] and sampled
    with fractal Brownian motion of gradient noise. The permutation table is
    shuffled by the seed's elevation stream, so elevations are reproducible
    per seed. Output is clipped to [-1, 1].
    """

    def __init__(
        self,
        seed: str,
        width: float,
        height: float,
        octaves: int = 8,
        frequency: float = 0.4,
        persistence: float = 0.5,
        lacunarity: float = CONTINENT_LACUNARITY,
        plane_bounds: Tuple[float, float] = (-2.0, 2.0),
    ):
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")

        self.seed = seed
        self.width = width
        self.height = height
        self.octaves = octaves
        self.frequency = frequency
        self.persistence = persistence
        self.lacunarity = lacunarity
        self.plane_bounds = plane_bounds

        table = elevation_stream(seed).permutation(256)
        self._perm = np.concatenate([table, table])

    def _to_plane(self, coordinates: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        low, high = self.plane_bounds
        span = high - low
        x = low + coordinates[:, 0] / self.width * span
        y = low + coordinates[:, 1] / self.height * span
        return x, y

    def __call__(self, coordinates: np.ndarray, indices: np.ndarray) -> np.ndarray:
        coordinates = np.asarray(coordinates, dtype=np.float64).reshape(-1, 2)
        x, y = self._to_plane(coordinates)

        total = np.zeros(len(coordinates))
        amplitude = 1.0
        frequency = self.frequency
        norm = 0.0
        for octave in range(self.octaves):
            # Offset each octave so lattice points do not line up
            offset = octave * 31.416
            total += amplitude * perlin_noise_2d(self._perm, x * frequency + offset, y * frequency + offset)
            norm += amplitude
            amplitude *= self.persistence
            frequency *= self.lacunarity

        return np.clip(total / norm, -1.0, 1.0)


def flat_elevation(level: float = 0.0) -> ElevationFunction:
    """Elevation function giving every cell the same height."""
    def elevation(coordinates: np.ndarray, indices: np.ndarray) -> np.ndarray:
        return np.full(len(indices), float(level))
    return elevation


def per_point(fn: Callable[[Tuple[float, float], int], float]) -> ElevationFunction:
    """
    Adapt a scalar ``fn(point, index) -> float`` to the array signature.

    Example:
        per_point(lambda point, i: point[0] / 100)
    """
    def elevation(coordinates: np.ndarray, indices: np.ndarray) -> np.ndarray:
        return np.array(
            [float(fn((float(x), float(y)), int(i))) for (x, y), i in zip(coordinates, indices)],
            dtype=np.float64,
        )
    return elevation
