"""
Random number generation utilities.

Every random draw in planet_mesh comes from an Alea stream built from the
mesh seed. There is no global generator: each stage asks for its own stream,
so results never depend on call order or on other invocations running in
parallel. Python's random and NumPy's random are not used.
"""

from ..core.alea_prng import AleaPRNG

# Sub-stream names. Sampling uses the bare seed.
ELEVATION_STREAM = "elevation"


def get_stream(seed: str, *names: str) -> AleaPRNG:
    """
    Build a fresh Alea stream for ``seed``.

    Args:
        seed: Mesh seed string
        names: Optional sub-stream names; different names give independent
            streams of the same family

    Returns:
        New AleaPRNG instance
    """
    return AleaPRNG(seed, *names)


def sampling_stream(seed: str) -> AleaPRNG:
    """Stream used to jitter sample points; a function of ``seed`` alone."""
    return get_stream(seed)


def elevation_stream(seed: str) -> AleaPRNG:
    """Stream used to shuffle the elevation noise permutation table."""
    return get_stream(seed, ELEVATION_STREAM)
