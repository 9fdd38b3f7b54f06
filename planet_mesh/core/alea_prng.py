"""
Alea pseudorandom number generator.

Johannes Baagøe's Alea algorithm: a small, fast generator whose output is a
pure function of its seed arguments. Identical seeds give bit-identical
streams on every host, which is what makes a mesh reproducible from its
seed string.
"""

from typing import List, Sequence

import numpy as np

_MASH_START = 0xEFC8249D
_TWO_POW_32 = 0x100000000
_TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Stateful string hash used to derive the initial Alea state."""

    def __init__(self):
        self.n = _MASH_START

    def __call__(self, data) -> float:
        n = self.n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * _TWO_POW_32
        self.n = n
        return _uint32(n) * _TWO_POW_NEG_32


class AleaPRNG:
    """
    Alea generator seeded from one or more values.

    ``AleaPRNG("x")`` and ``AleaPRNG("x", "elevation")`` are different,
    independent streams of the same family.
    """

    def __init__(self, *seeds):
        if not seeds:
            raise ValueError("AleaPRNG needs at least one seed value")

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for seed in seeds:
            self.s0 -= mash(seed)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(seed)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(seed)
            if self.s2 < 0:
                self.s2 += 1

        self.seeds = tuple(str(seed) for seed in seeds)
        self.draws = 0

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.draws += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Random float in [low, high)."""
        return low + (high - low) * self.random()

    def randint(self, n: int) -> int:
        """Random integer in [0, n)."""
        return int(self.random() * n)

    def choice(self, seq: Sequence):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]

    def permutation(self, n: int) -> np.ndarray:
        """Fisher-Yates shuffle of ``range(n)``."""
        values: List[int] = list(range(n))
        for i in range(n - 1, 0, -1):
            j = self.randint(i + 1)
            values[i], values[j] = values[j], values[i]
        return np.array(values, dtype=np.int64)
