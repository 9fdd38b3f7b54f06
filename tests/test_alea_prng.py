"""Tests for the Alea PRNG and seeded streams."""

import numpy as np
import pytest

from planet_mesh.core.alea_prng import AleaPRNG
from planet_mesh.utils.random import elevation_stream, get_stream, sampling_stream


class TestAleaPRNG:
    """Test the Alea generator."""

    def test_same_seed_same_sequence(self):
        a = AleaPRNG("planet")
        b = AleaPRNG("planet")
        assert [a.random() for _ in range(100)] == [b.random() for _ in range(100)]

    def test_values_in_unit_interval(self):
        prng = AleaPRNG("range")
        values = [prng.random() for _ in range(1000)]
        assert min(values) >= 0.0
        assert max(values) < 1.0

    def test_different_seeds(self):
        a = AleaPRNG("seed1")
        b = AleaPRNG("seed2")
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    def test_sub_streams_are_distinct(self):
        """Extra seed values give a different stream of the same family."""
        a = AleaPRNG("seed")
        b = AleaPRNG("seed", "elevation")
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    def test_draw_counter(self):
        prng = AleaPRNG("count")
        for _ in range(7):
            prng.random()
        assert prng.draws == 7

    def test_requires_seed(self):
        with pytest.raises(ValueError):
            AleaPRNG()

    def test_uniform_and_randint(self):
        prng = AleaPRNG("bounds")
        for _ in range(200):
            assert 5.0 <= prng.uniform(5.0, 6.0) < 6.0
            assert 0 <= prng.randint(4) < 4

    def test_choice(self):
        prng = AleaPRNG("choice")
        assert prng.choice(["a", "b", "c"]) in ("a", "b", "c")
        with pytest.raises(IndexError):
            prng.choice([])

    def test_permutation(self):
        perm = AleaPRNG("perm").permutation(256)
        assert sorted(perm.tolist()) == list(range(256))
        np.testing.assert_array_equal(perm, AleaPRNG("perm").permutation(256))
        assert not np.array_equal(perm, np.arange(256))


class TestStreams:
    """Test the named stream helpers."""

    def test_sampling_stream_uses_seed_alone(self):
        assert sampling_stream("abc").random() == AleaPRNG("abc").random()

    def test_elevation_stream_differs_from_sampling(self):
        assert elevation_stream("abc").random() != sampling_stream("abc").random()

    def test_fresh_stream_every_call(self):
        first = get_stream("abc")
        first.random()
        assert get_stream("abc").random() == AleaPRNG("abc").random()
