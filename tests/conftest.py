"""Shared fixtures for mesh tests."""

import pytest

from planet_mesh.core import GenerationOptions, generate


@pytest.fixture
def boundary_options():
    """Four-point grid that tiles [0, 100] x [0, 100] exactly."""
    return GenerationOptions(seed="x", width=100, height=100, space=50, chaos=0)


@pytest.fixture
def jittered_options():
    return GenerationOptions(seed="test_seed", width=200, height=150, space=10, chaos=0.8)


@pytest.fixture
def jittered_mesh(jittered_options):
    return generate(jittered_options)
