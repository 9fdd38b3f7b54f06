"""Tests for the generation pipeline."""

import math
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import numpy as np
import pytest
from shapely.geometry import Polygon, box
from shapely.ops import unary_union

from planet_mesh.core import (
    DegenerateInput, GenerationOptions, InsufficientPoints, InvalidOptions, OrphanPoint,
    generate, per_point, sample, validate_options
)
from planet_mesh.serialization import mesh_to_payload


class TestValidation:
    """Test option validation."""

    @pytest.mark.parametrize("changes,field", [
        ({"seed": ""}, "seed"),
        ({"seed": None}, "seed"),
        ({"seed": 42}, "seed"),
        ({"width": 0}, "width"),
        ({"width": -10}, "width"),
        ({"width": math.inf}, "width"),
        ({"width": True}, "width"),
        ({"height": -1}, "height"),
        ({"height": "100"}, "height"),
        ({"space": 0}, "space"),
        ({"space": math.nan}, "space"),
        ({"chaos": -0.1}, "chaos"),
        ({"chaos": 1.5}, "chaos"),
        ({"chaos": math.nan}, "chaos"),
    ])
    def test_invalid(self, changes, field):
        values = dict(seed="seed", width=100, height=100, space=10, chaos=0.5)
        values.update(changes)
        with pytest.raises(InvalidOptions) as exc_info:
            validate_options(GenerationOptions(**values))
        assert exc_info.value.field == field

    @pytest.mark.parametrize("chaos", [0, 0.0, 0.5, 1, 1.0])
    def test_valid_chaos(self, chaos):
        validate_options(GenerationOptions(seed="s", width=100, height=100, space=10, chaos=chaos))

    def test_invalid_options_is_value_error(self):
        with pytest.raises(ValueError):
            generate(GenerationOptions(seed="", width=100, height=100, space=10, chaos=0.5))

    def test_validation_before_sampling(self):
        options = GenerationOptions(seed="s", width=100, height=100, space=10, chaos=2)
        with patch("planet_mesh.core.pipeline.sample") as mock_sample:
            with pytest.raises(InvalidOptions):
                generate(options)
        mock_sample.assert_not_called()


class TestGenerate:
    """Test complete mesh generation."""

    def test_boundary_scenario(self, boundary_options):
        mesh = generate(boundary_options)
        assert [cell.center for cell in mesh] == [(50.0, 50.0), (50.0, 100.0), (100.0, 50.0), (100.0, 100.0)]
        union = unary_union([Polygon(cell.polygon) for cell in mesh])
        assert union.equals(box(0, 0, 100, 100))
        assert sum(cell.area for cell in mesh) == pytest.approx(10000)

    def test_determinism(self, jittered_options):
        assert mesh_to_payload(generate(jittered_options)) == mesh_to_payload(generate(jittered_options))

    def test_determinism_across_threads(self, jittered_options):
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: mesh_to_payload(generate(jittered_options)), range(4)))
        assert all(result == results[0] for result in results)

    def test_different_seeds(self, jittered_options):
        other = GenerationOptions(seed="other", width=jittered_options.width, height=jittered_options.height,
                                  space=jittered_options.space, chaos=jittered_options.chaos)
        assert mesh_to_payload(generate(jittered_options)) != mesh_to_payload(generate(other))

    def test_index_alignment(self, jittered_options, jittered_mesh):
        points = sample(jittered_options.seed, jittered_options.width, jittered_options.height,
                        jittered_options.space, jittered_options.chaos)
        assert len(jittered_mesh) == len(points)
        for i, cell in enumerate(jittered_mesh):
            assert cell.center == points[i]

    def test_polygons_valid_and_contained(self, jittered_options, jittered_mesh):
        for cell in jittered_mesh:
            shape = Polygon(cell.polygon)
            assert len(cell.polygon) >= 3
            assert shape.is_valid
            for x, y in cell.polygon:
                assert 0 <= x <= jittered_options.width
                assert 0 <= y <= jittered_options.height

    def test_default_elevation_seeded(self, jittered_mesh):
        elevations = jittered_mesh.elevations
        assert elevations.min() >= -1.0
        assert elevations.max() <= 1.0
        assert elevations.std() > 0

    def test_custom_elevation(self, boundary_options):
        mesh = generate(boundary_options, per_point(lambda point, index: point[1] / 100))
        assert [cell.elevation for cell in mesh] == [0.5, 1.0, 0.5, 1.0]

    def test_chaos_bound(self):
        options = GenerationOptions(seed="chaos", width=100, height=100, space=10, chaos=1)
        mesh = generate(options)
        grid = np.array([[(i + 1) * 10, (j + 1) * 10] for i in range(10) for j in range(10)])
        centers = np.array([cell.center for cell in mesh])
        assert np.abs(centers - grid).max() <= 5


class TestFailures:
    """Test failure propagation."""

    def test_degenerate_scenario(self):
        options = GenerationOptions(seed="x", width=10, height=10, space=20, chaos=0.5)
        with pytest.raises(InsufficientPoints):
            generate(options)

    def test_single_row(self):
        options = GenerationOptions(seed="x", width=100, height=30, space=25, chaos=0)
        with pytest.raises(DegenerateInput):
            generate(options)

    def test_stage_failure_propagates_unwrapped(self, boundary_options):
        error = OrphanPoint(2)
        with patch("planet_mesh.core.pipeline.tessellate", side_effect=error):
            with pytest.raises(OrphanPoint) as exc_info:
                generate(boundary_options)
        assert exc_info.value is error
