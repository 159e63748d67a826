"""
End-to-end tests for the world pipeline.
"""

import numpy as np
import pytest

from py_hexmap.config import WorldConfig
from py_hexmap.core.hydrology import NO_FLOW
from py_hexmap.core.map_stats import compute_debug_info
from py_hexmap.core.smoothing import polygon_area
from py_hexmap.core.world import WorldSteps, generate_world, generate_world_steps


@pytest.fixture
def config():
    return WorldConfig(
        seed=7,
        cols=20,
        rows=15,
        hex_radius=20,
        noise_scale=100,
        noise_weight=0.7,
        shape_weight=0.3,
        octaves=4,
    )


class TestGenerateWorld:
    """Full pipeline runs."""

    def test_deterministic(self, config):
        a = generate_world(config)
        b = generate_world(config)
        np.testing.assert_array_equal(a.grid.elevation, b.grid.elevation)
        np.testing.assert_array_equal(a.grid.is_land, b.grid.is_land)
        assert a.coast_edges == b.coast_edges
        assert [r.path for r in a.river_result.river_polylines] == \
            [r.path for r in b.river_result.river_polylines]

    def test_single_coast_loop(self, config):
        result = generate_world(config)
        assert len(result.coast_edges) <= 1
        assert result.config is config

    def test_grid_consistency(self, config):
        grid = generate_world(config).grid
        assert len(grid) == 300
        assert np.all((grid.elevation >= 0.0) & (grid.elevation <= 1.0))
        assert np.all(grid.region[grid.is_land] > 0)
        assert np.all(grid.region[~grid.is_land] == 0)

    def test_rivers_drain_refined_grid(self, config):
        result = generate_world(config)
        flow_accum = result.river_result.flow_accum
        assert np.all(flow_accum[result.grid.is_land] >= 1)
        terminals = result.river_result.flow_dirs == NO_FLOW
        assert flow_accum[terminals].sum() == result.grid.land_count

    def test_no_land_above_max_elevation(self):
        result = generate_world(WorldConfig(cols=5, rows=5, sea_level=1.1))
        assert result.grid.land_count == 0
        assert result.coast_edges == []
        assert result.river_result.river_polylines == []

    def test_everything_land_below_zero(self):
        result = generate_world(WorldConfig(cols=5, rows=5, sea_level=-0.1))
        assert result.grid.land_count == 25
        assert result.debug_info.speck_removed == 0
        assert result.coast_edges == []

    def test_different_seeds_differ(self, config):
        other = config.model_copy(update={"seed": 8})
        assert not np.array_equal(generate_world(config).grid.elevation,
                                  generate_world(other).grid.elevation)


class TestGenerateWorldSteps:
    """Stage snapshots."""

    def test_snapshots_are_independent(self, config):
        steps = generate_world_steps(config)
        assert not steps.raw.is_land.any()
        assert steps.raw.is_land is not steps.land_water.is_land
        np.testing.assert_array_equal(steps.raw.elevation, steps.land_water.elevation)

    def test_speck_removal_only_removes(self, config):
        steps = generate_world_steps(config)
        assert np.all(steps.land_water.is_land[steps.speck.is_land])
        assert steps.land_water.land_count - steps.speck.land_count == \
            steps.debug_info.speck_removed

    def test_refined_keeps_mask(self, config):
        steps = generate_world_steps(config)
        np.testing.assert_array_equal(steps.refined.is_land, steps.speck.is_land)

    def test_loops_sorted(self, config):
        steps = generate_world_steps(config)
        areas = [abs(polygon_area(loop)) for loop in steps.coast_loops]
        assert areas == sorted(areas, reverse=True)
        if steps.coast_loops:
            assert steps.main_coast_loop == steps.coast_loops[0]
        else:
            assert steps.main_coast_loop == []

    def test_steps_debug_info_optional(self, make_grid):
        grid = make_grid(2, 2)
        steps = WorldSteps(raw=grid, land_water=grid, speck=grid, refined=grid)
        assert steps.debug_info is None
        assert steps.coast_loops == []
        assert steps.main_coast_loop == []


class TestDebugInfo:
    """Map statistics."""

    def test_counts_add_up(self, config):
        info = generate_world(config).debug_info
        assert info.total_hexes == 300
        assert info.land_hexes + info.water_hexes == info.total_hexes
        stats = info.elevation_stats
        assert stats.below_sea_level + stats.at_sea_level + stats.above_sea_level == 300
        assert 0.0 <= info.min_elevation <= info.avg_elevation <= info.max_elevation <= 1.0

    def test_sea_level_tolerance(self, make_grid):
        raw = make_grid(4, 1, elevation=lambda q, r: [0.2, 0.5, 0.5005, 0.9][q])
        classified = make_grid(4, 1, land=[(3, 0)])
        info = compute_debug_info(raw, classified, 0.5, 0)

        assert info.elevation_stats.below_sea_level == 1
        assert info.elevation_stats.at_sea_level == 2
        assert info.elevation_stats.above_sea_level == 1
        assert info.land_hexes == 1
        assert info.water_hexes == 3
        assert info.avg_elevation == pytest.approx((0.2 + 0.5 + 0.5005 + 0.9) / 4)
