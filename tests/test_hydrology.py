"""
Tests for the river network.

Tests cover:
- Flow directions and flow accumulation
- River source selection and widths
- Drainage graph properties on generated maps
"""

import numpy as np
import pytest

from py_hexmap.core.elevation import HexMapConfig, generate_hex_map
from py_hexmap.core.features import LandWaterClassifier
from py_hexmap.core.hydrology import (
    NO_FLOW,
    PRIMARY,
    SECONDARY,
    TERTIARY,
    RiverNetwork,
    RiverOptions,
)


def slope(q, r):
    """Elevation falling to the east."""
    return 0.9 - 0.1 * q


@pytest.fixture
def sloped_grid(make_grid):
    return make_grid(8, 3, land=[(q, r) for r in range(3) for q in range(8)], elevation=slope)


@pytest.fixture
def tight_options():
    return RiverOptions(
        min_source_elev=0.5,
        main_river_accum=7,
        tributary_accum=1,
        secondary_stream_accum=5,
        tertiary_stream_accum=3,
        river_width=3,
        smooth=0,
    )


@pytest.fixture
def generated_grid():
    config = HexMapConfig(radius=20, cols=24, rows=18, octaves=4, noise_scale=80,
                          noise_weight=0.8, shape_weight=0.4)
    return LandWaterClassifier(config.sea_level).classify(generate_hex_map(31, config))


class TestRiverOptions:
    """Option validation."""

    def test_defaults(self):
        options = RiverOptions()
        assert options.main_river_accum == 20
        assert options.tributary_accum == 5
        assert options.river_width == 2.0

    def test_invalid(self):
        with pytest.raises(ValueError):
            RiverOptions(smooth=-1)
        with pytest.raises(ValueError):
            RiverOptions(river_width=0.5)


class TestFlow:
    """Flow directions and accumulation."""

    def test_flows_east(self, sloped_grid):
        network = RiverNetwork()
        flow_dirs = network.calculate_flow_directions(sloped_grid)
        for r in range(3):
            for q in range(7):
                assert flow_dirs[sloped_grid.index(q, r)] == sloped_grid.index(q + 1, r)
            assert flow_dirs[sloped_grid.index(7, r)] == NO_FLOW

    def test_accumulation_counts_upstream_hexes(self, sloped_grid):
        network = RiverNetwork()
        flow_dirs = network.calculate_flow_directions(sloped_grid)
        flow_accum = network.accumulate_flow(sloped_grid, flow_dirs)
        for r in range(3):
            for q in range(8):
                assert flow_accum[sloped_grid.index(q, r)] == q + 1
        sinks = flow_dirs == NO_FLOW
        assert flow_accum[sinks].sum() == 24

    def test_coastal_hexes_drain_into_sea(self, make_grid):
        # Rows 0-1 are land falling to the east, row 2 is low sea
        land = [(q, r) for r in range(2) for q in range(6)]
        grid = make_grid(6, 3, land=land,
                         elevation=lambda q, r: 0.1 if r == 2 else slope(q, r))
        network = RiverNetwork()
        flow_dirs = network.calculate_flow_directions(grid)

        for q in range(6):
            assert flow_dirs[grid.index(q, 1)] == grid.index(q, 2)
            assert flow_dirs[grid.index(q, 2)] == NO_FLOW
        for q in range(5):
            assert flow_dirs[grid.index(q, 0)] == grid.index(q + 1, 0)
        assert flow_dirs[grid.index(5, 0)] == NO_FLOW

        assert network.trace_path(grid, flow_dirs, grid.index(0, 1)) == [
            grid.point(grid.index(0, 1))
        ]

    def test_sea_collects_land_flow(self, make_grid):
        grid = make_grid(8, 3, land=[(q, r) for r in range(3) for q in range(7)], elevation=slope)
        result = RiverNetwork().trace(grid)

        for r in range(3):
            assert result.flow_dirs[grid.index(6, r)] == grid.index(7, r)
            assert result.flow_accum[grid.index(6, r)] == 7
            assert result.flow_dirs[grid.index(7, r)] == NO_FLOW
            assert result.flow_accum[grid.index(7, r)] == 7

        terminals = result.flow_dirs == NO_FLOW
        assert result.flow_accum[terminals].sum() == grid.land_count

    def test_flat_land_has_no_flow(self, make_grid):
        grid = make_grid(4, 4, land=[(q, r) for r in range(4) for q in range(4)],
                         elevation=lambda q, r: 0.7)
        result = RiverNetwork().trace(grid)
        assert np.all(result.flow_dirs == NO_FLOW)
        assert np.all(result.flow_accum == 1)
        assert result.river_polylines == []

    def test_all_water(self, make_grid):
        grid = make_grid(5, 5, elevation=slope)
        result = RiverNetwork().trace(grid)
        assert result.river_polylines == []
        assert np.all(result.flow_dirs == NO_FLOW)
        assert np.all(result.flow_accum == 0)


class TestRivers:
    """Source tiers, path lengths and widths."""

    def test_source_tiers(self, sloped_grid, tight_options):
        network = RiverNetwork(tight_options)
        network.trace(sloped_grid)
        q_of = lambda ids: sorted(int(sloped_grid.q[i]) for i in ids)

        assert q_of(network.sources[PRIMARY]) == [0, 0, 0]
        assert q_of(network.sources[SECONDARY]) == [4, 4, 4, 5, 5, 5]
        assert q_of(network.sources[TERTIARY]) == [2, 2, 2, 3, 3, 3]

    def test_polylines(self, sloped_grid, tight_options):
        result = RiverNetwork(tight_options).trace(sloped_grid)
        orders = [river.order for river in result.river_polylines]
        # Secondary sources at q=5 trace only three hexes and are dropped
        assert orders == [1, 1, 1, 2, 2, 2] + [3] * 6

        widths = {river.order: river.width for river in result.river_polylines}
        assert widths == {PRIMARY: 2.0, SECONDARY: 1.0, TERTIARY: 1.0}

        main = result.river_polylines[0]
        assert len(main.path) == 8
        assert main.path[0] == sloped_grid.point(sloped_grid.index(0, 0))
        assert main.path[-1] == sloped_grid.point(sloped_grid.index(7, 0))

    def test_full_width_above_main_accumulation(self, sloped_grid):
        network = RiverNetwork(RiverOptions(river_width=3))
        assert network._width(PRIMARY, 20) == 3.0
        assert network._width(PRIMARY, 19) == 2.0
        assert network._width(SECONDARY, 16) == 1.0
        assert network._width(TERTIARY, 11) == 1.0

    def test_smoothing_keeps_endpoints(self, sloped_grid, tight_options):
        tight_options.smooth = 2
        result = RiverNetwork(tight_options).trace(sloped_grid)
        main = result.river_polylines[0]
        assert len(main.path) == 32
        assert main.path[0] == pytest.approx(sloped_grid.point(sloped_grid.index(0, 0)))
        assert main.path[-1] == pytest.approx(sloped_grid.point(sloped_grid.index(7, 0)))

    def test_trace_path_stops_at_water(self, make_grid):
        grid = make_grid(6, 1, land=[(q, 0) for q in range(4)], elevation=slope)
        network = RiverNetwork()
        flow_dirs = network.calculate_flow_directions(grid)
        path = network.trace_path(grid, flow_dirs, grid.index(0, 0))
        assert len(path) == 4


class TestDrainageGraph:
    """Properties of the drainage graph on generated maps."""

    def test_flow_strictly_descends(self, generated_grid):
        flow_dirs = RiverNetwork().calculate_flow_directions(generated_grid)
        for cell_id in np.flatnonzero(flow_dirs != NO_FLOW):
            target = flow_dirs[cell_id]
            assert generated_grid.elevation[target] < generated_grid.elevation[cell_id]
            assert target in generated_grid.neighbors(cell_id)

    def test_every_chain_terminates(self, generated_grid):
        flow_dirs = RiverNetwork().calculate_flow_directions(generated_grid)
        limit = generated_grid.land_count
        for cell_id in np.flatnonzero(generated_grid.is_land):
            current = int(cell_id)
            for _ in range(limit + 1):
                if flow_dirs[current] == NO_FLOW:
                    break
                current = int(flow_dirs[current])
            assert flow_dirs[current] == NO_FLOW

    def test_accumulation_is_conserved(self, generated_grid):
        result = RiverNetwork().trace(generated_grid)
        land = generated_grid.is_land
        assert np.all(result.flow_accum[land] >= 1)
        # Land sinks and sea hexes are the only terminals
        terminals = result.flow_dirs == NO_FLOW
        assert np.all(terminals[~land])
        assert result.flow_accum[terminals].sum() == generated_grid.land_count

    def test_only_land_hexes_flow(self, generated_grid):
        flow_dirs = RiverNetwork().calculate_flow_directions(generated_grid)
        assert np.all(flow_dirs[~generated_grid.is_land] == NO_FLOW)

    def test_local_maxima_have_unit_accumulation(self, generated_grid):
        network = RiverNetwork()
        result = network.trace(generated_grid)
        for cell_id in np.flatnonzero(generated_grid.is_land):
            if network._is_local_maximum(generated_grid, cell_id):
                assert result.flow_accum[cell_id] == 1

    def test_source_tiers_disjoint(self, generated_grid):
        network = RiverNetwork(RiverOptions(tributary_accum=1, secondary_stream_accum=4,
                                            tertiary_stream_accum=2, main_river_accum=8))
        network.trace(generated_grid)
        tiers = [set(network.sources[order]) for order in (PRIMARY, SECONDARY, TERTIARY)]
        assert not tiers[0] & tiers[1]
        assert not tiers[0] & tiers[2]
        assert not tiers[1] & tiers[2]

    def test_river_paths_start_on_land(self, generated_grid):
        result = RiverNetwork(RiverOptions(smooth=0, tertiary_stream_accum=2,
                                           secondary_stream_accum=4)).trace(generated_grid)
        land_points = {generated_grid.point(i) for i in np.flatnonzero(generated_grid.is_land)}
        for river in result.river_polylines:
            assert all(point in land_points for point in river.path)
            assert len(river.path) > 2
