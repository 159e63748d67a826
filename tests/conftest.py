"""Shared fixtures for hex map tests."""

import pytest

from py_hexmap.core.hex_grid import build_hex_grid


@pytest.fixture
def make_grid():
    """Factory building a grid whose land hexes are given as (q, r) pairs."""

    def _make(cols, rows, land=(), radius=10.0, elevation=None):
        grid = build_hex_grid(cols, rows, radius)
        for q, r in land:
            grid.is_land[grid.index(q, r)] = True
        if elevation is not None:
            for cell_id in range(len(grid)):
                grid.elevation[cell_id] = elevation(int(grid.q[cell_id]), int(grid.r[cell_id]))
        return grid

    return _make
