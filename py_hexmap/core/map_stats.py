"""
Informational statistics about a generated hex map.
"""

from dataclasses import dataclass

import numpy as np

from .hex_grid import HexGrid

# Elevations this close to sea level count as "at" sea level
SEA_LEVEL_TOLERANCE = 0.001


@dataclass
class ElevationStats:
    """Hex counts relative to sea level."""
    below_sea_level: int
    at_sea_level: int
    above_sea_level: int


@dataclass
class MapDebugInfo:
    """Summary of one elevation and classification run."""
    total_hexes: int
    land_hexes: int
    water_hexes: int
    min_elevation: float
    max_elevation: float
    avg_elevation: float
    speck_removed: int
    elevation_stats: ElevationStats


def compute_debug_info(
    raw_grid: HexGrid, classified_grid: HexGrid, sea_level: float, speck_removed: int
) -> MapDebugInfo:
    """
    Summarize elevation and land/water counts.

    Args:
        raw_grid: Grid straight from the elevation field
        classified_grid: Grid after land/water classification
        sea_level: Threshold used for classification
        speck_removed: Number of hexes removed as specks

    Returns:
        MapDebugInfo
    """
    elevation = raw_grid.elevation
    below = elevation < sea_level
    at = ~below & (np.abs(elevation - sea_level) < SEA_LEVEL_TOLERANCE)
    above = ~below & ~at

    land_hexes = classified_grid.land_count
    return MapDebugInfo(
        total_hexes=len(raw_grid),
        land_hexes=land_hexes,
        water_hexes=len(classified_grid) - land_hexes,
        min_elevation=float(elevation.min()),
        max_elevation=float(elevation.max()),
        avg_elevation=float(elevation.mean()),
        speck_removed=speck_removed,
        elevation_stats=ElevationStats(
            below_sea_level=int(np.count_nonzero(below)),
            at_sea_level=int(np.count_nonzero(at)),
            above_sea_level=int(np.count_nonzero(above)),
        ),
    )
