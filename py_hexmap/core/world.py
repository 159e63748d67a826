"""
End-to-end world generation pipeline.

Stages run strictly downstream: elevation, land/water classification,
coastline refinement, rivers. Every stage returns a new grid snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

import structlog

from .coastline import CoastOptions, CoastRefiner
from .elevation import ElevationField
from .features import LandWaterClassifier
from .hex_grid import HexGrid, Point
from .hydrology import RiverNetwork, RiverResult
from .map_stats import MapDebugInfo, compute_debug_info
from .smoothing import LoopPolicy, sort_loops_by_area

if TYPE_CHECKING:
    from ..config.world_config import WorldConfig

logger = structlog.get_logger()


@dataclass
class WorldResult:
    """Final grid, rivers and coastline of a generated world."""
    grid: HexGrid
    river_result: RiverResult
    coast_edges: List[List[Point]]
    debug_info: MapDebugInfo
    config: WorldConfig


@dataclass
class WorldSteps:
    """Independent snapshots of each pipeline stage."""
    raw: HexGrid
    land_water: HexGrid
    speck: HexGrid
    refined: HexGrid
    coast_loops: List[List[Point]] = field(default_factory=list)
    main_coast_loop: List[Point] = field(default_factory=list)
    debug_info: Optional[MapDebugInfo] = None


def generate_world(config: WorldConfig) -> WorldResult:
    """
    Generate elevation, coastline and rivers for one world.

    Args:
        config: Validated world options

    Returns:
        WorldResult
    """
    logger.info("Starting world generation", seed=config.seed,
                cols=config.cols, rows=config.rows)

    hex_config = config.hex_map_config()
    raw = ElevationField(hex_config, config.seed).build()

    classifier = LandWaterClassifier(hex_config.sea_level)
    classified = classifier.classify(raw)
    debug_info = compute_debug_info(raw, classified, hex_config.sea_level,
                                    classifier.speck_removed)

    coast = CoastRefiner(config.coast_options()).refine(classified)
    river_result = RiverNetwork(config.river_options()).trace(coast.grid)

    logger.info(
        "World generation completed",
        land_hexes=coast.grid.land_count,
        coast_loops=len(coast.coast_edges),
        rivers=len(river_result.river_polylines),
    )
    return WorldResult(
        grid=coast.grid,
        river_result=river_result,
        coast_edges=coast.coast_edges,
        debug_info=debug_info,
        config=config,
    )


def generate_world_steps(config: WorldConfig) -> WorldSteps:
    """
    Run the land pipeline keeping a snapshot after every stage.

    The coastline step keeps the mask as classified (no erosion or
    dilation) and returns all loops ordered by descending area.

    Args:
        config: Validated world options

    Returns:
        WorldSteps
    """
    hex_config = config.hex_map_config()
    raw = ElevationField(hex_config, config.seed).build()

    classifier = LandWaterClassifier(hex_config.sea_level)
    land_water = classifier.apply_threshold(raw)
    speck = classifier.label_regions(classifier.remove_specks(land_water))

    coast = CoastRefiner(CoastOptions(
        erosion_passes=0,
        dilation_passes=0,
        coast_noise_seed=config.coast_noise_seed,
        policy=LoopPolicy.ALL,
    )).refine(speck)
    loops = sort_loops_by_area(coast.coast_edges)

    logger.info("Step snapshots generated", coast_loops=len(loops))
    return WorldSteps(
        raw=raw,
        land_water=land_water,
        speck=speck,
        refined=coast.grid,
        coast_loops=loops,
        main_coast_loop=loops[0] if loops else [],
        debug_info=compute_debug_info(raw, speck, hex_config.sea_level,
                                      classifier.speck_removed),
    )
