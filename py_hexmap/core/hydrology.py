"""
Hydrology system for river generation on hex maps.

This module implements:
- Steepest-descent flow directions over land hexes
- Topological flow accumulation
- Three-tier river source selection
- River path tracing and smoothing
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import structlog

from .hex_grid import HexGrid, Point
from .smoothing import chaikin_smooth

logger = structlog.get_logger()

NO_FLOW = -1

PRIMARY = 1
SECONDARY = 2
TERTIARY = 3

# Paths must have more points than this to be kept
MIN_PATH_POINTS = {PRIMARY: 4, SECONDARY: 3, TERTIARY: 2}


@dataclass
class RiverOptions:
    """River generation options."""

    min_source_elev: float = 0.5  # Minimum elevation of a primary source
    main_river_accum: int = 20  # Accumulation for a full-width river
    tributary_accum: int = 5  # Minimum accumulation of a primary source
    secondary_stream_accum: int = 15  # Lower bound for secondary streams
    tertiary_stream_accum: int = 10  # Lower bound for tertiary streams
    river_width: float = 2.0  # Width of main rivers
    smooth: int = 2  # Open Chaikin passes per path

    def __post_init__(self):
        if self.smooth < 0:
            raise ValueError(f"smooth must be non-negative, got {self.smooth}")
        if self.river_width < 1:
            raise ValueError(f"river_width must be >= 1, got {self.river_width}")


@dataclass(frozen=True)
class RiverPolyline:
    """A traced river."""
    path: List[Point]
    width: float
    order: int  # 1 = main, 2 = secondary, 3 = tertiary


@dataclass(eq=False)
class RiverResult:
    """Rivers plus the flow graph they were traced from."""
    river_polylines: List[RiverPolyline] = field(default_factory=list)
    flow_dirs: Optional[np.ndarray] = None  # downstream hex index, -1 for none
    flow_accum: Optional[np.ndarray] = None  # land hexes draining through or into each hex


class RiverNetwork:
    """Derives the drainage network and river polylines from a land mask."""

    def __init__(self, options: Optional[RiverOptions] = None):
        """
        Initialize the river network.

        Args:
            options: River generation options
        """
        self.options = options or RiverOptions()

        self.flow_directions = None
        self.flow_accumulation = None
        self.sources = {PRIMARY: [], SECONDARY: [], TERTIARY: []}

    def calculate_flow_directions(self, grid: HexGrid) -> np.ndarray:
        """
        Point every land hex at its lowest strictly-lower neighbor.

        Water neighbors are candidates too, so coastal hexes drain into the
        sea. Ties keep the first neighbor in direction order. Local minima
        and all water hexes get NO_FLOW. Every edge strictly decreases
        elevation, so the graph has no cycles.
        """
        logger.info("Calculating flow directions")

        flow_dirs = np.full(len(grid), NO_FLOW, dtype=np.int32)
        for cell_id in np.flatnonzero(grid.is_land):
            lowest_height = grid.elevation[cell_id]
            lowest_neighbor = NO_FLOW
            for neighbor_id in grid.cell_neighbors[cell_id]:
                if neighbor_id < 0:
                    continue
                if grid.elevation[neighbor_id] < lowest_height:
                    lowest_height = grid.elevation[neighbor_id]
                    lowest_neighbor = neighbor_id
            flow_dirs[cell_id] = lowest_neighbor

        self.flow_directions = flow_dirs
        logger.info("Flow directions calculated",
                    sinks=int(np.count_nonzero(grid.is_land & (flow_dirs == NO_FLOW))))
        return flow_dirs

    def topological_order(self, grid: HexGrid, flow_dirs: np.ndarray) -> List[int]:
        """
        Hexes in depth-first finishing order along flow_dirs, starting from
        every land hex.

        A hex finishes only after everything downstream of it, so the
        reversed order lists each hex before the hex it drains into.
        """
        visited = np.zeros(len(grid), dtype=bool)
        order = []
        for cell_id in np.flatnonzero(grid.is_land):
            chain = []
            current = int(cell_id)
            while current != NO_FLOW and not visited[current]:
                visited[current] = True
                chain.append(current)
                current = int(flow_dirs[current])
            order.extend(reversed(chain))
        return order

    def accumulate_flow(self, grid: HexGrid, flow_dirs: np.ndarray) -> np.ndarray:
        """
        Count the land hexes draining through every hex.

        Returns:
            int array, >= 1 on land; water hexes hold the land flow they
            receive (0 when nothing drains into them)
        """
        logger.info("Accumulating flow")

        flow_accum = grid.is_land.astype(np.int64)
        for cell_id in reversed(self.topological_order(grid, flow_dirs)):
            target = flow_dirs[cell_id]
            if target != NO_FLOW:
                flow_accum[target] += flow_accum[cell_id]

        self.flow_accumulation = flow_accum
        logger.info("Flow accumulation completed",
                    max_accum=int(flow_accum.max()) if len(flow_accum) else 0)
        return flow_accum

    def _is_local_maximum(self, grid: HexGrid, cell_id: int) -> bool:
        height = grid.elevation[cell_id]
        return not any(
            grid.elevation[neighbor_id] > height
            for neighbor_id in grid.cell_neighbors[cell_id]
            if neighbor_id >= 0
        )

    def select_sources(self, grid: HexGrid, flow_accum: np.ndarray) -> dict:
        """
        Pick river sources in three mutually exclusive tiers.

        Primary: local elevation maxima at or above min_source_elev with
        accumulation >= tributary_accum. Secondary and tertiary: unclaimed
        land hexes inside their accumulation bands.
        """
        opts = self.options
        land = np.flatnonzero(grid.is_land)
        claimed = set()

        primary = []
        for cell_id in land:
            if grid.elevation[cell_id] < opts.min_source_elev:
                continue
            if self._is_local_maximum(grid, cell_id) and flow_accum[cell_id] >= opts.tributary_accum:
                primary.append(int(cell_id))
        claimed.update(primary)

        secondary = []
        for cell_id in land:
            if cell_id in claimed:
                continue
            if opts.secondary_stream_accum <= flow_accum[cell_id] < opts.main_river_accum:
                secondary.append(int(cell_id))
        claimed.update(secondary)

        tertiary = []
        for cell_id in land:
            if cell_id in claimed:
                continue
            if opts.tertiary_stream_accum <= flow_accum[cell_id] < opts.secondary_stream_accum:
                tertiary.append(int(cell_id))

        self.sources = {PRIMARY: primary, SECONDARY: secondary, TERTIARY: tertiary}
        logger.info("River sources selected", primary=len(primary),
                    secondary=len(secondary), tertiary=len(tertiary))
        return self.sources

    def trace_path(self, grid: HexGrid, flow_dirs: np.ndarray, source: int) -> List[Point]:
        """
        Follow flow_dirs from a source, recording hex centres.

        Stops at NO_FLOW or water. Paths strictly descend, so the land hex
        count bounds their length.
        """
        path = []
        current = source
        for _ in range(max(grid.land_count, 1)):
            if current == NO_FLOW or not grid.is_land[current]:
                break
            path.append(grid.point(current))
            current = int(flow_dirs[current])
        return path

    def _width(self, order: int, accum: int) -> float:
        opts = self.options
        if order == PRIMARY:
            if accum >= opts.main_river_accum:
                return float(opts.river_width)
            return float(max(1, opts.river_width - 1))
        if order == SECONDARY:
            return float(max(1, opts.river_width - 2))
        return 1.0

    def trace(self, grid: HexGrid) -> RiverResult:
        """
        Generate the river network for a classified grid.

        Args:
            grid: Grid with elevation and is_land set

        Returns:
            RiverResult with polylines ordered primary, secondary, tertiary
        """
        logger.info("Starting river generation", land_hexes=grid.land_count)

        flow_dirs = self.calculate_flow_directions(grid)
        flow_accum = self.accumulate_flow(grid, flow_dirs)
        sources = self.select_sources(grid, flow_accum)

        polylines = []
        for order in (PRIMARY, SECONDARY, TERTIARY):
            for source in sources[order]:
                path = self.trace_path(grid, flow_dirs, source)
                if len(path) <= MIN_PATH_POINTS[order]:
                    continue
                polylines.append(RiverPolyline(
                    path=chaikin_smooth(path, self.options.smooth, closed=False),
                    width=self._width(order, int(flow_accum[source])),
                    order=order,
                ))

        logger.info("Rivers generated", count=len(polylines))
        return RiverResult(river_polylines=polylines, flow_dirs=flow_dirs, flow_accum=flow_accum)
