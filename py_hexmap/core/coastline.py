"""
Coastline refinement and vectorization.

This module implements:
- Noise-modulated erosion and dilation of the land mask
- Boundary walks over coastal hex centres (CoastRefiner)
- Hex-edge segment stitching into closed loops (CoastlineTracer)
- Region border segments for debug overlays
"""

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

import numpy as np
import structlog

from .features import label_regions
from .hex_grid import HexGrid, Point
from .noise import NoiseSource
from .smoothing import LoopPolicy, chaikin_smooth, select_loops

logger = structlog.get_logger()

# Scale applied to pixel positions before sampling the coast noise
COAST_NOISE_FREQUENCY = 0.01

# Pointy-top corner k sits at angle 60*k - 30 degrees; side k joins corners k and k+1
CORNER_OFFSETS = tuple(
    (math.cos(math.radians(60 * k - 30)), math.sin(math.radians(60 * k - 30)))
    for k in range(6)
)

# Lattice offset of the hex across side k, by row parity (odd rows shifted right)
SIDE_NEIGHBORS_EVEN = ((1, 0), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1))
SIDE_NEIGHBORS_ODD = ((1, 0), (1, 1), (0, 1), (-1, 0), (0, -1), (1, -1))

POINT_EPSILON = 1e-6
_BUCKET_SIZE = 1e-3


class Segment(NamedTuple):
    """Directed hex side."""
    start: Point
    end: Point


@dataclass
class CoastOptions:
    """Coastline refinement options."""

    erosion_passes: int = 1
    dilation_passes: int = 1
    coast_noise_seed: int = 12345
    smooth_passes: int = 2  # closed Chaikin passes per loop
    policy: LoopPolicy = LoopPolicy.LARGEST

    def __post_init__(self):
        if self.erosion_passes < 0 or self.dilation_passes < 0:
            raise ValueError("erosion_passes and dilation_passes must be non-negative")
        if self.smooth_passes < 0:
            raise ValueError(f"smooth_passes must be non-negative, got {self.smooth_passes}")
        self.policy = LoopPolicy(self.policy)


@dataclass
class CoastResult:
    """Refined land mask and its coastline loops."""
    grid: HexGrid
    coast_edges: List[List[Point]]


class CoastRefiner:
    """Erodes and dilates the land mask, then walks its coastal hexes into loops."""

    def __init__(self, options: Optional[CoastOptions] = None):
        """
        Initialize the refiner.

        Args:
            options: Coastline refinement options
        """
        self.options = options or CoastOptions()
        self.noise = NoiseSource(self.options.coast_noise_seed)

    def coast_noise(self, grid: HexGrid) -> np.ndarray:
        """Per-hex coast noise in [0, 1]."""
        return np.fromiter(
            (
                self.noise.sample01(x * COAST_NOISE_FREQUENCY, y * COAST_NOISE_FREQUENCY)
                for x, y in grid.points
            ),
            dtype=np.float64,
            count=len(grid),
        )

    def erode(self, grid: HexGrid, noise: np.ndarray) -> HexGrid:
        """
        One erosion pass.

        A land hex becomes water when its water neighbor count reaches
        2 + 2*noise. Marks are taken against the incoming mask and applied
        together.
        """
        result = grid.copy()
        water_neighbors = grid.neighbor_counts(~grid.is_land)
        threshold = 2 + noise * 2
        to_water = grid.is_land & (water_neighbors >= threshold)
        result.is_land[to_water] = False
        logger.debug("Erosion pass", eroded=int(np.count_nonzero(to_water)))
        return result

    def dilate(self, grid: HexGrid, noise: np.ndarray) -> HexGrid:
        """
        One dilation pass.

        A water hex becomes land when its land neighbor count reaches
        4 - 2*noise. Batched like erode().
        """
        result = grid.copy()
        land_neighbors = grid.neighbor_counts(grid.is_land)
        threshold = 4 - noise * 2
        to_land = ~grid.is_land & (land_neighbors >= threshold)
        result.is_land[to_land] = True
        logger.debug("Dilation pass", dilated=int(np.count_nonzero(to_land)))
        return result

    def walk_boundaries(self, grid: HexGrid) -> List[List[Point]]:
        """
        Walk coastal hexes into vertex chains.

        A coastal hex is a land hex with at least one in-grid water neighbor.
        From every unvisited coastal hex (row-major) the walk moves to the
        first unvisited coastal neighbor in direction order, recording pixel
        centres. Each hex is visited at most once, so the hex count bounds
        every walk.

        Returns:
            Unsmoothed chains with more than two vertices
        """
        coastal = grid.is_land & (grid.neighbor_counts(~grid.is_land) > 0)
        visited = np.zeros(len(grid), dtype=bool)
        max_steps = len(grid)
        chains = []

        for start in range(len(grid)):
            if not coastal[start] or visited[start]:
                continue

            chain = []
            current = start
            for _ in range(max_steps):
                visited[current] = True
                chain.append(grid.point(current))

                next_cell = -1
                for neighbor_id in grid.cell_neighbors[current]:
                    if neighbor_id >= 0 and coastal[neighbor_id] and not visited[neighbor_id]:
                        next_cell = int(neighbor_id)
                        break
                if next_cell < 0:
                    break
                current = next_cell

            if len(chain) > 2:
                chains.append(chain)

        return chains

    def refine(self, grid: HexGrid) -> CoastResult:
        """
        Refine the land mask and extract the coastline.

        Args:
            grid: Classified grid

        Returns:
            CoastResult with the refined grid and loops chosen by the policy
        """
        opts = self.options
        logger.info(
            "Refining coastline",
            erosion_passes=opts.erosion_passes,
            dilation_passes=opts.dilation_passes,
            land_hexes=grid.land_count,
        )

        refined = grid.copy()
        if opts.erosion_passes or opts.dilation_passes:
            noise = self.coast_noise(grid)
            for _ in range(opts.erosion_passes):
                refined = self.erode(refined, noise)
            for _ in range(opts.dilation_passes):
                refined = self.dilate(refined, noise)

        refined, _ = label_regions(refined)

        loops = [
            chaikin_smooth(chain, opts.smooth_passes, closed=True)
            for chain in self.walk_boundaries(refined)
        ]
        coast_edges = select_loops(loops, opts.policy)

        logger.info(
            "Coastline refined",
            land_hexes=refined.land_count,
            loops_traced=len(loops),
            loops_kept=len(coast_edges),
        )
        return CoastResult(grid=refined, coast_edges=coast_edges)


def side_neighbor(grid: HexGrid, cell_id: int, side: int) -> Optional[int]:
    """Index of the hex across a side, or None when it lies outside the grid."""
    q = int(grid.q[cell_id])
    r = int(grid.r[cell_id])
    offsets = SIDE_NEIGHBORS_ODD if r & 1 else SIDE_NEIGHBORS_EVEN
    dq, dr = offsets[side]
    nq, nr = q + dq, r + dr
    if not grid.in_bounds(nq, nr):
        return None
    return grid.index(nq, nr)


def side_segment(grid: HexGrid, cell_id: int, side: int) -> Segment:
    """Pixel endpoints of one side of a hex."""
    cx, cy = grid.points[cell_id]
    c0 = CORNER_OFFSETS[side]
    c1 = CORNER_OFFSETS[(side + 1) % 6]
    return Segment(
        Point(float(cx + grid.radius * c0[0]), float(cy + grid.radius * c0[1])),
        Point(float(cx + grid.radius * c1[0]), float(cy + grid.radius * c1[1])),
    )


def _collect_sides(grid: HexGrid, is_border: Callable[[int, Optional[int]], bool]) -> List[Segment]:
    segments = []
    for cell_id in range(len(grid)):
        if not grid.is_land[cell_id]:
            continue
        for side in range(6):
            if is_border(cell_id, side_neighbor(grid, cell_id, side)):
                segments.append(side_segment(grid, cell_id, side))
    return segments


def collect_border_segments(grid: HexGrid) -> List[Segment]:
    """
    Sides of land hexes where the region id changes.

    Includes sides facing water, a different region, or the map edge.
    """
    return _collect_sides(
        grid,
        lambda cell_id, other: other is None or grid.region[other] != grid.region[cell_id],
    )


def _points_equal(a: Point, b: Point) -> bool:
    return abs(a.x - b.x) < POINT_EPSILON and abs(a.y - b.y) < POINT_EPSILON


def _bucket(p: Point) -> Tuple[int, int]:
    return (math.floor(p.x / _BUCKET_SIZE), math.floor(p.y / _BUCKET_SIZE))


class CoastlineTracer:
    """Stitches land/water hex sides into closed coastline loops."""

    def __init__(self, policy: LoopPolicy = LoopPolicy.ALL, smooth_passes: int = 2):
        """
        Initialize the tracer.

        Args:
            policy: Keep every loop (ALL) or only the largest (LARGEST)
            smooth_passes: Closed Chaikin passes per loop
        """
        if smooth_passes < 0:
            raise ValueError(f"smooth_passes must be non-negative, got {smooth_passes}")
        self.policy = LoopPolicy(policy)
        self.smooth_passes = smooth_passes

    def boundary_segments(self, grid: HexGrid) -> List[Segment]:
        """Sides of land hexes facing water or the map edge."""
        return _collect_sides(
            grid,
            lambda cell_id, other: other is None or not grid.is_land[other],
        )

    def stitch(self, segments: List[Segment]) -> List[List[Point]]:
        """
        Greedily chain segments into closed loops.

        The last unused segment starts a chain; the first unused segment
        whose start matches the chain end extends it until the chain returns
        to its start. Chains that cannot close are dropped.
        """
        by_start: Dict[Tuple[int, int], List[int]] = defaultdict(list)
        for seg_id, segment in enumerate(segments):
            by_start[_bucket(segment.start)].append(seg_id)

        used = [False] * len(segments)

        def find_continuation(cursor: Point) -> Optional[int]:
            bx, by = _bucket(cursor)
            best = None
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    for seg_id in by_start.get((bx + dx, by + dy), ()):
                        if used[seg_id] or (best is not None and seg_id >= best):
                            continue
                        if _points_equal(segments[seg_id].start, cursor):
                            best = seg_id
            return best

        loops = []
        for seg_id in reversed(range(len(segments))):
            if used[seg_id]:
                continue
            used[seg_id] = True
            start, end = segments[seg_id]
            chain = [start, end]
            cursor = end
            closed = False

            while True:
                if _points_equal(cursor, start):
                    closed = True
                    break
                next_id = find_continuation(cursor)
                if next_id is None:
                    break
                used[next_id] = True
                cursor = segments[next_id].end
                chain.append(cursor)

            if closed:
                chain.pop()  # closing vertex duplicates the start
                if len(chain) > 2:
                    loops.append(chain)

        return loops

    def trace(self, grid: HexGrid) -> List[List[Point]]:
        """
        Trace every coastline loop of the land mask.

        Args:
            grid: Classified grid

        Returns:
            Smoothed loops retained by the policy
        """
        segments = self.boundary_segments(grid)
        loops = [
            chaikin_smooth(loop, self.smooth_passes, closed=True)
            for loop in self.stitch(segments)
        ]
        kept = select_loops(loops, self.policy)
        logger.info("Coastline traced", segments=len(segments), loops=len(loops),
                    loops_kept=len(kept))
        return kept
