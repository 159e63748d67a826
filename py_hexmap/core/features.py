"""
Land/water classification and region labeling.

This module handles:
- Sea level thresholding of the elevation field
- Removal of isolated land specks
- Labeling of contiguous land regions
"""

from collections import deque
from typing import Tuple

import numpy as np
import structlog

from .hex_grid import HexGrid

logger = structlog.get_logger()

# Land hexes with fewer land neighbors than this are specks
MIN_LAND_NEIGHBORS = 2

UNLABELED = 0


class LandWaterClassifier:
    """Classifies hexes into land and water and labels land regions."""

    def __init__(self, sea_level: float):
        """
        Initialize the classifier.

        Args:
            sea_level: Elevation threshold; hexes strictly above it are land
        """
        self.sea_level = sea_level
        self.speck_removed = 0
        self.region_count = 0

    def apply_threshold(self, grid: HexGrid) -> HexGrid:
        """Mark hexes strictly above sea level as land."""
        result = grid.copy()
        result.is_land = result.elevation > self.sea_level
        result.region[:] = UNLABELED
        return result

    def remove_specks(self, grid: HexGrid) -> HexGrid:
        """
        Reclassify land hexes with fewer than two land neighbors as water.

        A single pass: every count is taken against the mask as it was
        before the pass, so a removed hex does not affect its neighbors.
        Hexes on the grid edge have fewer neighbor slots and are pruned
        more readily.
        """
        result = grid.copy()
        land_neighbors = grid.neighbor_counts(grid.is_land)
        specks = grid.is_land & (land_neighbors < MIN_LAND_NEIGHBORS)

        result.is_land[specks] = False
        result.region[specks] = UNLABELED
        self.speck_removed = int(np.count_nonzero(specks))

        logger.info("Speck removal completed", specks_removed=self.speck_removed,
                    land_hexes=result.land_count)
        return result

    def label_regions(self, grid: HexGrid) -> HexGrid:
        """Label connected land components, see label_regions()."""
        result, self.region_count = label_regions(grid)
        return result

    def classify(self, grid: HexGrid) -> HexGrid:
        """
        Run thresholding, speck removal and region labeling.

        Args:
            grid: Grid with elevation populated

        Returns:
            New grid with is_land and region set
        """
        logger.info("Classifying land and water", sea_level=self.sea_level)
        thresholded = self.apply_threshold(grid)
        cleaned = self.remove_specks(thresholded)
        return self.label_regions(cleaned)


def label_regions(grid: HexGrid) -> Tuple[HexGrid, int]:
    """
    Label connected land components with ids 1, 2, ...

    Breadth-first flood fill over the six-direction adjacency. Ids follow
    the row-major order of each component's first hex; water hexes are
    left at 0.

    Args:
        grid: Grid with is_land set

    Returns:
        Tuple of (new grid with region set, number of regions)
    """
    result = grid.copy()
    result.region[:] = UNLABELED
    region_id = 0

    for start in range(len(result)):
        if not result.is_land[start] or result.region[start] != UNLABELED:
            continue

        region_id += 1
        result.region[start] = region_id
        queue = deque([start])

        while queue:
            cell_id = queue.popleft()
            for neighbor_id in result.cell_neighbors[cell_id]:
                if neighbor_id < 0:
                    continue
                if result.is_land[neighbor_id] and result.region[neighbor_id] == UNLABELED:
                    result.region[neighbor_id] = region_id
                    queue.append(neighbor_id)

    logger.info("Land regions labeled", regions=region_id)
    return result, region_id
