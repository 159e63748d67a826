"""Hex lattice data structures for pointy-top hex maps."""

import math
from dataclasses import dataclass, replace
from typing import Iterator, List, NamedTuple, Optional

import numpy as np
import structlog

logger = structlog.get_logger()

SQRT3 = math.sqrt(3)

# Pointy-top axial neighbor directions (dq, dr)
DIRECTIONS = ((1, 0), (0, 1), (-1, 1), (-1, 0), (0, -1), (1, -1))


class Point(NamedTuple):
    """Pixel-space vertex."""
    x: float
    y: float


@dataclass(frozen=True)
class Hex:
    """Read-only view of a single lattice cell."""
    q: int
    r: int
    x: float
    y: float
    elevation: float
    is_land: bool
    region: Optional[int] = None


def hex_to_pixel(q, r, radius: float):
    """
    Project lattice coordinates to the pixel centre of a pointy-top hex.

    Odd rows are shifted right by half a hex width. Works on scalars and
    NumPy arrays alike.
    """
    x = radius * SQRT3 * (q + 0.5 * (r & 1))
    y = radius * 1.5 * r
    return x, y


@dataclass(eq=False)
class HexGrid:
    """
    Hex lattice with per-cell arrays in row-major (r * cols + q) order.

    Stages of the generation pipeline never modify a grid they receive;
    they call copy() and return the new snapshot.
    """
    cols: int
    rows: int
    radius: float

    q: np.ndarray                 # int32 column per hex
    r: np.ndarray                 # int32 row per hex
    points: np.ndarray            # (N, 2) pixel centres
    cell_neighbors: np.ndarray    # (N, 6) neighbor index per direction, -1 outside grid

    elevation: np.ndarray         # float64 in [0, 1]
    is_land: np.ndarray           # bool
    region: np.ndarray            # int32, 0 = unset

    def __len__(self) -> int:
        return self.cols * self.rows

    def index(self, q: int, r: int) -> int:
        """Flat index of the hex at (q, r)."""
        return r * self.cols + q

    def in_bounds(self, q: int, r: int) -> bool:
        return 0 <= q < self.cols and 0 <= r < self.rows

    def neighbors(self, cell_id: int) -> List[int]:
        """In-grid neighbors of a hex, in direction-table order."""
        return [int(n) for n in self.cell_neighbors[cell_id] if n >= 0]

    def neighbor_counts(self, mask: np.ndarray) -> np.ndarray:
        """
        Count, for every hex, the in-grid neighbors where mask is True.

        Args:
            mask: Boolean array with one entry per hex

        Returns:
            int array of counts in [0, 6]
        """
        valid = self.cell_neighbors >= 0
        safe = np.where(valid, self.cell_neighbors, 0)
        return (mask[safe] & valid).sum(axis=1)

    @property
    def land_count(self) -> int:
        return int(np.count_nonzero(self.is_land))

    def point(self, cell_id: int) -> Point:
        x, y = self.points[cell_id]
        return Point(float(x), float(y))

    def hex(self, cell_id: int) -> Hex:
        region = int(self.region[cell_id])
        return Hex(
            q=int(self.q[cell_id]),
            r=int(self.r[cell_id]),
            x=float(self.points[cell_id, 0]),
            y=float(self.points[cell_id, 1]),
            elevation=float(self.elevation[cell_id]),
            is_land=bool(self.is_land[cell_id]),
            region=region if region > 0 else None,
        )

    def hexes(self) -> Iterator[Hex]:
        """Iterate the ordered hex collection."""
        for cell_id in range(len(self)):
            yield self.hex(cell_id)

    def copy(self) -> "HexGrid":
        """
        Snapshot with independent mutable arrays.

        Geometry arrays (q, r, points, cell_neighbors) never change after
        construction and are shared.
        """
        return replace(
            self,
            elevation=self.elevation.copy(),
            is_land=self.is_land.copy(),
            region=self.region.copy(),
        )


def build_neighbor_table(cols: int, rows: int) -> np.ndarray:
    """
    Build the (N, 6) neighbor index table for a cols x rows lattice.

    Directions leaving the grid are -1; the grid never wraps.
    """
    n_cells = cols * rows
    table = np.full((n_cells, 6), -1, dtype=np.int32)
    for r in range(rows):
        for q in range(cols):
            cell_id = r * cols + q
            for d, (dq, dr) in enumerate(DIRECTIONS):
                nq, nr = q + dq, r + dr
                if 0 <= nq < cols and 0 <= nr < rows:
                    table[cell_id, d] = nr * cols + nq
    return table


def build_hex_grid(cols: int, rows: int, radius: float) -> HexGrid:
    """
    Create a lattice with pixel centres and connectivity, elevation zero and
    every hex water.

    Args:
        cols: Number of columns (q range)
        rows: Number of rows (r range)
        radius: Hex radius in pixels

    Returns:
        New HexGrid
    """
    if cols < 1 or rows < 1:
        raise ValueError(f"Grid must have at least one hex, got {cols}x{rows}")
    if radius <= 0:
        raise ValueError(f"Hex radius must be positive, got {radius}")

    r_idx, q_idx = np.divmod(np.arange(cols * rows, dtype=np.int32), cols)
    x, y = hex_to_pixel(q_idx, r_idx, radius)
    points = np.column_stack([x, y]).astype(np.float64)

    n_cells = cols * rows
    logger.debug("Hex grid built", cols=cols, rows=rows, cells=n_cells)

    return HexGrid(
        cols=cols,
        rows=rows,
        radius=float(radius),
        q=q_idx,
        r=r_idx,
        points=points,
        cell_neighbors=build_neighbor_table(cols, rows),
        elevation=np.zeros(n_cells, dtype=np.float64),
        is_land=np.zeros(n_cells, dtype=bool),
        region=np.zeros(n_cells, dtype=np.int32),
    )
