#!/usr/bin/env python3
"""
Simple demo script showing hex world generation.
"""

import numpy as np

from py_hexmap.config import WorldConfig
from py_hexmap.core import generate_world, generate_world_steps, polygon_area
from py_hexmap.log_config import configure_logging


def main():
    """Generate a few worlds and print their statistics."""
    configure_logging("WARNING", "plain")

    print("Py-HexMap World Generation Demo")
    print("=" * 40)

    for seed in (12345, 2024, 7):
        config = WorldConfig(seed=seed, cols=40, rows=30, hex_radius=12, noise_scale=150)
        result = generate_world(config)
        info = result.debug_info

        print(f"\nSeed {seed}:")
        print("-" * 30)
        print(f"  Total hexes: {info.total_hexes}")
        land_pct = info.land_hexes / info.total_hexes * 100
        print(f"  Land hexes: {info.land_hexes} ({land_pct:.1f}%)")
        print(f"  Specks removed: {info.speck_removed}")
        print(f"  Elevation range: {info.min_elevation:.3f}-{info.max_elevation:.3f}")
        print(f"  Land after coast refinement: {result.grid.land_count}")

        regions = np.unique(result.grid.region[result.grid.is_land])
        print(f"  Land regions: {len(regions)}")

        if result.coast_edges:
            loop = result.coast_edges[0]
            print(f"  Coastline: {len(loop)} vertices, area {abs(polygon_area(loop)):.0f} px^2")
        else:
            print("  Coastline: none")

        rivers = result.river_result.river_polylines
        by_order = {order: sum(1 for r in rivers if r.order == order) for order in (1, 2, 3)}
        print(f"  Rivers: {len(rivers)} (main {by_order[1]}, secondary {by_order[2]}, "
              f"tertiary {by_order[3]})")

    print("\nStep snapshots for seed 12345:")
    steps = generate_world_steps(WorldConfig(cols=40, rows=30, hex_radius=12, noise_scale=150))
    print(f"  Land after threshold: {steps.land_water.land_count}")
    print(f"  Land after speck removal: {steps.speck.land_count}")
    print(f"  Coast loops: {len(steps.coast_loops)}")


if __name__ == "__main__":
    main()
