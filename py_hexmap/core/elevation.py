"""
Elevation field generation for hex maps.

This module samples fractal noise on every hex of the lattice and blends it
with a radial falloff so that land gathers towards the middle of the map.
"""

import math
from dataclasses import dataclass

import numpy as np
import structlog

from .hex_grid import HexGrid, SQRT3, build_hex_grid
from .noise import NoiseSource

logger = structlog.get_logger()


@dataclass
class HexMapConfig:
    """Configuration for hex lattice and elevation generation."""

    radius: float = 10.0  # hex radius in px
    cols: int = 60
    rows: int = 50
    octaves: int = 5
    persistence: float = 0.5  # amplitude multiplier per octave
    lacunarity: float = 2.0  # frequency multiplier per octave
    noise_scale: float = 200.0  # pixels per noise unit
    noise_weight: float = 1.0
    shape_weight: float = 1.0
    gradient_exponent: float = 1.2
    sea_level: float = 0.5

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
        if self.cols < 1 or self.rows < 1:
            raise ValueError(f"grid must have at least one hex, got {self.cols}x{self.rows}")
        if self.octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {self.octaves}")
        if self.persistence < 0:
            raise ValueError(f"persistence must be non-negative, got {self.persistence}")
        if self.lacunarity <= 0:
            raise ValueError(f"lacunarity must be positive, got {self.lacunarity}")
        if self.noise_scale <= 0:
            raise ValueError(f"noise_scale must be positive, got {self.noise_scale}")
        if self.noise_weight < 0 or self.shape_weight < 0:
            raise ValueError("noise_weight and shape_weight must be non-negative")
        if self.noise_weight + self.shape_weight == 0:
            raise ValueError("noise_weight and shape_weight cannot both be zero")
        if self.gradient_exponent < 0:
            raise ValueError(f"gradient_exponent must be non-negative, got {self.gradient_exponent}")

    @property
    def map_width(self) -> float:
        return self.cols * self.radius * SQRT3

    @property
    def map_height(self) -> float:
        return self.rows * self.radius * 1.5


class ElevationField:
    """
    Builds the hex lattice and its normalized elevation.

    Elevation per hex is a weighted blend of multi-octave noise and a
    radial falloff from the map centre, normalized to [0, 1].
    """

    def __init__(self, config: HexMapConfig, seed: int):
        """
        Initialize the elevation field.

        Args:
            config: Hex map configuration
            seed: Seed for the elevation noise
        """
        self.config = config
        self.seed = seed
        self.noise = NoiseSource(seed)

    def fractal_noise(self, x: float, y: float) -> float:
        """
        Sample layered noise at a pixel position.

        Returns:
            Amplitude-weighted mean of the octave samples, in [0, 1]
        """
        cfg = self.config
        amplitude = 1.0
        frequency = 1.0
        noise_sum = 0.0
        max_amp = 0.0
        for _ in range(cfg.octaves):
            sample_x = (x / cfg.noise_scale) * frequency
            sample_y = (y / cfg.noise_scale) * frequency
            noise_sum += self.noise.sample01(sample_x, sample_y) * amplitude
            max_amp += amplitude
            amplitude *= cfg.persistence
            frequency *= cfg.lacunarity
        return noise_sum / max_amp

    def radial_falloff(self, points: np.ndarray) -> np.ndarray:
        """
        Falloff from the map centre, 1 at the centre and 0 at the corners.

        The base is clamped to >= 0 before the exponent is applied.
        """
        cfg = self.config
        center_x = cfg.map_width / 2
        center_y = cfg.map_height / 2
        max_dist = math.hypot(center_x, center_y)

        dist = np.hypot(points[:, 0] - center_x, points[:, 1] - center_y)
        base = np.clip(1.0 - dist / max_dist, 0.0, 1.0)
        return np.power(base, cfg.gradient_exponent)

    def build(self) -> HexGrid:
        """
        Generate the lattice with elevation populated.

        Returns:
            HexGrid with elevation set; is_land and region left unset
        """
        cfg = self.config
        logger.info(
            "Generating elevation field",
            cols=cfg.cols,
            rows=cfg.rows,
            octaves=cfg.octaves,
            seed=self.seed,
        )

        grid = build_hex_grid(cfg.cols, cfg.rows, cfg.radius)

        noise_height = np.fromiter(
            (self.fractal_noise(x, y) for x, y in grid.points),
            dtype=np.float64,
            count=len(grid),
        )
        falloff = self.radial_falloff(grid.points)

        weighted = noise_height * cfg.noise_weight + falloff * cfg.shape_weight
        elevation = weighted / (cfg.noise_weight + cfg.shape_weight)
        grid.elevation = np.clip(elevation, 0.0, 1.0)

        logger.info(
            "Elevation field generated",
            min_elevation=float(grid.elevation.min()),
            max_elevation=float(grid.elevation.max()),
        )
        return grid


def generate_hex_map(seed: int, config: HexMapConfig) -> HexGrid:
    """
    Convenience wrapper building the raw elevation snapshot.

    Args:
        seed: Seed for the elevation noise
        config: Hex map configuration

    Returns:
        HexGrid with elevation populated
    """
    return ElevationField(config, seed).build()
