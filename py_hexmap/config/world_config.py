"""
World generation options.

This module defines the validated option set accepted by the world
pipeline, including limits and default values, and converts it into the
per-stage option objects used by the core modules.
"""

from pydantic import BaseModel, Field, model_validator

from .config import settings
from ..core.coastline import CoastOptions
from ..core.elevation import HexMapConfig
from ..core.hydrology import RiverOptions


class WorldConfig(BaseModel):
    """Complete option set for one generated world."""

    seed: int = Field(default=12345, description="Seed for the elevation noise")

    # Hex grid
    hex_radius: float = Field(default=10.0, gt=0, description="Hex radius in pixels")
    cols: int = Field(default=60, ge=1, description="Number of hex columns")
    rows: int = Field(default=50, ge=1, description="Number of hex rows")

    # Noise
    octaves: int = Field(default=5, ge=1, le=16, description="Fractal noise layers")
    persistence: float = Field(default=0.5, ge=0, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=2.0, gt=0, description="Frequency multiplier per octave")
    noise_scale: float = Field(default=200.0, gt=0, description="Pixel distance per noise unit")
    noise_weight: float = Field(default=1.0, ge=0, description="Blend weight of the noise layer")
    shape_weight: float = Field(default=1.0, ge=0, description="Blend weight of the radial falloff")
    gradient_exponent: float = Field(default=1.2, ge=0, description="Exponent of the radial falloff")
    sea_level: float = Field(default=0.5, description="Elevation threshold for land")

    # Rivers
    min_source_elev: float = Field(default=0.5, description="Minimum elevation of a primary source")
    main_river_accum: int = Field(default=20, ge=1, description="Accumulation of a full-width river")
    tributary_accum: int = Field(default=5, ge=1, description="Minimum accumulation of a primary source")
    secondary_stream_accum: int = Field(default=15, ge=1, description="Lower bound for secondary streams")
    tertiary_stream_accum: int = Field(default=10, ge=1, description="Lower bound for tertiary streams")
    river_width: float = Field(default=2.0, ge=1, description="Width of main rivers")
    river_smooth: int = Field(default=2, ge=0, le=8, description="Chaikin passes for river paths")

    # Coastline
    erosion_passes: int = Field(default=1, ge=0, description="Coast erosion passes")
    dilation_passes: int = Field(default=1, ge=0, description="Coast dilation passes")
    coast_noise_seed: int = Field(default=12345, description="Seed for the coast noise")

    @model_validator(mode="after")
    def check_limits(self) -> "WorldConfig":
        """Reject option sets that would divide by zero or exceed the grid limit."""
        if self.noise_weight + self.shape_weight <= 0:
            raise ValueError("noise_weight and shape_weight cannot both be zero")
        if self.cols * self.rows > settings.max_grid_cells:
            raise ValueError(
                f"grid of {self.cols}x{self.rows} exceeds max_grid_cells={settings.max_grid_cells}"
            )
        return self

    def hex_map_config(self) -> HexMapConfig:
        return HexMapConfig(
            radius=self.hex_radius,
            cols=self.cols,
            rows=self.rows,
            octaves=self.octaves,
            persistence=self.persistence,
            lacunarity=self.lacunarity,
            noise_scale=self.noise_scale,
            noise_weight=self.noise_weight,
            shape_weight=self.shape_weight,
            gradient_exponent=self.gradient_exponent,
            sea_level=self.sea_level,
        )

    def coast_options(self) -> CoastOptions:
        return CoastOptions(
            erosion_passes=self.erosion_passes,
            dilation_passes=self.dilation_passes,
            coast_noise_seed=self.coast_noise_seed,
        )

    def river_options(self) -> RiverOptions:
        return RiverOptions(
            min_source_elev=self.min_source_elev,
            main_river_accum=self.main_river_accum,
            tributary_accum=self.tributary_accum,
            secondary_stream_accum=self.secondary_stream_accum,
            tertiary_stream_accum=self.tertiary_stream_accum,
            river_width=self.river_width,
            smooth=self.river_smooth,
        )
