"""Seeded 2D coherent noise."""

from opensimplex import OpenSimplex

from .sine_prng import SinePRNG

# OpenSimplex seeds are consumed as 64-bit integers; 2**31 keeps them portable
_SEED_RANGE = 2**31


class NoiseSource:
    """Deterministic 2D noise generator with a fixed seed."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self.derived_seed = SinePRNG(seed).randint(_SEED_RANGE)
        self._simplex = OpenSimplex(seed=self.derived_seed)

    def noise2(self, x: float, y: float) -> float:
        """Sample 2D noise at the given coordinates. Returns value in [-1, 1]."""
        return self._simplex.noise2(x, y)

    def sample01(self, x: float, y: float) -> float:
        """Sample 2D noise remapped to [0, 1]."""
        return self.noise2(x, y) * 0.5 + 0.5
