"""
Sine-based seed derivation.

Each call advances the state with ``state = sin(state) * 10000`` and returns
its fractional part. The generator owns its state, so two instances built
from the same seed always produce the same sequence.
"""

import math


class SinePRNG:
    """
    Deterministic pseudo-random sequence in [0, 1) keyed by a numeric seed.
    """

    def __init__(self, seed):
        """Initialize with a numeric seed."""
        self.call_count = 0
        self.state = float(seed)

    def random(self):
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self.state = math.sin(self.state) * 10000
        return self.state - math.floor(self.state)

    def randint(self, upper):
        """Return an integer in [0, upper)."""
        if upper <= 0:
            raise ValueError("upper bound must be positive")
        return int(self.random() * upper)
