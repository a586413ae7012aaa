# random_source.py
"""
Seeded uniform random numbers for particle spawning.

All randomness in a ParticleSystem is drawn from one RandomSource so a
fixed seed and a fixed call order always reproduce the same run.
"""
import logging
import numpy as np

from utils import normalize_seed


class RandomSource:
    """
    A re-seedable wrapper around a dedicated NumPy Generator.
    """
    def __init__(self, seed: int):
        self.reseed(seed)

    def reseed(self, seed: int) -> None:
        """Restarts the sequence from seed."""
        self.seed = seed
        self.rng = np.random.default_rng(normalize_seed(seed))
        logging.debug(f"RandomSource reseeded with {seed}.")

    def uniform(self, low: float, high: float) -> float:
        """
        Returns a float between low and high.

        The bounds may be given in either order.
        """
        if high < low:
            low, high = high, low
        return float(self.rng.uniform(low, high))

    def uniform_int(self, bound: int) -> int:
        """Returns an integer in [0, bound)."""
        return int(self.rng.integers(0, bound))
