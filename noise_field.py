# noise_field.py
"""
Deterministic 2D coherent noise used to steer the particles.

The field is a lattice of seeded uniform values, smoothed with a cosine
curve and summed over several octaves of halving amplitude. Every value
in the lookup table lies in [0, 1) and the octave amplitudes sum to less
than one, so samples always lie in [0, 1).
"""
import logging
import numpy as np
from numba import jit

from constants import NOISE_TABLE_SIZE, NOISE_OCTAVES, NOISE_FALLOFF, MAX_NOISE_FALLOFF
from utils import normalize_seed

# --- Data Contracts ---
#
# class NoiseField:
#   - __init__(self, seed: int, octaves: int = 4, falloff: float = 0.5):
#     - Side Effects: Builds the lookup table from the seed.
#
#   - reseed(self, seed: int) -> None:
#     - Side Effects: Rebuilds the lookup table. The new table depends on
#       the seed only, never on how many samples were taken before.
#
#   - sample(self, x: float, y: float) -> float:
#     - Outputs: a value in [0, 1), continuous in x and y.
#     - Invariants: pure for a given seed and noise detail.

_Y_WRAP_BITS = 4
_Y_WRAP = 1 << _Y_WRAP_BITS
_TABLE_MASK = NOISE_TABLE_SIZE - 1


@jit(nopython=True)
def _sample_numba(x, y, table, octaves, falloff):
    """
    Numba-jitted octave sum over the cosine-smoothed lattice.
    Kept outside the class so it compiles in nopython mode.
    """
    if x < 0:
        x = -x
    if y < 0:
        y = -y

    xi = int(np.floor(x))
    yi = int(np.floor(y))
    xf = x - xi
    yf = y - yi

    total = 0.0
    amplitude = 0.5
    for _ in range(octaves):
        offset = xi + (yi << _Y_WRAP_BITS)

        rxf = 0.5 * (1.0 - np.cos(xf * np.pi))
        ryf = 0.5 * (1.0 - np.cos(yf * np.pi))

        n1 = table[offset & _TABLE_MASK]
        n1 += rxf * (table[(offset + 1) & _TABLE_MASK] - n1)
        n2 = table[(offset + _Y_WRAP) & _TABLE_MASK]
        n2 += rxf * (table[(offset + _Y_WRAP + 1) & _TABLE_MASK] - n2)
        n1 += ryf * (n2 - n1)

        total += n1 * amplitude
        amplitude *= falloff

        # Next octave doubles the frequency
        xi <<= 1
        xf *= 2.0
        yi <<= 1
        yf *= 2.0
        if xf >= 1.0:
            xi += 1
            xf -= 1.0
        if yf >= 1.0:
            yi += 1
            yf -= 1.0
    return total


class NoiseField:
    """
    A seeded, history-free 2D coherent noise sampler.
    """
    def __init__(self, seed: int, octaves: int = NOISE_OCTAVES, falloff: float = NOISE_FALLOFF):
        self.octaves = NOISE_OCTAVES
        self.falloff = NOISE_FALLOFF
        self.noise_detail(octaves, falloff)
        self.reseed(seed)

    def reseed(self, seed: int) -> None:
        """Rebuilds the lookup table from seed alone."""
        self.seed = seed
        rng = np.random.default_rng(normalize_seed(seed))
        self.table = rng.random(NOISE_TABLE_SIZE)
        logging.debug(f"NoiseField reseeded with {seed}.")

    def noise_detail(self, octaves: int, falloff: float) -> None:
        """
        Sets the number of octaves and the amplitude falloff per octave.

        Raises:
            ValueError: If octaves < 1 or falloff is outside [0, 0.5].
        """
        if int(octaves) < 1:
            raise ValueError(f"Noise octaves must be at least 1, got {octaves}.")
        if not 0.0 <= falloff <= MAX_NOISE_FALLOFF:
            raise ValueError(f"Noise falloff must be in [0, {MAX_NOISE_FALLOFF}], got {falloff}.")
        self.octaves = int(octaves)
        self.falloff = float(falloff)

    def sample(self, x: float, y: float) -> float:
        return _sample_numba(float(x), float(y), self.table, self.octaves, self.falloff)
