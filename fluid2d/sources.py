"""
sources.py — Source Injection Helpers
======================================
What the frame loop adds before each step. A single-cell source looks like
a pixel; a small block of randomly weighted cells plus a random push
reads as a puff of dye being stirred in.

All randomness goes through a numpy Generator, so a seeded run is
reproducible cell for cell.
"""

import numpy as np

from .config import SPLAT_DENSITY_RANGE, SPLAT_RADIUS, SPLAT_VELOCITY_MAGNITUDE
from .grid import FluidState


def clamp_cell(i: int, j: int, N: int) -> tuple:
    """Clamp (i, j) into the interior region 1..N-2."""
    return (min(max(int(i), 1), N - 2), min(max(int(j), 1), N - 2))


def splat_density(state: FluidState, i: int, j: int, rng: np.random.Generator,
                  radius: int = SPLAT_RADIUS, low: float = SPLAT_DENSITY_RANGE[0],
                  high: float = SPLAT_DENSITY_RANGE[1]) -> float:
    """
    Add a random amount in [low, high) to every cell of the
    (2*radius+1)² block around (i, j). Cells off the grid are skipped.

    Returns the total density added.
    """
    N = state.N
    total = 0.0
    for di in range(-radius, radius + 1):
        for dj in range(-radius, radius + 1):
            ci, cj = i + di, j + dj
            if not (0 <= ci < N and 0 <= cj < N):
                continue
            amount = float(rng.uniform(low, high))
            state.add_density_source(ci, cj, amount)
            total += amount
    return total


def random_velocity(state: FluidState, i: int, j: int, rng: np.random.Generator,
                    magnitude: float = SPLAT_VELOCITY_MAGNITUDE) -> tuple:
    """Add a random impulse with each component in [-magnitude, magnitude)."""
    dx, dy = (float(c) for c in rng.uniform(-magnitude, magnitude, size=2))
    state.add_velocity_source(i, j, dx, dy)
    return dx, dy
