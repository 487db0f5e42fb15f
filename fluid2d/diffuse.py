"""
diffuse.py — Implicit Diffusion
================================
Diffusion makes fluids spread out over time.
  - High density diffusion   → dye bleeds into its neighbours
  - Low density diffusion    → dye stays tight
  - High velocity diffusion  → thick fluid (honey)
  - Low velocity diffusion   → thin fluid (air, water)

The math: solve the implicit (backward Euler) heat equation

  x_new - k * ∇²x_new = x_old,      k = dt * rate * (N-2)²

Why implicit? Explicit diffusion (just adding k * Laplacian) overshoots
once k gets large and the values start oscillating and going negative.
Asking "which x_new diffuses BACK into x_old?" instead is stable for any
k, at the price of a linear solve (relax.py).
"""

import numpy as np

from .boundary import BoundaryRule, SolveRole, set_boundaries
from .grid import Grid, require_same_size
from .relax import iter_solve


def diffusion_coefficient(N: int, dt: float, rate: float) -> float:
    return dt * rate * (N - 2) * (N - 2)


def diffuse(rule: BoundaryRule, unknown: Grid, source: Grid,
            rate: float, dt: float, iterations: int):
    """
    Diffuse `source` into `unknown`.

    Modifies: unknown (interior + boundary ring)
    """
    N = require_same_size(unknown, source)
    k = diffusion_coefficient(N, dt, rate)

    if k == 0.0:
        # No diffusion: the solve reduces to a copy
        np.copyto(unknown.interior, source.interior)
        set_boundaries(rule, unknown)
        return

    iter_solve(rule, unknown, source, k, iterations, SolveRole.DIFFUSION)
