"""
solver.py — Pressure Projection
================================
The projection step enforces INCOMPRESSIBILITY:
  div(v) = 0 everywhere

After diffusion or advection the velocity field is generally NOT
divergence-free (fluid "piles up" in some cells). We fix this by:
  1. Computing divergence of the current velocity field
  2. Solving the Poisson equation for pressure:  ∇²p = div(v)
  3. Subtracting the pressure gradient from velocity:  v = v - ∇p

This is "Helmholtz decomposition": any vector field splits into a
divergence-free part + a curl-free part (the gradient of a scalar field).
Removing the curl-free part leaves the divergence-free part we want.

Everything is collocated: vx, vy and p all live at cell centers, so both
divergence and gradient use central differences (half-cell spacing 1/N).
"""

import time

import numpy as np

from .boundary import BoundaryRule, SolveRole, set_boundaries
from .grid import Grid, require_same_size
from .relax import iter_solve


def compute_divergence(vx: Grid, vy: Grid, out: Grid = None) -> Grid:
    """
    Discrete divergence of (vx, vy), stored with the sign and scale the
    pressure solve expects:

      div[i,j] = -0.5/N * ((vx[i+1,j] - vx[i-1,j]) + (vy[i,j+1] - vy[i,j-1]))

    Only the interior of `out` is written. A fresh zeroed Grid is
    allocated when `out` is None.
    """
    N = require_same_size(vx, vy)
    if out is None:
        out = Grid(N, dtype=vx.data.dtype)
    else:
        require_same_size(vx, out)

    u = vx.cells
    v = vy.cells
    out.interior[:] = -0.5 * (
        (u[2:, 1:-1] - u[:-2, 1:-1]) +
        (v[1:-1, 2:] - v[1:-1, :-2])
    ) / N
    return out


def max_divergence(vx: Grid, vy: Grid, scratch: Grid = None) -> float:
    """Largest |divergence| over the interior."""
    return float(np.abs(compute_divergence(vx, vy, scratch).interior).max())


def project(vx: Grid, vy: Grid, divergence: Grid, pressure: Grid,
            iterations: int = 20) -> dict:
    """
    Pressure projection: make (vx, vy) divergence-free, in place.

    Args:
        vx, vy     : Velocity grids to modify
        divergence : Scratch grid for the divergence (right-hand side)
        pressure   : Scratch grid for the pressure solve
        iterations : Gauss-Seidel sweeps

    Returns:
        dict with timing and divergence metrics (for benchmarking).
        `divergence` holds the post-projection divergence afterwards.
    """
    t_start = time.perf_counter()
    N = require_same_size(vx, vy, divergence, pressure)

    # Step 1: divergence, zero first guess for pressure
    compute_divergence(vx, vy, divergence)
    div_before = float(np.abs(divergence.interior).max())
    pressure.interior[:] = 0.0
    set_boundaries(BoundaryRule.COPY, divergence)
    set_boundaries(BoundaryRule.COPY, pressure)

    # Step 2: Poisson solve (k = 1, denom = 4)
    iter_solve(BoundaryRule.COPY, pressure, divergence, 1.0, iterations, SolveRole.PRESSURE)

    # Step 3: subtract the pressure gradient
    p = pressure.cells
    vx.interior[:] -= 0.5 * N * (p[2:, 1:-1] - p[:-2, 1:-1])
    vy.interior[:] -= 0.5 * N * (p[1:-1, 2:] - p[1:-1, :-2])
    set_boundaries(BoundaryRule.NEGATE_X, vx)
    set_boundaries(BoundaryRule.NEGATE_Y, vy)

    t_end = time.perf_counter()

    div_after = max_divergence(vx, vy, divergence)

    return {
        "time_ms"               : (t_end - t_start) * 1000,
        "iterations"            : iterations,
        "divergence_before_max" : div_before,
        "divergence_after_max"  : div_after,
    }
