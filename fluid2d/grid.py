"""
grid.py — Collocated 2D Grid + Solver State
============================================
The foundation of the entire simulation.

Every field (density, velocity X, velocity Y, and the projection scratch
buffers) is an N x N grid of cell-centered scalars stored in ONE flat buffer:

    index(i, j) = i + j * N        i → column (x), j → row (y)

Layout of a single grid:
  - Interior cells  1 ≤ i, j ≤ N-2  → physics is solved here
  - Boundary ring   i or j ∈ {0, N-1} → always derived from the interior
                                        (see boundary.py), never written directly

`Grid.cells` is a zero-copy 2D view of the flat buffer with cells[i, j]
addressing (Fortran-order reshape), so the vectorised stages can slice
the interior as cells[1:-1, 1:-1] without touching index arithmetic.
"""

import math
import operator

import numpy as np

from .config import (
    DT, GRID_SIZE, DENSITY_DIFFUSION, VELOCITY_DIFFUSION, SOLVER_ITERATIONS,
)
from .errors import (
    AllocationFailure, ConfigurationError, IndexOutOfRange, StateDestroyed,
)


class Grid:
    """
    One N x N scalar field backed by a flat numpy buffer.

    Scalar access grid[i, j] is bounds-checked; bulk access goes through
    the `cells` view.
    """

    def __init__(self, N: int, dtype=np.float32):
        self.N = N
        try:
            self.data = np.zeros(N * N, dtype=dtype)
        except MemoryError as exc:
            raise AllocationFailure(f"Could not allocate a {N}x{N} grid") from exc
        # 1D buffers are both C and F contiguous, so this is a view
        self.cells = self.data.reshape((N, N), order="F")

    def index(self, i, j) -> int:
        """Flat buffer offset of cell (i, j). Raises IndexOutOfRange."""
        i = operator.index(i)
        j = operator.index(j)
        if not (0 <= i < self.N and 0 <= j < self.N):
            raise IndexOutOfRange(i, j, self.N)
        return i + j * self.N

    def __getitem__(self, key):
        i, j = key
        return self.data[self.index(i, j)]

    def __setitem__(self, key, value):
        i, j = key
        self.data[self.index(i, j)] = value

    def __len__(self):
        return self.N * self.N

    @property
    def interior(self) -> np.ndarray:
        """Writable view of the interior cells, shape (N-2, N-2)."""
        return self.cells[1:-1, 1:-1]

    def readonly(self) -> np.ndarray:
        """Non-writeable 2D view for renderers."""
        view = self.cells.view()
        view.flags.writeable = False
        return view

    def fill(self, value: float = 0.0):
        self.data.fill(value)

    def release(self):
        self.data = None
        self.cells = None

    def __repr__(self):
        return f"Grid(N={self.N}, dtype={self.data.dtype if self.data is not None else None})"


def require_same_size(*grids: Grid) -> int:
    """Return the shared N of `grids`, or raise ConfigurationError."""
    sizes = {g.N for g in grids}
    if len(sizes) != 1:
        raise ConfigurationError(f"Grids of different sizes passed to one stage: {sorted(sizes)}")
    return sizes.pop()


class FluidState:
    """
    N x N solver state: six field grids + two projection scratch grids.
    This is the single source of truth passed between all physics steps.

    Buffer roles (see simulation.py for how they rotate each step):
      density / density_prev  → density_prev collects sources and holds
                                the rendered result after density_step()
      vx / vx_prev            → vx collects sources and holds the result
      vy / vy_prev              after velocity_step()
      divergence / pressure   → projection scratch, reused every call
    """

    def __init__(self, N: int = GRID_SIZE, dt: float = DT,
                 density_diffusion: float = DENSITY_DIFFUSION,
                 velocity_diffusion: float = VELOCITY_DIFFUSION,
                 iterations: int = SOLVER_ITERATIONS,
                 dtype=np.float32):
        """
        Args:
            N                  : Grid side, outer wall ring included (≥ 3)
            dt                 : Timestep (> 0)
            density_diffusion  : How fast density spreads (0 = no spreading)
            velocity_diffusion : Viscosity (0 = inviscid)
            iterations         : Gauss-Seidel sweeps per solve
            dtype              : numpy dtype of every grid
        """
        try:
            N = operator.index(N)
        except TypeError as exc:
            raise ConfigurationError(f"Grid size must be an integer, got {N!r}") from exc
        if N < 3:
            raise ConfigurationError(f"Grid size must be at least 3, got {N}")
        if not (math.isfinite(dt) and dt > 0):
            raise ConfigurationError(f"Timestep must be positive, got {dt}")
        for name, rate in (("density_diffusion", density_diffusion),
                           ("velocity_diffusion", velocity_diffusion)):
            if not (math.isfinite(rate) and rate >= 0):
                raise ConfigurationError(f"{name} must be non-negative, got {rate}")
        try:
            iterations = operator.index(iterations)
        except TypeError as exc:
            raise ConfigurationError(f"iterations must be an integer, got {iterations!r}") from exc
        if iterations < 1:
            raise ConfigurationError(f"iterations must be at least 1, got {iterations}")

        self.N = N
        self.dt = float(dt)
        self.density_diffusion = float(density_diffusion)
        self.velocity_diffusion = float(velocity_diffusion)
        self.iterations = iterations

        # ── Field grids ────────────────────────────────────────────────────
        self.density      = Grid(N, dtype)
        self.density_prev = Grid(N, dtype)
        self.vx           = Grid(N, dtype)
        self.vx_prev      = Grid(N, dtype)
        self.vy           = Grid(N, dtype)
        self.vy_prev      = Grid(N, dtype)

        # ── Projection scratch (allocated once, never per frame) ──────────
        self.divergence = Grid(N, dtype)
        self.pressure   = Grid(N, dtype)

        self._alive = True

    # ── Lifecycle ──────────────────────────────────────────────────────────

    @property
    def alive(self) -> bool:
        return self._alive

    def require_alive(self):
        if not self._alive:
            raise StateDestroyed("FluidState used after destroy()")

    def _grids(self):
        return (self.density, self.density_prev, self.vx, self.vx_prev,
                self.vy, self.vy_prev, self.divergence, self.pressure)

    def destroy(self):
        """Release all grid memory. Safe to call twice."""
        if not self._alive:
            return
        for g in self._grids():
            g.release()
        self._alive = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.destroy()

    def reset(self):
        """Zero out all fields. Useful for running multiple simulations."""
        self.require_alive()
        for g in self._grids():
            g.fill(0.0)

    # ── Sources ────────────────────────────────────────────────────────────

    def index(self, i, j) -> int:
        self.require_alive()
        return self.density.index(i, j)

    def add_density_source(self, i: int, j: int, amount: float):
        """
        Inject density (dye) at cell (i, j).
        Lands in density_prev, which density_step() reads as its source.
        """
        self.require_alive()
        self.density_prev[i, j] += amount

    def add_velocity_source(self, i: int, j: int, dx: float, dy: float):
        """Apply a velocity impulse (dx, dy) at cell (i, j)."""
        self.require_alive()
        k = self.vx.index(i, j)
        self.vx.data[k] += dx
        self.vy.data[k] += dy

    # ── Read-only access for renderers ─────────────────────────────────────

    @property
    def density_field(self) -> np.ndarray:
        """The rendered density, cells[i, j]. Non-writeable."""
        self.require_alive()
        return self.density_prev.readonly()

    @property
    def velocity_x_field(self) -> np.ndarray:
        self.require_alive()
        return self.vx.readonly()

    @property
    def velocity_y_field(self) -> np.ndarray:
        self.require_alive()
        return self.vy.readonly()

    def snapshot(self) -> dict:
        """Copies of the rendered fields as (N, N) arrays indexed [i, j]."""
        self.require_alive()
        return {
            "density":    self.density_prev.cells.copy(),
            "velocity_x": self.vx.cells.copy(),
            "velocity_y": self.vy.cells.copy(),
        }

    def __repr__(self):
        if not self._alive:
            return f"FluidState(N={self.N}, dt={self.dt}, destroyed)"
        from .solver import compute_divergence

        max_div = float(np.abs(compute_divergence(self.vx, self.vy).interior).max())
        return (
            f"FluidState(N={self.N}, dt={self.dt})\n"
            f"  density   : max={self.density_prev.data.max():.4f}, "
            f"sum={self.density_prev.interior.sum():.2f}\n"
            f"  divergence: max={max_div:.6f} (target: ~0)"
        )
