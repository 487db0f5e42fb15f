"""
simulation.py — Master Physics Loop
====================================
This is the complete simulation step that ties everything together.
One call to `simulation_step()` advances the fluid by dt.

Per attribute the pipeline is fixed and strictly sequential:
  source → diffuse → [project if velocity] → advect → [project if velocity]

Velocity runs first because density advection reads the final velocity.

Buffer roles rotate like this (sources are added before the step):

  density   : density_prev ──diffuse──▶ density ──advect──▶ density_prev
  velocity  : vx, vy       ──diffuse──▶ vx_prev, vy_prev ──project──┐
              vx, vy ◀──advect (source + velocity = *_prev)─────────┘
              vx, vy ──project (again)

So density_prev is what the renderer draws and where the next frame's
density sources accumulate; vx, vy hold the final velocity and collect the
next frame's velocity sources.

Two projections: the first removes divergence introduced by the diffusion
solve, the second the divergence introduced by self-advection.

This follows the "Stable Fluids" paper by Jos Stam.
"""

import time

import numpy as np

from .advect import advect
from .boundary import Quantity
from .config import (
    DT, GRID_SIZE, DENSITY_DIFFUSION, VELOCITY_DIFFUSION, SOLVER_ITERATIONS,
    SPLAT_RADIUS,
)
from .diffuse import diffuse
from .grid import FluidState
from .solver import project
from .sources import random_velocity, splat_density


def density_step(state: FluidState):
    state.require_alive()
    diffuse(Quantity.DENSITY.rule, state.density, state.density_prev,
            state.density_diffusion, state.dt, state.iterations)
    advect(Quantity.DENSITY.rule, state.density_prev, state.density,
           state.vx, state.vy, state.dt)


def velocity_step(state: FluidState) -> tuple:
    """
    Returns the metrics of both projections (after diffusion, after advection).
    """
    state.require_alive()
    s = state
    x_rule = Quantity.VELOCITY_X.rule
    y_rule = Quantity.VELOCITY_Y.rule

    diffuse(x_rule, s.vx_prev, s.vx, s.velocity_diffusion, s.dt, s.iterations)
    diffuse(y_rule, s.vy_prev, s.vy, s.velocity_diffusion, s.dt, s.iterations)

    first = project(s.vx_prev, s.vy_prev, s.divergence, s.pressure, s.iterations)

    advect(x_rule, s.vx, s.vx_prev, s.vx_prev, s.vy_prev, s.dt)
    advect(y_rule, s.vy, s.vy_prev, s.vx_prev, s.vy_prev, s.dt)

    second = project(s.vx, s.vy, s.divergence, s.pressure, s.iterations)
    return first, second


def simulation_step(state: FluidState) -> tuple:
    projections = velocity_step(state)
    density_step(state)
    return projections


class FluidSimulation:
    """
    The complete 2D fluid simulation, driven once per frame.

    Usage:
        sim = FluidSimulation(N=64, seed=0)
        for frame in range(100):
            sim.emit(32, 32)            # Puff of dye at the center
            sim.step()
            density = sim.density       # Hand to visualizer
    """

    def __init__(self, N: int = GRID_SIZE, dt: float = DT,
                 density_diffusion: float = DENSITY_DIFFUSION,
                 velocity_diffusion: float = VELOCITY_DIFFUSION,
                 iterations: int = SOLVER_ITERATIONS, seed: int = None):
        """
        Args:
            N                  : Grid resolution (128 → 128² cells)
            dt                 : Timestep
            density_diffusion  : Dye spreading rate
            velocity_diffusion : Viscosity (keep very small for water-like flow)
            iterations         : Gauss-Seidel sweeps per solve
            seed               : Seed for the emitter's random amounts
        """
        self.state = FluidState(N=N, dt=dt,
                                density_diffusion=density_diffusion,
                                velocity_diffusion=velocity_diffusion,
                                iterations=iterations)
        self.frame = 0
        self.rng = np.random.default_rng(seed)
        self.perf_log = []   # stores timing data per frame

    @property
    def N(self) -> int:
        return self.state.N

    @property
    def density(self) -> np.ndarray:
        """Rendered density, (N, N) indexed [i, j], read-only."""
        return self.state.density_field

    def add_density_source(self, i: int, j: int, amount: float):
        self.state.add_density_source(i, j, amount)

    def add_velocity_source(self, i: int, j: int, dx: float, dy: float):
        self.state.add_velocity_source(i, j, dx, dy)

    def emit(self, i: int, j: int, radius: int = SPLAT_RADIUS) -> dict:
        """
        Inject a randomised puff at (i, j): dye over the surrounding block,
        plus a random push at the center cell.
        """
        amount = splat_density(self.state, i, j, self.rng, radius=radius)
        dx, dy = random_velocity(self.state, i, j, self.rng)
        return {"density": amount, "velocity": (dx, dy)}

    def step(self) -> dict:
        """
        Advance simulation by one timestep (dt).

        Returns performance metrics dict for benchmarking.
        """
        t_total_start = time.perf_counter()

        # ── Velocity: diffuse → project → advect → project ─────────────────
        t0 = time.perf_counter()
        first, second = velocity_step(self.state)
        t_velocity = (time.perf_counter() - t0) * 1000

        # ── Density: diffuse → advect ──────────────────────────────────────
        t0 = time.perf_counter()
        density_step(self.state)
        t_density = (time.perf_counter() - t0) * 1000

        # ── Frame bookkeeping ──────────────────────────────────────────────
        self.frame += 1
        t_total = (time.perf_counter() - t_total_start) * 1000

        metrics = {
            "frame"          : self.frame,
            "total_ms"       : t_total,
            "fps"            : 1000.0 / t_total if t_total > 0 else 0,
            "velocity_ms"    : t_velocity,
            "project1_ms"    : first["time_ms"],
            "project2_ms"    : second["time_ms"],
            "density_ms"     : t_density,
            "divergence_max" : second["divergence_after_max"],
            "density_total"  : float(self.state.density_prev.interior.sum()),
        }
        self.perf_log.append(metrics)
        return metrics

    def reset(self):
        self.state.reset()
        self.frame = 0
        self.perf_log.clear()

    def close(self):
        self.state.destroy()
        print(f"[Simulation] Released {self.N}x{self.N} grids after {self.frame} frames")

    def print_status(self):
        """Pretty-print current simulation state."""
        self.state.require_alive()
        s = self.state
        density = s.density_prev.interior
        print(f"\n{'='*50}")
        print(f"  Frame: {self.frame}  |  Grid: {s.N}x{s.N}  |  dt={s.dt}")
        print(f"  Density   : max={density.max():.4f}, total={density.sum():.2f}")
        print(f"  Velocity  : max_x={np.abs(s.vx.interior).max():.4f}, "
              f"max_y={np.abs(s.vy.interior).max():.4f}")
        if self.perf_log:
            last = self.perf_log[-1]
            print(f"  Divergence: max={last['divergence_max']:.6f}")
            print(f"  Perf      : {last['total_ms']:.1f}ms/frame ({last['fps']:.1f} FPS)")
        print(f"{'='*50}")
