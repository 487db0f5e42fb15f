"""
fluid2d/ — 2D Stable-Fluids Solver
===================================
Exports the interfaces the frame loop and renderers use.

    from fluid2d import FluidState, simulation_step

    state = FluidState(N=64, dt=0.1, density_diffusion=0.0, velocity_diffusion=0.0)
    state.add_density_source(32, 32, 1.0)
    simulation_step(state)
    alpha = state.density_field.clip(0.0, 1.0)
"""

from .boundary import BoundaryRule, Quantity, SolveRole, set_boundaries
from .errors import (
    AllocationFailure, ConfigurationError, FluidError, IndexOutOfRange, StateDestroyed,
)
from .grid import FluidState, Grid
from .simulation import FluidSimulation, density_step, simulation_step, velocity_step

__all__ = [
    "FluidState", "Grid", "FluidSimulation",
    "simulation_step", "velocity_step", "density_step",
    "BoundaryRule", "Quantity", "SolveRole", "set_boundaries",
    "FluidError", "ConfigurationError", "IndexOutOfRange",
    "AllocationFailure", "StateDestroyed",
]
