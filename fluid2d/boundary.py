"""
boundary.py — Solid-Wall Boundary Conditions
=============================================
The outer ring of every grid is never solved, it is recomputed from the
interior after each write:

  - Normal velocity at a wall = negated interior neighbour (no penetration)
  - Tangential velocity and scalars (density, pressure) = copied (continuity)
  - Corner cell = average of its two adjacent edge cells

Three independent properties describe how a grid is treated:

  Quantity      → which physical field it holds
  BoundaryRule  → what happens at the walls (each Quantity has a default)
  SolveRole     → which linear system relax.iter_solve() is solving

Pressure copies at the walls (Neumann). Some variants of this method
negate or extrapolate pressure instead; copying is the convention kept here.
"""

from enum import Enum

from .grid import Grid


class BoundaryRule(Enum):
    """(sign on the i=0/N-1 walls, sign on the j=0/N-1 walls)."""

    COPY     = (1.0, 1.0)
    NEGATE_X = (-1.0, 1.0)
    NEGATE_Y = (1.0, -1.0)

    def __init__(self, x_sign, y_sign):
        self.x_sign = x_sign
        self.y_sign = y_sign


class Quantity(Enum):
    DENSITY    = "density"
    VELOCITY_X = "velocity_x"
    VELOCITY_Y = "velocity_y"
    PRESSURE   = "pressure"

    @property
    def rule(self) -> BoundaryRule:
        if self is Quantity.VELOCITY_X:
            return BoundaryRule.NEGATE_X
        if self is Quantity.VELOCITY_Y:
            return BoundaryRule.NEGATE_Y
        return BoundaryRule.COPY


class SolveRole(Enum):
    DIFFUSION = "diffusion"
    PRESSURE  = "pressure"

    def denominator(self, k: float) -> float:
        # Pressure-Poisson always solves with k = 1 and a fixed 4
        if self is SolveRole.PRESSURE:
            return 4.0
        return 1.0 + 4.0 * k


def set_boundaries(rule: BoundaryRule, grid: Grid):
    """
    Recompute the outer ring of `grid` in place from its interior.

    Must run after every relaxation sweep and every advection pass,
    before anything else reads the grid.
    """
    if isinstance(rule, Quantity):
        rule = rule.rule
    c = grid.cells

    # Walls j=0 and j=N-1: neighbour one row in
    c[1:-1, 0]  = rule.y_sign * c[1:-1, 1]
    c[1:-1, -1] = rule.y_sign * c[1:-1, -2]

    # Walls i=0 and i=N-1: neighbour one column in
    c[0, 1:-1]  = rule.x_sign * c[1, 1:-1]
    c[-1, 1:-1] = rule.x_sign * c[-2, 1:-1]

    c[0, 0]   = 0.5 * (c[1, 0]   + c[0, 1])
    c[-1, 0]  = 0.5 * (c[-2, 0]  + c[-1, 1])
    c[0, -1]  = 0.5 * (c[1, -1]  + c[0, -2])
    c[-1, -1] = 0.5 * (c[-2, -1] + c[-1, -2])
