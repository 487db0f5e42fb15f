"""
errors.py — Solver Error Taxonomy
==================================
Every error the solver raises is caller misuse (bad configuration, bad
indices, using a destroyed state) or an allocation failure at startup.
None of them are transient, so nothing here is retried.

Each class also derives from the matching builtin so callers that only
know about ValueError / IndexError keep working.
"""


class FluidError(Exception):
    """Base class for all solver errors."""


class ConfigurationError(FluidError, ValueError):
    """Invalid grid size, timestep, rate or iteration count."""


class IndexOutOfRange(FluidError, IndexError):
    """Cell coordinates outside [0, N-1]."""

    def __init__(self, i, j, N: int):
        super().__init__(f"Cell ({i}, {j}) is outside the {N}x{N} grid")
        self.i = i
        self.j = j
        self.N = N


class AllocationFailure(FluidError, MemoryError):
    """Grid buffers could not be allocated."""


class StateDestroyed(FluidError, RuntimeError):
    """The FluidState was used after destroy()."""
