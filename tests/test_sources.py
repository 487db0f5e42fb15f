import numpy as np
import pytest

from fluid2d import FluidState
from fluid2d.sources import clamp_cell, random_velocity, splat_density


def _state(N=10):
    return FluidState(N=N, dt=0.1, density_diffusion=0.0, velocity_diffusion=0.0)


def test_splat_covers_the_block_around_the_cell():
    state = _state()
    total = splat_density(state, 5, 5, np.random.default_rng(0), radius=1)

    touched = state.density_prev.cells != 0
    assert touched.sum() == 9
    assert touched[4:7, 4:7].all()
    assert total == pytest.approx(float(state.density_prev.data.sum()), rel=1e-6)


def test_splat_amounts_stay_in_range():
    state = _state()
    splat_density(state, 5, 5, np.random.default_rng(1), radius=2, low=0.2, high=0.4)
    block = state.density_prev.cells[3:8, 3:8]
    assert block.min() >= 0.2
    assert block.max() <= 0.4 + 1e-6


def test_splat_skips_cells_off_the_grid():
    state = _state()
    splat_density(state, 0, 0, np.random.default_rng(2), radius=1)
    touched = state.density_prev.cells != 0
    assert touched.sum() == 4
    assert touched[0:2, 0:2].all()


def test_random_velocity_is_bounded_and_lands_on_the_cell():
    state = _state()
    dx, dy = random_velocity(state, 3, 6, np.random.default_rng(3), magnitude=0.5)
    assert -0.5 <= dx < 0.5 and -0.5 <= dy < 0.5
    assert state.vx[3, 6] == pytest.approx(dx)
    assert state.vy[3, 6] == pytest.approx(dy)


@pytest.mark.parametrize("cell, expected", [
    ((5, 5), (5, 5)),
    ((0, 0), (1, 1)),
    ((-4, 20), (1, 8)),
    ((9, 3), (8, 3)),
])
def test_clamp_cell_keeps_sources_in_the_interior(cell, expected):
    assert clamp_cell(*cell, N=10) == expected
