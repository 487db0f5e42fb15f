import numpy as np
import pytest

from fluid2d import BoundaryRule, Grid, set_boundaries
from fluid2d.solver import compute_divergence, max_divergence, project


def _velocity(N, seed):
    rng = np.random.default_rng(seed)
    vx, vy = Grid(N, np.float64), Grid(N, np.float64)
    vx.interior[:] = rng.standard_normal((N - 2, N - 2))
    vy.interior[:] = rng.standard_normal((N - 2, N - 2))
    set_boundaries(BoundaryRule.NEGATE_X, vx)
    set_boundaries(BoundaryRule.NEGATE_Y, vy)
    return vx, vy


def _divergence_norm(vx, vy):
    return float(np.sqrt((compute_divergence(vx, vy).interior ** 2).sum()))


def test_divergence_of_a_linear_field():
    N = 10
    vx, vy = Grid(N, np.float64), Grid(N, np.float64)
    vx.cells[:] = np.arange(N, dtype=np.float64)[:, None]
    div = compute_divergence(vx, vy)
    assert np.allclose(div.interior, -1.0 / N)
    # ring is left alone
    assert not div.cells[0, :].any()


def test_divergence_writes_into_the_given_scratch():
    vx, vy = _velocity(8, 0)
    out = Grid(8, np.float64)
    assert compute_divergence(vx, vy, out) is out


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_projection_reduces_divergence_of_random_fields(seed):
    N = 16
    vx, vy = _velocity(N, seed)
    before = _divergence_norm(vx, vy)

    project(vx, vy, Grid(N, np.float64), Grid(N, np.float64), iterations=20)

    assert _divergence_norm(vx, vy) < before


def test_projection_reduces_divergence_of_a_single_impulse():
    N = 10
    vx, vy = Grid(N, np.float64), Grid(N, np.float64)
    vx[5, 5] = 1.0
    before = _divergence_norm(vx, vy)

    metrics = project(vx, vy, Grid(N, np.float64), Grid(N, np.float64), iterations=20)

    assert _divergence_norm(vx, vy) < before
    assert metrics["divergence_after_max"] < metrics["divergence_before_max"]
    assert metrics["divergence_before_max"] == pytest.approx(0.5 / N)


def test_projection_leaves_walls_consistent():
    N = 12
    vx, vy = _velocity(N, 4)
    pressure = Grid(N, np.float64)
    project(vx, vy, Grid(N, np.float64), pressure, iterations=10)

    assert np.array_equal(vx.cells[0, 1:-1], -vx.cells[1, 1:-1])
    assert np.array_equal(vy.cells[1:-1, -1], -vy.cells[1:-1, -2])
    # pressure walls copy their neighbour
    assert np.array_equal(pressure.cells[0, 1:-1], pressure.cells[1, 1:-1])


def test_still_field_stays_still():
    N = 10
    vx, vy = Grid(N, np.float64), Grid(N, np.float64)
    pressure = Grid(N, np.float64)
    project(vx, vy, Grid(N, np.float64), pressure, iterations=20)
    assert not vx.data.any()
    assert not vy.data.any()
    assert not pressure.data.any()


def test_max_divergence_matches_compute_divergence():
    vx, vy = _velocity(9, 6)
    expected = np.abs(compute_divergence(vx, vy).interior).max()
    assert max_divergence(vx, vy) == pytest.approx(expected)
