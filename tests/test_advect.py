import numpy as np

from fluid2d import BoundaryRule, Grid
from fluid2d.advect import advect, backtrace


def _random_grid(N, seed):
    g = Grid(N, dtype=np.float64)
    g.data[:] = np.random.default_rng(seed).random(N * N)
    return g


def test_zero_velocity_leaves_the_field_unchanged():
    N = 10
    source = _random_grid(N, 0)
    unknown = Grid(N, np.float64)
    still = Grid(N, np.float64)
    advect(BoundaryRule.COPY, unknown, source, still, still, dt=0.1)
    assert np.array_equal(unknown.interior, source.interior)


def test_uniform_velocity_shifts_by_one_cell():
    # dt * (N-2) * vx = 0.125 * 8 * 1.0 = exactly one cell
    N = 10
    source = _random_grid(N, 1)
    vx, vy = Grid(N, np.float64), Grid(N, np.float64)
    vx.data[:] = 1.0
    unknown = Grid(N, np.float64)

    advect(BoundaryRule.COPY, unknown, source, vx, vy, dt=0.125)

    s, u = source.cells, unknown.cells
    assert np.allclose(u[2:-1, 1:-1], s[1:-2, 1:-1])
    # i = 1 traces back to 0, clamped to 0.5
    assert np.allclose(u[1, 1:-1], 0.5 * (s[0, 1:-1] + s[1, 1:-1]))


def test_backtrace_is_clamped_inside_the_sampleable_interior():
    N = 12
    vx, vy = Grid(N, np.float64), Grid(N, np.float64)
    vx.data[:] = 1e6
    vy.data[:] = -1e6
    x, y = backtrace(vx, vy, dt=0.1)
    assert np.all(x == 0.5)
    assert np.all(y == N - 1.5)


def test_fast_flow_stays_bounded_by_the_source():
    N = 16
    source = _random_grid(N, 2)
    vx, vy = _random_grid(N, 3), _random_grid(N, 4)
    vx.data[:] = (vx.data - 0.5) * 50
    vy.data[:] = (vy.data - 0.5) * 50
    unknown = Grid(N, np.float64)

    advect(BoundaryRule.COPY, unknown, source, vx, vy, dt=0.2)

    assert np.all(np.isfinite(unknown.data))
    assert unknown.interior.min() >= source.data.min() - 1e-12
    assert unknown.interior.max() <= source.data.max() + 1e-12


def test_boundaries_follow_the_advected_field():
    N = 8
    source = _random_grid(N, 5)
    vx, vy = Grid(N, np.float64), Grid(N, np.float64)
    unknown = Grid(N, np.float64)
    advect(BoundaryRule.NEGATE_Y, unknown, source, vx, vy, dt=0.1)
    c = unknown.cells
    assert np.array_equal(c[1:-1, 0], -c[1:-1, 1])
    assert np.array_equal(c[0, 1:-1], c[1, 1:-1])
