from types import SimpleNamespace

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from fluid2d import FluidSimulation
from visualizer import FluidVisualizer, density_to_rgba, event_to_cell


def test_density_becomes_clamped_alpha():
    density = np.zeros((6, 6))
    density[2, 3] = 0.4
    density[3, 2] = 7.0
    density[1, 1] = -1.0
    rgba = density_to_rgba(density)

    assert rgba.shape == (6, 6, 4)
    # image rows are j, columns are i
    assert rgba[3, 2, 3] == pytest.approx(0.4)
    assert rgba[2, 3, 3] == 1.0
    assert rgba[1, 1, 3] == 0.0


def test_walls_are_opaque():
    rgba = density_to_rgba(np.zeros((5, 5)), wall_color=(1.0, 1.0, 0.0))
    for edge in (rgba[0, :], rgba[-1, :], rgba[:, 0], rgba[:, -1]):
        assert np.all(edge[:, 3] == 1.0)
        assert np.all(edge[:, :3] == (1.0, 1.0, 0.0))


def test_mouse_position_maps_to_an_interior_cell():
    assert event_to_cell(3.2, 6.7, 10) == (3, 7)
    assert event_to_cell(-0.4, 9.4, 10) == (1, 8)
    assert event_to_cell(None, 2.0, 10) is None


def test_viewer_steps_and_follows_clicks(capsys):
    sim = FluidSimulation(N=12, dt=0.1, iterations=5, seed=0)
    viz = FluidVisualizer(sim)
    try:
        assert viz.cell == (6, 6)

        viz.on_click(SimpleNamespace(inaxes=viz.ax, xdata=3.1, ydata=8.2))
        assert viz.cell == (3, 8)
        assert "[Viewer] Source moved to cell (3, 8)" in capsys.readouterr().out

        viz.on_click(SimpleNamespace(inaxes=None, xdata=5.0, ydata=5.0))
        assert viz.cell == (3, 8)

        artists = viz.update(0)
        assert sim.frame == 1
        assert viz.img in artists
        assert sim.density[3, 8] > 0
    finally:
        plt.close(viz.fig)
        sim.close()
