"""
visualizer.py — Interactive Density Viewer
===========================================
Renders the 2D density field as a grid of cells:
  - Interior cells → fluid color, alpha = density clamped to [0, 1]
  - Wall ring      → opaque wall color

Click anywhere in the window to move the source. Every frame the viewer
injects a puff of dye + a random push at the selected cell, steps the
simulation once, and redraws.

Uses matplotlib FuncAnimation for real-time updates.
"""

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation

from fluid2d.config import BACKGROUND_COLOR, CELL_SCALE, FLUID_COLOR, WALL_COLOR
from fluid2d.sources import clamp_cell


def density_to_rgba(density: np.ndarray, fluid_color=FLUID_COLOR,
                    wall_color=WALL_COLOR) -> np.ndarray:
    """
    Map a density grid (indexed [i, j]) to an RGBA image (indexed [row=j, col=i]).

    Returns float32 array of shape (N, N, 4).
    """
    N = density.shape[0]
    rgba = np.empty((N, N, 4), dtype=np.float32)
    rgba[..., :3] = fluid_color
    rgba[..., 3] = np.clip(density.T, 0.0, 1.0)

    wall = np.array([*wall_color, 1.0], dtype=np.float32)
    rgba[0, :] = wall
    rgba[-1, :] = wall
    rgba[:, 0] = wall
    rgba[:, -1] = wall
    return rgba


def event_to_cell(xdata, ydata, N: int):
    """
    Map data coordinates of a mouse event to an interior cell (i, j).
    imshow puts cell centers on integer coordinates. None when outside.
    """
    if xdata is None or ydata is None:
        return None
    return clamp_cell(round(xdata), round(ydata), N)


class FluidVisualizer:
    """
    Real-time viewer of the 2D fluid simulation.

    Usage (standalone):
        from fluid2d import FluidSimulation
        from visualizer import FluidVisualizer

        sim = FluidSimulation(N=128)
        viz = FluidVisualizer(sim)
        viz.run()  # Opens live window, click to move the source
    """

    def __init__(self, simulation, scale: int = CELL_SCALE):
        """
        Args:
            simulation : FluidSimulation instance
            scale      : Screen pixels per cell
        """
        self.sim = simulation
        self.N = simulation.N
        self.scale = scale
        self.cell = clamp_cell(self.N // 2, self.N // 2, self.N)

        self._setup_figure()

    def _setup_figure(self):
        """Initialize the matplotlib figure and hook up the mouse."""
        side = max(4.0, self.N * self.scale / 100.0)
        self.fig, self.ax = plt.subplots(figsize=(side, side))
        self.fig.patch.set_facecolor(BACKGROUND_COLOR)
        self.ax.set_facecolor(BACKGROUND_COLOR)
        self.ax.set_xticks([])
        self.ax.set_yticks([])

        self.img = self.ax.imshow(
            density_to_rgba(np.zeros((self.N, self.N))),
            interpolation="nearest",
            origin="lower",
            aspect="equal",
        )

        self.title_text = self.fig.suptitle(
            "Fluid Sim — Frame 0 | 0.0 FPS",
            color="#cccccc", fontsize=10, fontfamily="monospace"
        )

        self.fig.canvas.mpl_connect("button_press_event", self.on_click)
        plt.tight_layout()

    def on_click(self, event):
        if event.inaxes is not self.ax:
            return
        cell = event_to_cell(event.xdata, event.ydata, self.N)
        if cell is not None:
            self.cell = cell
            print(f"[Viewer] Source moved to cell {cell}")

    def update(self, frame_num):
        """Called by FuncAnimation each frame. Steps sim and updates the image."""
        self.sim.emit(*self.cell)
        metrics = self.sim.step()

        self.img.set_data(density_to_rgba(self.sim.density))
        self.title_text.set_text(
            f"Fluid Sim — Frame {metrics['frame']} | "
            f"{metrics['fps']:.1f} FPS | "
            f"div_max={metrics['divergence_max']:.5f}"
        )
        return [self.img, self.title_text]

    def run(self, fps: int = 30, frames: int = None):
        """
        Start the live animation window.

        Args:
            fps    : Target animation frame rate
            frames : Total frames to render (None = until the window closes)
        """
        interval_ms = 1000 // fps
        self.anim = animation.FuncAnimation(
            self.fig,
            self.update,
            frames=frames,
            interval=interval_ms,
            blit=False,
            cache_frame_data=False,
        )
        plt.show()

    def save_gif(self, path: str = "fluid_sim.gif", fps: int = 10, frames: int = 100):
        """Save animation as a GIF (for reports and demos)."""
        print(f"[Viewer] Rendering {frames} frames to {path}...")
        self.anim = animation.FuncAnimation(
            self.fig, self.update, frames=frames, interval=1000 // fps, blit=False
        )
        writer = animation.PillowWriter(fps=fps)
        self.anim.save(path, writer=writer)
        print(f"[Viewer] Saved: {path}")
