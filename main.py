"""
main.py — Master Entry Point
=============================
Top-level script that runs the 2D fluid simulation.

Usage:
    python main.py --mode live                  # Interactive window, click to move the source
    python main.py --mode live --gif out.gif    # Render frames to a GIF instead
    python main.py                              # Headless run, prints stats
    python main.py --mode benchmark             # Per-stage timing breakdown
"""

import argparse
import numpy as np

from fluid2d.config import DT, FPS, GRID_SIZE, SOLVER_ITERATIONS


def run_live(N: int = GRID_SIZE, dt: float = DT, iterations: int = SOLVER_ITERATIONS,
             seed: int = None, frames: int = None, gif: str = None):
    """Live interactive visualization."""
    from fluid2d import FluidSimulation
    from visualizer import FluidVisualizer

    print(f"Starting live simulation (N={N})...")
    print("Click to move the source. Close the window to exit.\n")

    sim = FluidSimulation(N=N, dt=dt, iterations=iterations, seed=seed)
    viz = FluidVisualizer(sim)
    try:
        if gif:
            viz.save_gif(gif, frames=frames or 100)
        else:
            viz.run(fps=FPS, frames=frames)
    finally:
        sim.close()


def run_headless(N: int = GRID_SIZE, dt: float = DT, iterations: int = SOLVER_ITERATIONS,
                 seed: int = None, frames: int = 100):
    """Run simulation without display, printing stats every 10 frames."""
    from fluid2d import FluidSimulation

    print(f"\nHeadless simulation | N={N} | {frames} frames")
    print(f"{'─'*60}")

    sim = FluidSimulation(N=N, dt=dt, iterations=iterations, seed=seed)
    total_times = []

    for f in range(frames):
        # Source at the center
        sim.emit(N // 2, N // 2)

        metrics = sim.step()
        total_times.append(metrics["total_ms"])

        if f % 10 == 0:
            print(f"  Frame {f:03d} | {metrics['total_ms']:6.1f}ms "
                  f"({metrics['fps']:.1f} FPS) | "
                  f"div_max={metrics['divergence_max']:.5f} | "
                  f"density={metrics['density_total']:.1f}")

    sim.print_status()
    sim.close()

    print(f"\n{'─'*60}")
    print(f"  Average: {np.mean(total_times):.1f}ms/frame ({1000/np.mean(total_times):.1f} FPS)")
    print(f"  Min:     {np.min(total_times):.1f}ms")
    print(f"  Max:     {np.max(total_times):.1f}ms")


def run_benchmark(N: int = GRID_SIZE, dt: float = DT, iterations: int = SOLVER_ITERATIONS,
                  seed: int = None, frames: int = 50):
    """
    Detailed performance breakdown.
    Shows how long each stage of the step takes.
    """
    from fluid2d import FluidSimulation

    print(f"\n{'='*60}")
    print(f"  SOLVER BENCHMARK | N={N} | {iterations} sweeps | {frames} frames")
    print(f"{'='*60}")

    sim = FluidSimulation(N=N, dt=dt, iterations=iterations, seed=seed)

    # Warm up
    for _ in range(5):
        sim.emit(N // 2, N // 2)
        sim.step()

    # Benchmark
    logs = []
    for _ in range(frames):
        sim.emit(N // 2, N // 2)
        logs.append(sim.step())
    sim.close()

    keys = ["velocity_ms", "project1_ms", "project2_ms", "density_ms", "total_ms"]

    print(f"\n{'Step':<20} {'Mean':>8} {'Min':>8} {'Max':>8}")
    print(f"{'─'*50}")
    for k in keys:
        vals = [m[k] for m in logs]
        print(f"  {k:<18} {np.mean(vals):>7.1f}ms {np.min(vals):>7.1f}ms {np.max(vals):>7.1f}ms")

    total_vals = [m["total_ms"] for m in logs]
    print(f"\n{'─'*50}")
    print(f"  FPS (solver only): {1000/np.mean(total_vals):.1f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2D Fluid Simulation")
    parser.add_argument(
        "--mode", choices=["live", "headless", "benchmark"],
        default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--N",          type=int,   default=GRID_SIZE, help=f"Grid resolution (default: {GRID_SIZE})")
    parser.add_argument("--dt",         type=float, default=DT, help=f"Timestep (default: {DT})")
    parser.add_argument("--iterations", type=int,   default=SOLVER_ITERATIONS, help="Gauss-Seidel sweeps per solve")
    parser.add_argument("--frames",     type=int,   default=None, help="Number of frames")
    parser.add_argument("--seed",       type=int,   default=None, help="Seed for the random source amounts")
    parser.add_argument("--gif",        type=str,   default=None, help="live mode: save a GIF to this path instead of opening a window")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    common = dict(N=args.N, dt=args.dt, iterations=args.iterations, seed=args.seed)

    if args.mode == "live":
        run_live(frames=args.frames, gif=args.gif, **common)
    elif args.mode == "headless":
        run_headless(frames=args.frames or 100, **common)
    elif args.mode == "benchmark":
        run_benchmark(frames=args.frames or 50, **common)


if __name__ == "__main__":
    main()
