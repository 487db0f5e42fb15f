# Grid resolution (N x N cells, outer ring included)
GRID_SIZE = 128

# Time step
DT = 0.2

# Diffusion rates
DENSITY_DIFFUSION = 0.0
VELOCITY_DIFFUSION = 0.000001

# Gauss-Seidel sweeps per solve
SOLVER_ITERATIONS = 20

# Source injection (per frame, around the selected cell)
SPLAT_RADIUS = 1
SPLAT_DENSITY_RANGE = (0.0, 1.0)
SPLAT_VELOCITY_MAGNITUDE = 1.0

# Visualization
CELL_SCALE = 4  # pixels per cell
FPS = 30
BACKGROUND_COLOR = (0.0, 0.0, 0.0)
FLUID_COLOR = (1.0, 1.0, 1.0)
WALL_COLOR = (1.0, 1.0, 0.0)
