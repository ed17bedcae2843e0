"""Simulation constants. Substrate = (A=1, B=0); the seed circle is pure activator (A=0, B=1)."""

SUBSTRATE = (1.0, 0.0)
ACTIVATOR = (0.0, 1.0)

DEFAULT_WIDTH, DEFAULT_HEIGHT = 48, 48
# Seed circle center is (row, col); it may lie partly or fully off-grid.
DEFAULT_SEED_CENTER = (12.0, 20.0)
DEFAULT_SEED_RADIUS = 3.0

# Gray-Scott defaults (mitosis-like spots at speed 1.0)
DEFAULT_DIFFUSION_A = 1.0
DEFAULT_DIFFUSION_B = 0.5
DEFAULT_FEED_RATE = 0.055
DEFAULT_KILL_RATE = 0.062
DEFAULT_SPEED = 1.0

# Laplacian weights: 4 edge-midpoints + 4 corners + center sum to zero.
W_EDGE, W_CORNER, W_CENTER = 0.2, 0.05, -1.0
