"""Petri: Gray-Scott reaction-diffusion on a fixed-border grid."""

from petri.grid import Grid
from petri.engine import Color, ReactionDiffusion
from petri.kinetics import ReactionParams
from petri.laplacian import KERNEL_3X3
from petri.constants import DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_SEED_CENTER, DEFAULT_SEED_RADIUS

__all__ = [
    "Grid", "Color", "ReactionDiffusion", "ReactionParams", "KERNEL_3X3",
    "DEFAULT_WIDTH", "DEFAULT_HEIGHT", "DEFAULT_SEED_CENTER", "DEFAULT_SEED_RADIUS",
]
