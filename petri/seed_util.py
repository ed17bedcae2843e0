"""Seed-circle geometry. A cell is seeded when its center (i, j) lies strictly inside the circle,
so radius 0 seeds nothing. The center may be off-grid; cells outside the grid are never tested."""

from typing import Tuple

import numpy as np


def circle_mask(height: int, width: int, center: Tuple[float, float], radius: float) -> np.ndarray:
    """Boolean (height, width) mask of cells with (i - ci)^2 + (j - cj)^2 < radius^2."""
    ci, cj = float(center[0]), float(center[1])
    r = float(radius)
    ii, jj = np.ogrid[0:height, 0:width]
    return (ci - ii) * (ci - ii) + (cj - jj) * (cj - jj) < r * r


def relative_center(width: int, height: int, row_frac: float, col_frac: float) -> Tuple[float, float]:
    """
    Absolute (row, col) from fractions of the grid size, so the same layout holds for any
    world size. relative_center(w, h, 1/6, 1/4) is the placement of the large display seed.
    """
    return (height * float(row_frac), width * float(col_frac))
