"""
Discrete Laplacian on the interior of a grid. Corners 0.05, edge-midpoints 0.2, center -1.
Only interior cells are convolved, so neighbor slices never leave the array: no padding,
no wraparound. Work is split into row bands [row_lo, row_hi) so bands can run concurrently.
"""

import numpy as np

from petri.constants import W_CENTER, W_CORNER, W_EDGE

KERNEL_3X3 = np.array(
    [
        [W_CORNER, W_EDGE, W_CORNER],
        [W_EDGE, W_CENTER, W_EDGE],
        [W_CORNER, W_EDGE, W_CORNER],
    ],
    dtype=np.float64,
)
KERNEL_3X3.setflags(write=False)

# Diffusion must vanish on a flat field; allow float rounding in user kernels.
KERNEL_SUM_TOL = 1e-9


def validate_kernel(kernel) -> np.ndarray:
    """
    Return kernel as a read-only float64 (3, 3) array. Raises ValueError if it is not 3×3 or does not sum to 0.

    Orientation is row-major: kernel[1 + di][1 + dj] weights the neighbour at (i + di, j + dj), so the
    first kernel row applies to the row above the cell. Symmetric kernels are unaffected.
    """
    k = np.array(kernel, dtype=np.float64)
    if k.shape != (3, 3):
        raise ValueError(f"kernel must be 3x3, got shape {k.shape}")
    if not np.all(np.isfinite(k)):
        raise ValueError("kernel weights must be finite")
    total = float(np.sum(k))
    if abs(total) > KERNEL_SUM_TOL:
        raise ValueError(f"kernel weights must sum to 0, got {total!r}")
    k.setflags(write=False)
    return k


def convolve_interior(
    arr: np.ndarray,
    kernel: np.ndarray = KERNEL_3X3,
    row_lo: int = 1,
    row_hi: int | None = None,
) -> np.ndarray:
    """
    Convolve interior rows [row_lo, row_hi) and interior columns [1, w-1) with a 3×3 kernel.
    Returns shape (row_hi - row_lo, w - 2). Requires 1 <= row_lo <= row_hi <= h - 1.
    kernel[ki, kj] weights arr[i - 1 + ki, j - 1 + kj] (correlation, no kernel flip).
    """
    h, w = arr.shape
    if row_hi is None:
        row_hi = h - 1
    rows = row_hi - row_lo
    cols = w - 2
    out = np.zeros((max(0, rows), max(0, cols)), dtype=arr.dtype)
    if rows <= 0 or cols <= 0:
        return out
    for ki in range(3):
        for kj in range(3):
            out += kernel[ki, kj] * arr[row_lo - 1 + ki : row_hi - 1 + ki, kj : kj + cols]
    return out


def row_bands(height: int, count: int) -> list[tuple[int, int]]:
    """Split interior rows 1..height-2 into at most `count` contiguous non-empty bands."""
    lo, hi = 1, height - 1
    n = hi - lo
    if n <= 0:
        return []
    count = max(1, min(int(count), n))
    edges = [lo + (n * k) // count for k in range(count + 1)]
    return [(edges[k], edges[k + 1]) for k in range(count)]
