"""One generation of the two-chemical field. Arrays are (height, width), row-major, float64."""

from numbers import Integral
from typing import Tuple

import numpy as np

from petri.constants import ACTIVATOR, SUBSTRATE
from petri.seed_util import circle_mask


class Grid:
    """A and B concentrations per cell; values are not clamped."""

    __slots__ = ("shape", "a", "b")

    def __init__(self, width: int, height: int) -> None:
        for name, value in (("width", width), ("height", height)):
            if not isinstance(value, Integral) or isinstance(value, bool):
                raise ValueError(f"grid {name} must be an integer, got {value!r}")
            if value < 1:
                raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.shape = (int(height), int(width))
        self.a = np.full(self.shape, SUBSTRATE[0], dtype=np.float64)
        self.b = np.full(self.shape, SUBSTRATE[1], dtype=np.float64)

    @property
    def width(self) -> int:
        return self.shape[1]

    @property
    def height(self) -> int:
        return self.shape[0]

    def get_cell(self, i: int, j: int) -> tuple[float, float]:
        return float(self.a[i, j]), float(self.b[i, j])

    def set_initial_state(self, center: Tuple[float, float], radius: float) -> int:
        """Uniform substrate everywhere, pure activator strictly inside the circle. Returns seeded cell count."""
        self.a.fill(SUBSTRATE[0])
        self.b.fill(SUBSTRATE[1])
        mask = circle_mask(self.height, self.width, center, radius)
        self.a[mask] = ACTIVATOR[0]
        self.b[mask] = ACTIVATOR[1]
        return int(np.count_nonzero(mask))

    def copy(self) -> "Grid":
        """Independent copy; the two arrays never share memory with self."""
        out = Grid(self.width, self.height)
        out.a[:] = self.a
        out.b[:] = self.b
        return out
