"""
Reaction-diffusion engine: two grid buffers, one readable (the committed generation) and one
written by step(). Interior rows are computed in bands, optionally on a thread pool, and the
new generation is committed by exchanging buffer roles once every band has finished.
Border cells are never written, so they keep their initial values in both buffers.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import NamedTuple, Tuple

import numpy as np

from petri.constants import DEFAULT_SEED_CENTER, DEFAULT_SEED_RADIUS
from petri.grid import Grid
from petri.kinetics import ReactionParams, react
from petri.laplacian import KERNEL_3X3, convolve_interior, row_bands, validate_kernel

logger = logging.getLogger(__name__)


class Color(NamedTuple):
    """Display color of one cell: red = A, green = 0, blue = B, opaque. Not clamped."""

    r: float
    g: float
    b: float
    a: float


class ReactionDiffusion:
    """Gray-Scott simulation over a fixed-size grid with a fixed, untouched border."""

    def __init__(
        self,
        params: ReactionParams | None = None,
        kernel=None,
        workers: int = 1,
    ) -> None:
        if int(workers) < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.params = params if params is not None else ReactionParams()
        self.kernel = KERNEL_3X3 if kernel is None else validate_kernel(kernel)
        self.workers = int(workers)
        self._buffers: list[Grid] = []
        self._front = 0
        self._bands: list[tuple[int, int]] = []
        self._executor: ThreadPoolExecutor | None = None
        self.generation = 0

    # ---------- lifecycle ----------

    def initialize(
        self,
        width: int,
        height: int,
        seed_center: Tuple[float, float] = DEFAULT_SEED_CENTER,
        seed_radius: float = DEFAULT_SEED_RADIUS,
    ) -> None:
        """Allocate both buffers, fill with substrate and seed the activator circle. Restarts if called again."""
        if float(seed_radius) < 0:
            raise ValueError(f"seed radius must be >= 0, got {seed_radius}")
        current = Grid(width, height)
        seeded = current.set_initial_state(seed_center, seed_radius)
        self._buffers = [current, current.copy()]
        self._front = 0
        self._bands = row_bands(current.height, self.workers)
        self.generation = 0
        logger.debug(
            "initialized %dx%d grid, %d seeded cells (center=%s, radius=%s), %d band(s)",
            current.width, current.height, seeded, tuple(seed_center), seed_radius, len(self._bands),
        )

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "ReactionDiffusion":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def initialized(self) -> bool:
        return bool(self._buffers)

    def _require_init(self) -> None:
        if not self._buffers:
            raise RuntimeError("engine not initialized; call initialize(width, height) first")

    @property
    def shape(self) -> tuple[int, int]:
        """(height, width)."""
        self._require_init()
        return self._buffers[0].shape

    @property
    def width(self) -> int:
        return self.shape[1]

    @property
    def height(self) -> int:
        return self.shape[0]

    @property
    def committed(self) -> Grid:
        """The committed generation. Read-only for callers."""
        self._require_init()
        return self._buffers[self._front]

    # ---------- update ----------

    def _update_band(self, src: Grid, dst: Grid, row_lo: int, row_hi: int) -> None:
        lap_a = convolve_interior(src.a, self.kernel, row_lo, row_hi)
        lap_b = convolve_interior(src.b, self.kernel, row_lo, row_hi)
        new_a, new_b = react(
            src.a[row_lo:row_hi, 1:-1],
            src.b[row_lo:row_hi, 1:-1],
            lap_a,
            lap_b,
            self.params,
        )
        dst.a[row_lo:row_hi, 1:-1] = new_a
        dst.b[row_lo:row_hi, 1:-1] = new_b

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="petri-band")
            logger.debug("started band pool with %d workers", self.workers)
        return self._executor

    def step(self) -> None:
        """Advance exactly one generation. Reads only the committed buffer; commits after all bands finish."""
        self._require_init()
        previous = self._buffers[self._front]
        current = self._buffers[1 - self._front]
        if len(self._bands) > 1:
            pool = self._pool()
            futures = [pool.submit(self._update_band, previous, current, lo, hi) for lo, hi in self._bands]
            # Barrier: every band has finished, failed or not, before anything is raised or committed.
            wait(futures)
            for fut in futures:
                fut.result()
        else:
            for lo, hi in self._bands:
                self._update_band(previous, current, lo, hi)
        self._front = 1 - self._front
        self.generation += 1

    def run(self, steps: int) -> int:
        for _ in range(int(steps)):
            self.step()
        return self.generation

    # ---------- read access ----------

    def _check_bounds(self, i: int, j: int) -> None:
        h, w = self.shape
        if not (0 <= i < h and 0 <= j < w):
            raise IndexError(f"cell ({i}, {j}) out of range for {h}x{w} grid")

    def cell(self, i: int, j: int) -> tuple[float, float]:
        self._check_bounds(i, j)
        return self.committed.get_cell(i, j)

    def color_at(self, i: int, j: int) -> Color:
        """Color of cell (row i, column j) in the committed generation."""
        a, b = self.cell(i, j)
        return Color(a, 0.0, b, 1.0)

    def colors(self) -> np.ndarray:
        """(height, width, 4) RGBA for every cell; same values as color_at, unclamped."""
        cur = self.committed
        out = np.zeros(cur.shape + (4,), dtype=np.float64)
        out[..., 0] = cur.a
        out[..., 2] = cur.b
        out[..., 3] = 1.0
        return out

    def concentrations(self) -> tuple[np.ndarray, np.ndarray]:
        cur = self.committed
        return cur.a.copy(), cur.b.copy()
