"""Left panel: simulation grid with thin grey border; cell colors from the committed generation."""

import pygame
import numpy as np

from ui.colors import cells_to_rgb

BORDER_COLOR = (80, 80, 80)
BORDER_PX = 1
MAX_UPSAMPLE = 4  # bilinear field upsample factor cap; smoothscale does the rest


def _bilinear_upsample(arr: np.ndarray, scale: int) -> np.ndarray:
    """Upsample 2D array by scale using bilinear interpolation. Returns (h*scale, w*scale)."""
    h, w = arr.shape
    if scale <= 1:
        return arr
    # Sample at output pixel centers; edge pixels clamp to the edge cell.
    U = np.clip((np.arange(h * scale, dtype=np.float64) + 0.5) / scale - 0.5, 0.0, h - 1.0)
    V = np.clip((np.arange(w * scale, dtype=np.float64) + 0.5) / scale - 0.5, 0.0, w - 1.0)
    i0 = np.floor(U).astype(np.int32)
    j0 = np.floor(V).astype(np.int32)
    i1 = np.minimum(i0 + 1, h - 1)
    j1 = np.minimum(j0 + 1, w - 1)
    su = (U - i0)[:, np.newaxis]
    sv = (V - j0)[np.newaxis, :]
    i0_, i1_ = i0[:, np.newaxis], i1[:, np.newaxis]
    j0_, j1_ = j0[np.newaxis, :], j1[np.newaxis, :]
    top = (1 - sv) * arr[i0_, j0_] + sv * arr[i0_, j1_]
    bottom = (1 - sv) * arr[i1_, j0_] + sv * arr[i1_, j1_]
    return (1 - su) * top + su * bottom


def texture_layout(rgb: np.ndarray) -> np.ndarray:
    """
    Grid-indexed (h, w, 3) -> screen-indexed (w, h, 3). Row i runs along x and column j runs
    up the y axis, so cell (i, j) lands at screen pixel (x=i, y=w-1-j), like a texture origin at bottom-left.
    """
    return np.swapaxes(rgb, 0, 1)[::-1]


def _rgb_surface(rgb: np.ndarray) -> pygame.Surface:
    """Screen-indexed (rows, cols, 3) uint8 -> pygame Surface of size (cols, rows)."""
    rows, cols = rgb.shape[0], rgb.shape[1]
    return pygame.image.frombytes(np.ascontiguousarray(rgb).tobytes(), (cols, rows), "RGB")


def draw_grid(
    surface: pygame.Surface,
    grid_rect: pygame.Rect,
    a: np.ndarray,
    b: np.ndarray,
    filter_mode: str = "bilinear",
) -> None:
    """
    Draw concentrations into grid_rect. "point" = nearest-neighbour blocks, one per cell.
    "bilinear" = bilinear upsample of A and B, color map, then smoothscale to the rect.
    "trilinear" matches bilinear: the grid has a single resolution level to blend.
    """
    h, w = a.shape
    if h == 0 or w == 0:
        return
    if filter_mode == "point":
        img = _rgb_surface(texture_layout(cells_to_rgb(a, b)))
        scaled = pygame.transform.scale(img, (grid_rect.width, grid_rect.height))
    else:
        # rows span the rect width, columns its height
        scale = max(1, min(MAX_UPSAMPLE, grid_rect.width // h, grid_rect.height // w))
        rgb_hr = cells_to_rgb(_bilinear_upsample(a, scale), _bilinear_upsample(b, scale))
        scaled = pygame.transform.smoothscale(_rgb_surface(texture_layout(rgb_hr)), (grid_rect.width, grid_rect.height))
    surface.blit(scaled, grid_rect.topleft)
    pygame.draw.rect(surface, BORDER_COLOR, grid_rect, BORDER_PX)
