"""
Display mapping for the two chemicals: red = A (substrate), blue = B (activator), green unused.
The engine reports raw concentrations; clamping to the displayable range happens here.
"""

import numpy as np

SUBSTRATE_RGB = np.array([1.0, 0.0, 0.0], dtype=np.float64)
ACTIVATOR_RGB = np.array([0.0, 0.0, 1.0], dtype=np.float64)


def cells_to_rgb(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Returns (h, w, 3) uint8 RGB. Concentrations outside [0, 1] are clamped."""
    a = np.clip(np.asarray(a, dtype=np.float64), 0.0, 1.0)
    b = np.clip(np.asarray(b, dtype=np.float64), 0.0, 1.0)
    rgb = a[..., np.newaxis] * SUBSTRATE_RGB + b[..., np.newaxis] * ACTIVATOR_RGB
    return (np.clip(rgb, 0.0, 1.0) * 255).round().astype(np.uint8)
