"""UI: grid view and parameter panel."""

from ui.grid_view import draw_grid
from ui.panel import ParamPanel
from ui.colors import cells_to_rgb

__all__ = ["draw_grid", "ParamPanel", "cells_to_rgb"]
