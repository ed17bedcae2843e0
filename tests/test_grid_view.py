import numpy as np

from ui.grid_view import texture_layout


def test_rows_run_along_x_and_columns_up_y():
    h, w = 3, 5
    rgb = np.zeros((h, w, 3), dtype=np.uint8)
    rgb[..., 0] = np.arange(h)[:, np.newaxis]
    rgb[..., 1] = np.arange(w)[np.newaxis, :]
    screen = texture_layout(rgb)
    assert screen.shape == (w, h, 3)
    for i in range(h):
        for j in range(w):
            assert tuple(screen[w - 1 - j, i, :2]) == (i, j)


def test_origin_cell_at_bottom_left():
    rgb = np.zeros((4, 6, 3), dtype=np.uint8)
    rgb[0, 0] = (255, 0, 0)
    screen = texture_layout(rgb)
    assert tuple(screen[-1, 0]) == (255, 0, 0)
    assert screen[..., 0].sum() == 255
