"""
Tests for board location and cell-centre geometry on synthetic images.
"""

import cv2
import numpy as np
import pytest

from Vision.board_crop import calc_board_rectangle, find_board_contours, load_board_image, locate_board
from Vision.cell_grid import CellDetectConfig, board_margin, compute_cell_centers, detect_cells, draw_cells


def _board_image():
    img = np.zeros((200, 240, 3), np.uint8)
    cv2.rectangle(img, (30, 20), (209, 179), (255, 255, 255), 2)
    cv2.line(img, (120, 20), (120, 179), (255, 255, 255), 2)
    cv2.line(img, (30, 100), (209, 100), (255, 255, 255), 2)
    return img


def test_board_margin_shrinks_with_size():
    cfg = CellDetectConfig()
    assert board_margin(2, 2, cfg) == 20
    assert board_margin(10, 10, cfg) == 19
    assert board_margin(30, 30, cfg) == 12


def test_cell_centers_2x2():
    grid = compute_cell_centers((0, 0, 200, 200), 2, 2)
    assert grid.cropped_rect == (20, 20, 160, 160)
    centers = {(c.row, c.col): c.center for c in grid.cells}
    assert centers == {
        (0, 0): (54, 54),
        (0, 1): (140, 54),
        (1, 0): (54, 140),
        (1, 1): (140, 140),
    }


def test_cell_centers_skew_outward():
    grid = compute_cell_centers((0, 0, 300, 300), 3, 3)
    xs = [c.center[0] for c in grid.cells if c.row == 0]
    assert xs == [56, 143, 243]
    assert [c.center for c in grid.cells[:1]] == [(56, 56)]


def test_no_skew_is_even_spacing():
    cfg = CellDetectConfig(margin_base=0.0, margin_per_cell=0.0, edge_skew=0.0)
    grid = compute_cell_centers((10, 10, 100, 50), 1, 4, cfg)
    assert [c.center for c in grid.cells] == [(22, 35), (47, 35), (72, 35), (97, 35)]


def test_locate_board_on_synthetic_image():
    x, y, w, h = locate_board(_board_image())
    assert abs(x - 30) <= 10
    assert abs(y - 20) <= 10
    assert abs((x + w) - 211) <= 10
    assert abs((y + h) - 181) <= 10


def test_blank_image_has_no_board():
    contours = find_board_contours(np.zeros((50, 50, 3), np.uint8))
    assert contours == []
    with pytest.raises(ValueError):
        calc_board_rectangle(contours)


def test_detect_cells_and_overlay():
    img = _board_image()
    grid = detect_cells(img, 2, 2)
    assert len(grid.cells) == 4
    bx, by, bw, bh = grid.board_rect
    for cell in grid.cells:
        cx, cy = cell.center
        assert bx <= cx <= bx + bw
        assert by <= cy <= by + bh
    assert grid.to_dict()['cells'][0]['row'] == 0

    overlay = draw_cells(img, grid.cells, [(0, 0)])
    assert overlay.shape == img.shape
    assert not np.array_equal(overlay, img)

    gray_overlay = draw_cells(cv2.cvtColor(img, cv2.COLOR_BGR2GRAY), grid.cells)
    assert gray_overlay.shape == img.shape


def test_detect_cells_rejects_bad_dimensions():
    with pytest.raises(ValueError):
        detect_cells(_board_image(), 0, 3)


def test_load_board_image(tmp_path):
    path = tmp_path / "board.png"
    cv2.imwrite(str(path), _board_image())
    assert load_board_image(str(path)).shape == (200, 240, 3)
    with pytest.raises(FileNotFoundError):
        load_board_image(str(tmp_path / "missing.png"))
