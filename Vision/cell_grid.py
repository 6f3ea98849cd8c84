# Vision/cell_grid.py
from __future__ import annotations
import math
import cv2
import numpy as np
from dataclasses import dataclass, asdict, field
from typing import List, Tuple, Optional, Sequence

from Vision.board_crop import Rect, locate_board

# --------------------------- Models ---------------------------

@dataclass
class Cell:
    row: int
    col: int
    center: Tuple[int, int]           # x, y in image pixels

@dataclass
class GridResult:
    board_rect: Rect                  # bounding box of all board contours
    cropped_rect: Rect                # board_rect minus the frame margin
    cells: List[Cell] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "board_rect": list(self.board_rect),
            "cropped_rect": list(self.cropped_rect),
            "cells": [asdict(c) for c in self.cells],
        }

@dataclass
class CellDetectConfig:
    # Frame margin around the playable area shrinks as boards get bigger:
    #   margin = floor(margin_base - margin_per_cell * rows * cols)
    margin_base: float = 20.526
    margin_per_cell: float = 0.009

    # Centres drift outward from the board middle by this fraction of the
    # half-cell interval
    edge_skew: float = 0.15

# --------------------------- Geometry ---------------------------

def board_margin(rows: int, cols: int, cfg: CellDetectConfig) -> int:
    return int(math.floor(cfg.margin_base - cfg.margin_per_cell * (rows * cols)))

def crop_rect(rect: Rect, margin: int) -> Rect:
    x, y, w, h = rect
    return x + margin, y + margin, w - 2 * margin, h - 2 * margin

def _skewed(center: float, index: int, count: int, interval: float, skew: float) -> float:
    if index < count / 2:
        return center - interval * skew
    if index > count / 2:
        return center + interval * skew
    return center

def compute_cell_centers(board_rect: Rect, rows: int, cols: int,
                         cfg: Optional[CellDetectConfig] = None) -> GridResult:
    """
    Cell centres for a rows x cols grid inside `board_rect`.
    Centres sit at odd multiples of the half-cell interval inside the
    margin-cropped rectangle, nudged outward away from the middle.
    """
    cfg = cfg or CellDetectConfig()
    cropped = crop_rect(board_rect, board_margin(rows, cols, cfg))
    cx0, cy0, width, height = cropped

    interval_x = width / (2 * cols)
    interval_y = height / (2 * rows)

    cells = []
    for r in range(rows):
        for c in range(cols):
            x = _skewed(interval_x * (2 * c + 1), c, cols, interval_x, cfg.edge_skew)
            y = _skewed(interval_y * (2 * r + 1), r, rows, interval_y, cfg.edge_skew)
            cells.append(Cell(row=r, col=c, center=(int(math.floor(x + cx0)), int(math.floor(y + cy0)))))

    return GridResult(board_rect=board_rect, cropped_rect=cropped, cells=cells)

def detect_cells(img: np.ndarray, rows: int, cols: int,
                 cfg: Optional[CellDetectConfig] = None) -> GridResult:
    """Locate the board in a screenshot and compute every cell centre."""
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
    return compute_cell_centers(locate_board(img), rows, cols, cfg)

# --------------------------- Debug overlay ---------------------------

def draw_cells(img: np.ndarray, cells: Sequence[Cell],
               lights: Sequence[Tuple[int, int]] = ()) -> np.ndarray:
    """Green dots on every cell centre, red rings on cells holding a light."""
    out = img.copy()
    if out.ndim == 2:
        out = cv2.cvtColor(out, cv2.COLOR_GRAY2BGR)
    elif out.shape[2] == 4:
        out = cv2.cvtColor(out, cv2.COLOR_BGRA2BGR)

    light_set = {tuple(p) for p in lights}
    for c in cells:
        cv2.circle(out, c.center, 5, (0, 255, 0), -1)
        if (c.row, c.col) in light_set:
            cv2.circle(out, c.center, 12, (0, 0, 255), 2)
    return out
