# tetris_layout.py
"""Pixel geometry for the board and the side panel, derived from CELL_SIZE."""
from dataclasses import dataclass
from typing import Tuple

from tetris_config import CONFIG, COLS, PREVIEW_ROWS, ROWS

LINE_H = 22
PAD = 12
STAT_LINES = 5


@dataclass(frozen=True)
class Dims:
    cell: int
    preview_cell: int
    total_w: int
    total_h: int
    board_x: int
    board_y: int
    board_w: int
    board_h: int
    panel_x: int
    panel_y: int
    panel_w: int
    # panel slots, top to bottom
    text_x: int
    stat_ys: Tuple[int, ...]
    hold_y: int
    next_y: int
    preview_step: int
    footer_y: int


def compute_dims(cell_size=None) -> Dims:
    cell = int(CONFIG["CELL_SIZE"] if cell_size is None else cell_size)
    gap = max(8, cell // 2)
    preview_cell = max(10, cell // 2)
    board_w, board_h = COLS * cell, ROWS * cell
    panel_w = max(180, preview_cell * 4 + 120)

    board_x = board_y = gap
    panel_x, panel_y = board_x + board_w + gap, gap
    text_x = panel_x + PAD

    top = panel_y + PAD
    stat_ys = tuple(top + i * LINE_H for i in range(STAT_LINES))
    hold_y = top + STAT_LINES * LINE_H + 10
    next_y = hold_y + LINE_H + preview_cell * PREVIEW_ROWS + 16

    return Dims(
        cell=cell, preview_cell=preview_cell,
        total_w=panel_x + panel_w + gap, total_h=board_y + board_h + gap,
        board_x=board_x, board_y=board_y, board_w=board_w, board_h=board_h,
        panel_x=panel_x, panel_y=panel_y, panel_w=panel_w,
        text_x=text_x, stat_ys=stat_ys, hold_y=hold_y, next_y=next_y,
        preview_step=preview_cell * PREVIEW_ROWS + 8,
        footer_y=panel_y + board_h - 30,
    )
