
"""T-spin detection (3-corner rule) and clear labels"""
from enum import Enum
from typing import Dict, Tuple

from tetris_board import Grid
from tetris_piece import Piece, PieceKind

Offset = Tuple[int, int]

T_PIVOT: Offset = (1, 1)
MIN_CORNERS = 3
MINI_KICK_INDEX = 4


class SpinType(Enum):
    NONE = "none"
    MINI = "mini"
    FULL = "full"


# rotation state -> (front corners, back corners) relative to the pivot.
# Front corners flank the side the T's nose points to.
T_CORNERS: Dict[int, Tuple[Tuple[Offset, Offset], Tuple[Offset, Offset]]] = {
    0: (((-1, -1), (1, -1)), ((-1, 1), (1, 1))),
    1: (((1, -1), (1, 1)), ((-1, -1), (-1, 1))),
    2: (((-1, 1), (1, 1)), ((-1, -1), (1, -1))),
    3: (((-1, -1), (-1, 1)), ((1, -1), (1, 1))),
}


def corner_filled(grid: Grid, x: int, y: int) -> bool:
    # walls, floor and the space above the grid all count as filled
    return not grid.in_bounds(x, y) or not grid.is_cell_empty(x, y)


def detect_spin(piece: Piece, grid: Grid, was_rotation: bool, kick_index: int) -> SpinType:
    """Classify the lock about to happen. Must run before the piece is written into grid."""
    if piece.kind is not PieceKind.T or not was_rotation:
        return SpinType.NONE
    cx, cy = piece.x + T_PIVOT[0], piece.y + T_PIVOT[1]
    front, back = T_CORNERS[piece.state]
    front_filled = sum(corner_filled(grid, cx + dx, cy + dy) for dx, dy in front)
    back_filled = sum(corner_filled(grid, cx + dx, cy + dy) for dx, dy in back)
    if front_filled + back_filled < MIN_CORNERS:
        return SpinType.NONE
    if kick_index >= MINI_KICK_INDEX or front_filled < 2:
        return SpinType.MINI
    return SpinType.FULL


LINE_NAMES = {1: "Single", 2: "Double", 3: "Triple", 4: "Tetris"}


def clear_label(spin: SpinType, lines: int) -> str:
    if spin is SpinType.NONE:
        if lines == 0:
            return ""
        return LINE_NAMES.get(lines, f"{lines} Lines")
    prefix = "T-Spin Mini" if spin is SpinType.MINI else "T-Spin"
    if lines == 0:
        return prefix
    if lines in (1, 2, 3):
        return f"{prefix} {LINE_NAMES[lines]}"
    return f"{prefix} {lines} Lines"
