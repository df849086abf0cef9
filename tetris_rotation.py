
"""SRS rotation: kick tables and the trial loop"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from tetris_board import Grid
from tetris_piece import Piece, PieceKind

Offset = Tuple[int, int]


class Direction(Enum):
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counterClockwise"


class KickClass(Enum):
    I = "I"
    JLSTZ = "JLSTZ"


# (from, to) -> five trials, y grows downward
JLSTZ_KICKS: Dict[Tuple[int, int], List[Offset]] = {
    (0, 1): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],
    (1, 2): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],
    (2, 3): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],
    (3, 0): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],
    (1, 0): [(0, 0), (1, 0), (1, 1), (0, -2), (1, -2)],
    (2, 1): [(0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)],
    (3, 2): [(0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)],
    (0, 3): [(0, 0), (1, 0), (1, -1), (0, 2), (1, 2)],
}
I_KICKS: Dict[Tuple[int, int], List[Offset]] = {
    (0, 1): [(0, 0), (-2, 0), (1, 0), (-2, 1), (1, -2)],
    (1, 2): [(0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1)],
    (2, 3): [(0, 0), (2, 0), (-1, 0), (2, -1), (-1, 2)],
    (3, 0): [(0, 0), (1, 0), (-2, 0), (1, 2), (-2, -1)],
    (1, 0): [(0, 0), (2, 0), (-1, 0), (2, -1), (-1, 2)],
    (2, 1): [(0, 0), (1, 0), (-2, 0), (1, 2), (-2, -1)],
    (3, 2): [(0, 0), (-2, 0), (1, 0), (-2, 1), (1, -2)],
    (0, 3): [(0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1)],
}

KICKS: Dict[KickClass, Dict[Tuple[int, int], List[Offset]]] = {
    KickClass.I: I_KICKS,
    KickClass.JLSTZ: JLSTZ_KICKS,
}


@dataclass(frozen=True)
class RotationResult:
    succeeded: bool
    kick_index: int = -1
    offset: Optional[Offset] = None


FAILED = RotationResult(False)


def kick_class(kind: PieceKind) -> KickClass:
    return KickClass.I if kind is PieceKind.I else KickClass.JLSTZ


def target_rotation(state: int, direction: Direction) -> int:
    if direction is Direction.CLOCKWISE:
        return (state + 1) % 4
    return (state + 3) % 4


def try_rotate(piece: Piece, grid: Grid, direction: Direction) -> RotationResult:
    """Rotate in place through the five SRS trials.

    On success the piece is moved and the winning trial index (0 = no kick)
    and its offset are reported. On failure the piece is untouched.
    """
    if piece.kind is PieceKind.O:
        return RotationResult(True, 0, (0, 0))
    old = piece.state
    new = target_rotation(old, direction)
    test = piece.clone()
    test.rotate_to(new)
    for i, (dx, dy) in enumerate(KICKS[kick_class(piece.kind)][(old, new)]):
        test.set_position((piece.x + dx, piece.y + dy))
        if grid.can_place(test):
            piece.rotate_to(new)
            piece.set_position(test.position)
            return RotationResult(True, i, (dx, dy))
    return FAILED


def rotate_clockwise(piece: Piece, grid: Grid) -> bool:
    return try_rotate(piece, grid, Direction.CLOCKWISE).succeeded


def rotate_counter_clockwise(piece: Piece, grid: Grid) -> bool:
    return try_rotate(piece, grid, Direction.COUNTER_CLOCKWISE).succeeded
