
"""Piece catalog (SRS shapes, colors) and the mutable piece instance"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from tetris_config import SPAWN_X, SPAWN_Y

Matrix = Tuple[Tuple[int, ...], ...]


class PieceKind(Enum):
    I = "I"
    O = "O"
    T = "T"
    S = "S"
    Z = "Z"
    J = "J"
    L = "L"


ALL_KINDS: Tuple[PieceKind, ...] = tuple(PieceKind)

COLORS: Dict[PieceKind, str] = {
    PieceKind.I: "#00f0f0",
    PieceKind.O: "#f0f000",
    PieceKind.T: "#a000f0",
    PieceKind.S: "#00f000",
    PieceKind.Z: "#f00000",
    PieceKind.J: "#0000f0",
    PieceKind.L: "#f0a000",
}


def _m(*rows: str) -> Matrix:
    return tuple(tuple(1 if ch == "#" else 0 for ch in row) for row in rows)


# One 4x4 matrix per rotation state: 0=spawn, 1=R, 2=180, 3=L
SHAPES: Dict[PieceKind, Tuple[Matrix, ...]] = {
    PieceKind.I: (
        _m("....", "####", "....", "...."),
        _m("..#.", "..#.", "..#.", "..#."),
        _m("....", "....", "####", "...."),
        _m(".#..", ".#..", ".#..", ".#.."),
    ),
    PieceKind.O: (
        _m(".##.", ".##.", "....", "...."),
    ) * 4,
    PieceKind.T: (
        _m(".#..", "###.", "....", "...."),
        _m(".#..", ".##.", ".#..", "...."),
        _m("....", "###.", ".#..", "...."),
        _m(".#..", "##..", ".#..", "...."),
    ),
    PieceKind.S: (
        _m(".##.", "##..", "....", "...."),
        _m(".#..", ".##.", "..#.", "...."),
        _m("....", ".##.", "##..", "...."),
        _m("#...", "##..", ".#..", "...."),
    ),
    PieceKind.Z: (
        _m("##..", ".##.", "....", "...."),
        _m("..#.", ".##.", ".#..", "...."),
        _m("....", "##..", ".##.", "...."),
        _m(".#..", "##..", "#...", "...."),
    ),
    PieceKind.J: (
        _m("#...", "###.", "....", "...."),
        _m(".##.", ".#..", ".#..", "...."),
        _m("....", "###.", "..#.", "...."),
        _m(".#..", ".#..", "##..", "...."),
    ),
    PieceKind.L: (
        _m("..#.", "###.", "....", "...."),
        _m(".#..", ".#..", ".##.", "...."),
        _m("....", "###.", "#...", "...."),
        _m("##..", ".#..", ".#..", "...."),
    ),
}


@dataclass
class Piece:
    """A live piece: kind, top-left of its 4x4 box, rotation state.

    Movement and rotation here know nothing about the grid; collision is
    checked by the caller against a Grid.
    """
    kind: PieceKind
    x: int = SPAWN_X
    y: int = SPAWN_Y
    state: int = 0

    @property
    def color(self) -> str:
        return COLORS[self.kind]

    @property
    def shape(self) -> Matrix:
        return SHAPES[self.kind][self.state]

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    def cells(self) -> List[Tuple[int, int]]:
        return [(self.x + cx, self.y + cy)
                for cy, row in enumerate(self.shape)
                for cx, v in enumerate(row) if v]

    def move(self, dx: int, dy: int):
        self.x += dx
        self.y += dy

    def set_position(self, pos: Tuple[int, int]):
        self.x, self.y = pos

    def rotate_to(self, state: int):
        self.state = state % 4

    def rotate_cw(self):
        self.state = (self.state + 1) % 4

    def rotate_ccw(self):
        self.state = (self.state + 3) % 4

    def clone(self) -> "Piece":
        return Piece(self.kind, self.x, self.y, self.state)
