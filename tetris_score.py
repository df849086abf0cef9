
"""Guideline scoring: clear table, back-to-back, combo, level and gravity"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tetris_spin import SpinType

LINES_PER_LEVEL = 10
COMBO_BONUS = 50
BACK_TO_BACK_MULT = 1.5
SOFT_DROP_PER_CELL = 1
HARD_DROP_PER_CELL = 2

# ms per gravity row, index = level - 1; the last entry holds for every level past it
FALL_SPEEDS = (1000, 793, 618, 473, 355, 262, 190, 135, 94, 64, 43, 28, 18, 11, 7)


class ScoreAction(Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    TETRIS = "tetris"
    TSPIN_MINI = "tspin-mini"
    TSPIN = "tspin"
    TSPIN_MINI_SINGLE = "tspin-mini-single"
    TSPIN_SINGLE = "tspin-single"
    TSPIN_MINI_DOUBLE = "tspin-mini-double"
    TSPIN_DOUBLE = "tspin-double"
    TSPIN_TRIPLE = "tspin-triple"


BASE_POINTS = {
    ScoreAction.SINGLE: 100,
    ScoreAction.DOUBLE: 300,
    ScoreAction.TRIPLE: 500,
    ScoreAction.TETRIS: 800,
    ScoreAction.TSPIN_MINI: 100,
    ScoreAction.TSPIN: 400,
    ScoreAction.TSPIN_MINI_SINGLE: 200,
    ScoreAction.TSPIN_SINGLE: 800,
    ScoreAction.TSPIN_MINI_DOUBLE: 400,
    ScoreAction.TSPIN_DOUBLE: 1200,
    ScoreAction.TSPIN_TRIPLE: 1600,
}

DIFFICULT = frozenset({
    ScoreAction.TETRIS,
    ScoreAction.TSPIN_MINI_SINGLE,
    ScoreAction.TSPIN_SINGLE,
    ScoreAction.TSPIN_MINI_DOUBLE,
    ScoreAction.TSPIN_DOUBLE,
    ScoreAction.TSPIN_TRIPLE,
})


@dataclass(frozen=True)
class LineClearResult:
    lines: int = 0
    spin: SpinType = SpinType.NONE
    label: str = ""


@dataclass(frozen=True)
class Stats:
    score: int
    level: int
    lines: int
    combo: int
    back_to_back: bool


def classify(lines: int, spin: SpinType) -> Optional[ScoreAction]:
    """Map a lock outcome to its scoring action; None for a plain lock with no clear."""
    if lines >= 4:
        return ScoreAction.TETRIS
    if spin is SpinType.NONE:
        return {0: None, 1: ScoreAction.SINGLE, 2: ScoreAction.DOUBLE,
                3: ScoreAction.TRIPLE}[max(lines, 0)]
    if spin is SpinType.MINI:
        return {0: ScoreAction.TSPIN_MINI, 1: ScoreAction.TSPIN_MINI_SINGLE,
                2: ScoreAction.TSPIN_MINI_DOUBLE, 3: ScoreAction.TSPIN_TRIPLE}[max(lines, 0)]
    return {0: ScoreAction.TSPIN, 1: ScoreAction.TSPIN_SINGLE,
            2: ScoreAction.TSPIN_DOUBLE, 3: ScoreAction.TSPIN_TRIPLE}[max(lines, 0)]


class ScoreKeeper:
    """Score, level, lines, combo and back-to-back for one game.

    combo is -1 while no combo is running; the first clear after a break
    makes it 0, the next 1, and so on.
    """

    def __init__(self, start_level: int = 1):
        self.reset(start_level)

    def reset(self, start_level: int = 1):
        self.score = 0
        self.level = max(1, start_level)
        self.lines = 0
        self.combo = -1
        self.back_to_back = False

    @property
    def stats(self) -> Stats:
        return Stats(self.score, self.level, self.lines, max(0, self.combo), self.back_to_back)

    @property
    def fall_speed(self) -> int:
        return FALL_SPEEDS[min(self.level - 1, len(FALL_SPEEDS) - 1)]

    @property
    def lines_to_next_level(self) -> int:
        return max(0, self.level * LINES_PER_LEVEL - self.lines)

    def process_line_clear(self, result: LineClearResult) -> int:
        """Apply one lock outcome and return the points it earned."""
        action = classify(result.lines, result.spin)
        if action is None:
            self.combo = -1
            return 0

        base = BASE_POINTS[action]
        difficult = action in DIFFICULT
        if difficult and self.back_to_back:
            base = int(base * BACK_TO_BACK_MULT)
        points = base * self.level

        # a spin that clears nothing leaves combo and back-to-back alone
        if result.lines > 0:
            self.back_to_back = difficult
            self.combo += 1
            points += COMBO_BONUS * self.combo * self.level

        self.score += points
        self.lines += result.lines
        self.level = max(self.level, self.lines // LINES_PER_LEVEL + 1)
        return points

    def add_soft_drop_bonus(self, cells: int):
        self.score += cells * SOFT_DROP_PER_CELL

    def add_hard_drop_bonus(self, cells: int):
        self.score += cells * HARD_DROP_PER_CELL
