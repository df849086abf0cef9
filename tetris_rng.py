
"""7-bag randomizer driven by a seeded 32-bit LCG"""
import random
from typing import List, Optional

from tetris_piece import ALL_KINDS, PieceKind

MAX_PEEK = 2 * len(ALL_KINDS)


class LCG:
    """glibc-style LCG; the whole piece order is a function of the seed."""

    def __init__(self, seed: int):
        self.state = seed & 0xFFFFFFFF

    def _lcg_next(self) -> int:
        self.state = (self.state * 0x41C64E6D + 0x3039) & 0xFFFFFFFF
        return self.state

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._lcg_next() / 0x100000000


class BagRandomizer:
    """
    Every bag is a shuffled copy of all seven kinds, so the seven draws
    starting at a bag boundary are always a permutation and no kind is ever
    more than 12 draws away from its previous appearance.

    Two bags are held (current + lookahead) so peek() can see across the
    boundary without touching draw order.
    """

    def __init__(self, seed: Optional[int] = None):
        self.reset(seed)

    def reset(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.getrandbits(32)
        self.seed = seed & 0xFFFFFFFF
        self._rng = LCG(self.seed)
        self.bag: List[PieceKind] = self._new_bag()
        self.preview_bag: List[PieceKind] = self._new_bag()

    def _new_bag(self) -> List[PieceKind]:
        bag = list(ALL_KINDS)
        for i in range(len(bag) - 1, 0, -1):
            j = int(self._rng.random() * (i + 1))
            bag[i], bag[j] = bag[j], bag[i]
        return bag

    def next(self) -> PieceKind:
        kind = self.bag.pop(0)
        if not self.bag:
            self.bag = self.preview_bag
            self.preview_bag = self._new_bag()
        return kind

    def peek(self, count: int) -> List[PieceKind]:
        count = max(0, min(count, MAX_PEEK))
        return (self.bag + self.preview_bag)[:count]
