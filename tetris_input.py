
"""Keyboard → action tokens, with DAS/ARR auto-repeat"""
from typing import Dict, Iterable, List, Optional, Tuple

import pygame

from tetris_config import CONFIG
from tetris_session import Action

DEFAULT_KEY_BINDINGS: Dict[Action, Tuple[int, ...]] = {
    Action.MOVE_LEFT: (pygame.K_LEFT, pygame.K_a),
    Action.MOVE_RIGHT: (pygame.K_RIGHT, pygame.K_d),
    Action.SOFT_DROP: (pygame.K_DOWN, pygame.K_s),
    Action.HARD_DROP: (pygame.K_SPACE, pygame.K_UP),
    Action.ROTATE_CW: (pygame.K_x, pygame.K_e),
    Action.ROTATE_CCW: (pygame.K_z, pygame.K_LCTRL, pygame.K_RCTRL, pygame.K_q),
    Action.HOLD: (pygame.K_LSHIFT, pygame.K_RSHIFT, pygame.K_c),
    Action.PAUSE: (pygame.K_ESCAPE, pygame.K_p, pygame.K_F1),
}

REPEATABLE = frozenset({Action.MOVE_LEFT, Action.MOVE_RIGHT, Action.SOFT_DROP})


class KeyRepeat:
    """Timer for one held key: silent for DAS_MS, then one step every ARR_MS (0 => every update)."""

    def __init__(self):
        self.held_ms = 0.0
        self.last = 0.0
        self.charged = False

    def update(self, dt: float, das: float, arr: float) -> int:
        """Number of repeats due after `dt` more ms of holding."""
        self.held_ms += dt
        if not self.charged:
            if self.held_ms < das:
                return 0
            self.charged = True
            self.last = 0.0
            return 1
        if arr == 0:
            return 1
        self.last += dt
        steps = 0
        while self.last >= arr:
            self.last -= arr
            steps += 1
        return steps


class InputMapper:
    def __init__(self, bindings: Optional[Dict[Action, Iterable[int]]] = None,
                 das_ms: Optional[float] = None, arr_ms: Optional[float] = None):
        self.bindings = {a: tuple(keys) for a, keys in (bindings or DEFAULT_KEY_BINDINGS).items()}
        self.das = CONFIG["DAS_MS"] if das_ms is None else das_ms
        self.arr = CONFIG["ARR_MS"] if arr_ms is None else arr_ms
        self.key_to_action: Dict[int, Action] = {}
        for action, keys in self.bindings.items():
            for k in keys:
                self.key_to_action[k] = action
        self.held: Dict[int, KeyRepeat] = {}

    def key_down(self, key: int) -> Optional[Action]:
        """Action to fire immediately for a fresh press; None for unbound or already-held keys."""
        action = self.key_to_action.get(key)
        if action is None or key in self.held:
            return None
        self.held[key] = KeyRepeat()
        return action

    def key_up(self, key: int):
        self.held.pop(key, None)

    def update(self, dt_ms: float) -> List[Action]:
        out = []
        for key, rep in self.held.items():
            action = self.key_to_action[key]
            if action in REPEATABLE:
                out.extend([action] * rep.update(dt_ms, self.das, self.arr))
        return out

    def is_held(self, action: Action) -> bool:
        return any(k in self.held for k in self.bindings.get(action, ()))

    def clear(self):
        self.held.clear()
