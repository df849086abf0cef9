
"""
Session controller: one game's per-tick flow.

Wires the grid, randomizer, rotation, spin detection and scoring into the
turn sequence the driver runs every fixed timestep:

  * input actions for the tick are applied first (so a move or rotation can
    still reset the lock timer in the very tick it would have expired),
  * then the grounded check and lock-delay countdown,
  * then gravity.

Nothing here raises for a game situation. A move that doesn't fit simply
returns False and leaves the piece where it was.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from tetris_board import Cell, Grid
from tetris_config import CONFIG
from tetris_piece import Piece, PieceKind
from tetris_rng import BagRandomizer
from tetris_rotation import Direction, try_rotate
from tetris_score import LineClearResult, ScoreKeeper, Stats
from tetris_spin import clear_label, detect_spin

log = logging.getLogger(__name__)


class Action(Enum):
    MOVE_LEFT = "moveLeft"
    MOVE_RIGHT = "moveRight"
    SOFT_DROP = "softDrop"
    HARD_DROP = "hardDrop"
    ROTATE_CW = "rotateClockwise"
    ROTATE_CCW = "rotateCounterClockwise"
    HOLD = "hold"
    PAUSE = "pause"


class NoActivePiece:
    """Between a lock (or game start) and the next spawn."""

    def __repr__(self):
        return "NoActivePiece()"


NO_PIECE = NoActivePiece()


@dataclass
class ActivePiece:
    piece: Piece
    lock_timer: float
    grounded: bool = False
    gravity_timer: float = 0.0
    last_rotation: bool = False
    kick_index: int = 0


PieceState = Union[NoActivePiece, ActivePiece]


@dataclass
class HoldState:
    kind: Optional[PieceKind] = None
    used: bool = False


@dataclass(frozen=True)
class Snapshot:
    """Read-only view for a renderer. Piece and ghost cells use the same row
    numbering as `rows`, so cells above the first row come out negative."""
    rows: Tuple[Tuple[Cell, ...], ...]
    kind: Optional[PieceKind]
    cells: Tuple[Tuple[int, int], ...]
    ghost: Tuple[Tuple[int, int], ...]
    preview: Tuple[PieceKind, ...]
    held: Optional[PieceKind]
    hold_used: bool
    stats: Stats
    paused: bool
    game_over: bool


class GameSession:
    def __init__(self, seed: Optional[int] = None, start_level: int = 1,
                 lock_delay_ms: Optional[float] = None,
                 announce: Optional[Callable[[str], None]] = None):
        self.grid = Grid()
        self.randomizer = BagRandomizer(seed)
        self.score = ScoreKeeper(start_level)
        self.hold = HoldState()
        self.state: PieceState = NO_PIECE
        self.lock_delay_ms = CONFIG["LOCK_DELAY_MS"] if lock_delay_ms is None else lock_delay_ms
        self.paused = False
        self.game_over = False
        self.elapsed_ms = 0.0
        self.last_clear: Optional[LineClearResult] = None
        self.last_points = 0
        self._announce = announce
        self._listeners: List[Callable[[Action], None]] = []

    @property
    def seed(self) -> int:
        return self.randomizer.seed

    @property
    def active(self) -> Optional[Piece]:
        if isinstance(self.state, ActivePiece):
            return self.state.piece
        return None

    def add_action_listener(self, fn: Callable[[Action], None]):
        self._listeners.append(fn)

    def announce(self, message: str):
        if self._announce is not None and message:
            self._announce(message)

    # ---------- tick ----------

    def update(self, dt_ms: float, actions=()):
        """Advance one fixed step: apply this tick's actions, then timers."""
        if self.game_over:
            return
        self.elapsed_ms += dt_ms
        for action in actions:
            self.handle_action(action)
        if self.paused or self.game_over:
            return
        self._step(dt_ms)

    def _step(self, dt_ms: float):
        st = self.state
        if isinstance(st, NoActivePiece):
            self.spawn()
            return

        st.grounded = self._is_grounded(st.piece)
        if st.grounded:
            st.lock_timer -= dt_ms
            if st.lock_timer <= 0:
                self._lock()
                return
        else:
            st.lock_timer = self.lock_delay_ms

        st.gravity_timer += dt_ms
        if st.gravity_timer >= self.score.fall_speed:
            st.gravity_timer = 0.0
            self._try_move(st, 0, 1)

    def _is_grounded(self, piece: Piece) -> bool:
        below = piece.clone()
        below.move(0, 1)
        return not self.grid.can_place(below)

    # ---------- input ----------

    def handle_action(self, action: Action) -> bool:
        """Apply one input action. Returns whether it changed anything.

        Anything that isn't an Action is ignored, and listeners never see it.
        """
        if self.game_over:
            return False
        if not isinstance(action, Action):
            log.debug("ignoring unknown action %r", action)
            return False
        for fn in self._listeners:
            fn(action)

        if action is Action.PAUSE:
            self.paused = not self.paused
            self.announce("Paused" if self.paused else "Resumed")
            return True
        st = self.state
        if self.paused or not isinstance(st, ActivePiece):
            return False

        if action is Action.MOVE_LEFT:
            return self._try_move(st, -1, 0)
        if action is Action.MOVE_RIGHT:
            return self._try_move(st, 1, 0)
        if action is Action.SOFT_DROP:
            if self._try_move(st, 0, 1):
                st.gravity_timer = 0.0
                self.score.add_soft_drop_bonus(1)
                return True
            return False
        if action is Action.HARD_DROP:
            self._hard_drop(st)
            return True
        if action is Action.ROTATE_CW:
            return self._rotate(st, Direction.CLOCKWISE)
        if action is Action.ROTATE_CCW:
            return self._rotate(st, Direction.COUNTER_CLOCKWISE)
        return self._hold(st)

    def _try_move(self, st: ActivePiece, dx: int, dy: int) -> bool:
        test = st.piece.clone()
        test.move(dx, dy)
        if not self.grid.can_place(test):
            return False
        st.piece.set_position(test.position)
        st.last_rotation = False
        if st.grounded and dy == 0:
            st.lock_timer = self.lock_delay_ms
        return True

    def _rotate(self, st: ActivePiece, direction: Direction) -> bool:
        result = try_rotate(st.piece, self.grid, direction)
        if not result.succeeded:
            return False
        st.last_rotation = True
        st.kick_index = result.kick_index
        if st.grounded:
            st.lock_timer = self.lock_delay_ms
        return True

    def _hard_drop(self, st: ActivePiece):
        x, y = self.grid.drop_position(st.piece)
        distance = y - st.piece.y
        # a zero-distance drop is not a translation, so a spin set up just before it survives
        if distance > 0:
            st.piece.set_position((x, y))
            st.last_rotation = False
            self.score.add_hard_drop_bonus(distance)
        self._lock()

    def _hold(self, st: ActivePiece) -> bool:
        if self.hold.used:
            return False
        current = st.piece.kind
        held = self.hold.kind
        self.hold.kind = current
        if held is None:
            self.spawn()
        else:
            self.spawn(held)
        self.hold.used = True
        self.announce("Hold")
        return True

    # ---------- spawn / lock ----------

    def spawn(self, kind: Optional[PieceKind] = None):
        """Bring in the next piece, or `kind` when swapping out of hold."""
        if kind is None:
            kind = self.randomizer.next()
            self.hold.used = False
        self.state = ActivePiece(Piece(kind), lock_timer=self.lock_delay_ms)
        log.debug("spawn %s", kind.value)

    def _lock(self) -> LineClearResult:
        st = self.state
        piece = st.piece
        spin = detect_spin(piece, self.grid, st.last_rotation, st.kick_index)
        self.grid.lock(piece)
        lines = self.grid.clear_full_rows()
        result = LineClearResult(lines, spin, clear_label(spin, lines))
        self.last_points = self.score.process_line_clear(result)
        self.last_clear = result
        self.state = NO_PIECE
        log.debug("lock %s at %s state %d: %d lines, spin %s, +%d",
                  piece.kind.value, piece.position, piece.state, lines,
                  spin.value, self.last_points)
        self.announce(result.label)

        if self.grid.is_overflowing():
            self.game_over = True
            log.debug("game over at %.0f ms, score %d", self.elapsed_ms, self.score.score)
            self.announce("Game Over")
            return result
        self.spawn()
        return result

    # ---------- views ----------

    def ghost_position(self) -> Optional[Tuple[int, int]]:
        piece = self.active
        if piece is None:
            return None
        return self.grid.drop_position(piece)

    def snapshot(self, include_hidden: bool = False, preview: Optional[int] = None) -> Snapshot:
        offset = 0 if include_hidden else self.grid.hidden
        piece = self.active
        cells: Tuple[Tuple[int, int], ...] = ()
        ghost: Tuple[Tuple[int, int], ...] = ()
        if piece is not None:
            cells = tuple((x, y - offset) for x, y in piece.cells())
            ghost_piece = piece.clone()
            ghost_piece.set_position(self.grid.drop_position(piece))
            ghost = tuple((x, y - offset) for x, y in ghost_piece.cells())
        count = CONFIG["PREVIEW_COUNT"] if preview is None else preview
        return Snapshot(
            rows=self.grid.rows(include_hidden),
            kind=piece.kind if piece is not None else None,
            cells=cells,
            ghost=ghost,
            preview=tuple(self.randomizer.peek(count)),
            held=self.hold.kind,
            hold_used=self.hold.used,
            stats=self.score.stats,
            paused=self.paused,
            game_over=self.game_over,
        )
