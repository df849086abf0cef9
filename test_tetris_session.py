import unittest

from tetris_config import CONFIG, HIDDEN_ROWS, ROWS
from tetris_piece import PieceKind
from tetris_score import LineClearResult
from tetris_session import NO_PIECE, Action, ActivePiece, GameSession
from tetris_spin import SpinType

GRAY = "#808080"
SCRIPT = (
    [Action.MOVE_LEFT], [], [Action.ROTATE_CW], [Action.MOVE_LEFT, Action.MOVE_LEFT],
    [], [Action.SOFT_DROP], [Action.ROTATE_CCW], [], [Action.MOVE_RIGHT], [Action.HOLD],
    [], [Action.SOFT_DROP, Action.SOFT_DROP], [Action.HARD_DROP],
)


def run_script(session, ticks, dt=1000.0 / 60):
    for i in range(ticks):
        session.update(dt, SCRIPT[i % len(SCRIPT)])


class SpawnAndMoveTests(unittest.TestCase):
    def test_first_tick_spawns(self):
        s = GameSession(seed=1)
        upcoming = s.randomizer.peek(2)
        self.assertIs(s.state, NO_PIECE)
        s.update(16)
        self.assertIsInstance(s.state, ActivePiece)
        self.assertIs(s.active.kind, upcoming[0])
        self.assertEqual(s.active.position, (3, 0))
        self.assertEqual(s.randomizer.peek(1), upcoming[1:])

    def test_actions_without_piece_are_ignored(self):
        s = GameSession(seed=1)
        self.assertFalse(s.handle_action(Action.MOVE_LEFT))
        self.assertFalse(s.handle_action(Action.HARD_DROP))

    def test_unknown_action_is_ignored(self):
        seen = []
        s = GameSession(seed=1)
        s.add_action_listener(seen.append)
        s.update(16)
        position = s.active.position
        self.assertFalse(s.handle_action("moveLeft"))
        self.assertFalse(s.handle_action(None))
        s.update(16, ["hardDrop", 7])
        self.assertEqual(s.active.position, position)
        self.assertEqual(seen, [])

    def test_moves_stop_at_walls(self):
        s = GameSession(seed=1)
        s.spawn(PieceKind.O)
        for _ in range(10):
            s.handle_action(Action.MOVE_LEFT)
        self.assertEqual(s.active.x, -1)
        self.assertFalse(s.handle_action(Action.MOVE_LEFT))

    def test_gravity(self):
        s = GameSession(seed=1)
        s.spawn(PieceKind.T)
        s.update(500)
        self.assertEqual(s.active.y, 0)
        s.update(500)
        self.assertEqual(s.active.y, 1)

    def test_soft_drop_scores_and_restarts_gravity(self):
        s = GameSession(seed=1)
        s.spawn(PieceKind.T)
        s.update(900)
        s.update(200, [Action.SOFT_DROP])
        self.assertEqual(s.active.y, 1)
        self.assertEqual(s.score.score, 1)
        self.assertEqual(s.state.gravity_timer, 200)

    def test_hard_drop_locks_and_spawns(self):
        s = GameSession(seed=1)
        nxt = s.randomizer.peek(1)[0]
        s.spawn(PieceKind.T)
        self.assertTrue(s.handle_action(Action.HARD_DROP))
        self.assertEqual(s.score.score, 22 * 2)
        for x, y in [(4, 22), (3, 23), (4, 23), (5, 23)]:
            self.assertTrue(s.grid.cell_at(x, y).filled)
        self.assertEqual(s.last_clear, LineClearResult(0, SpinType.NONE, ""))
        self.assertIs(s.active.kind, nxt)

    def test_ghost(self):
        s = GameSession(seed=1)
        self.assertIsNone(s.ghost_position())
        s.spawn(PieceKind.T)
        self.assertEqual(s.ghost_position(), (3, 22))


class HoldTests(unittest.TestCase):
    def test_hold_once_per_piece(self):
        s = GameSession(seed=9)
        upcoming = s.randomizer.peek(4)
        s.update(16)

        self.assertTrue(s.handle_action(Action.HOLD))
        self.assertIs(s.hold.kind, upcoming[0])
        self.assertIs(s.active.kind, upcoming[1])
        self.assertFalse(s.handle_action(Action.HOLD))
        self.assertIs(s.active.kind, upcoming[1])

        s.handle_action(Action.HARD_DROP)
        self.assertIs(s.active.kind, upcoming[2])
        self.assertFalse(s.hold.used)

        self.assertTrue(s.handle_action(Action.HOLD))
        self.assertIs(s.active.kind, upcoming[0])
        self.assertIs(s.hold.kind, upcoming[2])
        self.assertEqual(s.active.position, (3, 0))
        self.assertEqual(s.randomizer.peek(1), [upcoming[3]])


class LockDelayTests(unittest.TestCase):
    def grounded_o(self):
        s = GameSession(seed=7, lock_delay_ms=500)
        s.spawn(PieceKind.O)
        s.active.set_position((4, 22))
        for _ in range(4):
            s.update(100)
        self.assertEqual(s.state.lock_timer, 100)
        return s

    def test_locks_when_timer_runs_out(self):
        s = self.grounded_o()
        s.update(100)
        self.assertTrue(s.grid.cell_at(5, 23).filled)
        self.assertTrue(s.grid.cell_at(6, 22).filled)

    def test_move_in_expiring_tick_resets_timer(self):
        s = self.grounded_o()
        s.update(100, [Action.MOVE_LEFT])
        self.assertIs(s.active.kind, PieceKind.O)
        self.assertEqual(s.active.position, (3, 22))
        self.assertFalse(s.grid.cell_at(4, 23).filled)
        self.assertEqual(s.state.lock_timer, 400)

    def test_timer_refills_when_lifted(self):
        s = GameSession(seed=7, lock_delay_ms=500)
        s.spawn(PieceKind.T)
        s.update(16)
        self.assertFalse(s.state.grounded)
        self.assertEqual(s.state.lock_timer, 500)


class TSpinTests(unittest.TestCase):
    def test_mini_tspin_single_off_fifth_kick(self):
        s = GameSession(seed=1234)
        for x in range(9):
            s.grid.set_cell(x, 23, True, GRAY)
        s.grid.set_cell(8, 21, True, GRAY)
        s.grid.set_cell(9, 19, True, GRAY)
        s.spawn(PieceKind.T)

        actions = [Action.MOVE_RIGHT] * 3 + [Action.SOFT_DROP] * 20 + [Action.MOVE_RIGHT]
        s.update(16, actions)
        self.assertEqual(s.active.position, (7, 19))
        self.assertEqual(s.score.score, 19)

        self.assertTrue(s.handle_action(Action.ROTATE_CCW))
        self.assertEqual(s.state.kick_index, 4)
        self.assertEqual(s.active.position, (8, 21))
        self.assertEqual(s.active.state, 3)

        s.update(16, [Action.HARD_DROP])
        self.assertEqual(s.last_clear, LineClearResult(1, SpinType.MINI, "T-Spin Mini Single"))
        self.assertEqual(s.last_points, 200)
        self.assertEqual(s.score.combo, 0)
        self.assertTrue(s.score.back_to_back)
        self.assertEqual(s.score.score, 219)
        self.assertEqual(s.score.lines, 1)

    def test_translation_after_rotation_cancels_spin(self):
        s = GameSession(seed=1234)
        s.spawn(PieceKind.T)
        s.active.set_position((3, 10))
        s.handle_action(Action.ROTATE_CW)
        self.assertTrue(s.state.last_rotation)
        s.handle_action(Action.MOVE_LEFT)
        self.assertFalse(s.state.last_rotation)
        s.handle_action(Action.ROTATE_CW)
        s.handle_action(Action.SOFT_DROP)
        self.assertFalse(s.state.last_rotation)


class PauseAndGameOverTests(unittest.TestCase):
    def test_pause_freezes_piece(self):
        msgs = []
        s = GameSession(seed=2, announce=msgs.append)
        s.spawn(PieceKind.T)
        s.update(16, [Action.PAUSE])
        self.assertTrue(s.paused)
        self.assertFalse(s.handle_action(Action.MOVE_LEFT))
        s.update(5000)
        self.assertEqual(s.active.position, (3, 0))
        s.update(16, [Action.PAUSE])
        self.assertFalse(s.paused)
        self.assertEqual(msgs, ["Paused", "Resumed"])

    def test_stacking_out_ends_the_game(self):
        msgs = []
        s = GameSession(seed=3, announce=msgs.append)
        for _ in range(200):
            if s.game_over:
                break
            s.update(16, [Action.HARD_DROP])
        self.assertTrue(s.game_over)
        self.assertTrue(s.grid.is_overflowing())
        self.assertEqual(msgs[-1], "Game Over")

        elapsed = s.elapsed_ms
        before = s.grid.rows(True)
        self.assertFalse(s.handle_action(Action.MOVE_LEFT))
        s.update(16, [Action.HARD_DROP])
        self.assertEqual(s.elapsed_ms, elapsed)
        self.assertEqual(s.grid.rows(True), before)
        self.assertTrue(s.snapshot().game_over)


class ListenerAndSnapshotTests(unittest.TestCase):
    def test_listeners_see_every_action(self):
        seen = []
        s = GameSession(seed=4)
        s.add_action_listener(seen.append)
        s.update(16, [Action.MOVE_LEFT])
        s.update(16, [Action.ROTATE_CW, Action.PAUSE])
        self.assertEqual(seen, [Action.MOVE_LEFT, Action.ROTATE_CW, Action.PAUSE])

    def test_snapshot_visible_area(self):
        s = GameSession(seed=5)
        s.spawn(PieceKind.T)
        snap = s.snapshot()
        self.assertEqual(len(snap.rows), ROWS)
        self.assertIs(snap.kind, PieceKind.T)
        top = -HIDDEN_ROWS
        self.assertEqual(sorted(snap.cells), [(3, top + 1), (4, top), (4, top + 1), (5, top + 1)])
        self.assertEqual(max(y for _, y in snap.ghost), ROWS - 1)
        self.assertEqual(len(snap.preview), CONFIG["PREVIEW_COUNT"])
        self.assertIsNone(snap.held)

    def test_snapshot_with_hidden_rows(self):
        s = GameSession(seed=5)
        s.spawn(PieceKind.I)
        snap = s.snapshot(include_hidden=True, preview=2)
        self.assertEqual(len(snap.rows), ROWS + HIDDEN_ROWS)
        self.assertEqual(snap.cells, tuple(s.active.cells()))
        self.assertEqual(len(snap.preview), 2)


class DeterminismTests(unittest.TestCase):
    def test_same_seed_same_inputs_same_game(self):
        a, b = GameSession(seed=77), GameSession(seed=77)
        run_script(a, 900)
        run_script(b, 900)
        self.assertEqual(a.grid.rows(True), b.grid.rows(True))
        self.assertEqual(a.score.stats, b.score.stats)
        self.assertEqual(a.game_over, b.game_over)
        self.assertGreater(a.score.score, 0)


if __name__ == "__main__":
    unittest.main()
