import os
import unittest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # noqa: E402

from tetris_layout import compute_dims  # noqa: E402
from tetris_render import RenderAssets  # noqa: E402
from tetris_session import Action, GameSession  # noqa: E402


class RenderSmokeTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        pygame.init()
        cls.dims = compute_dims()
        cls.assets = RenderAssets(cls.dims, pygame.font.Font(None, 18))

    @classmethod
    def tearDownClass(cls):
        pygame.quit()

    def test_draws_running_paused_and_finished_games(self):
        screen = pygame.Surface((self.dims.total_w, self.dims.total_h))
        s = GameSession(seed=8)
        s.update(16)
        s.update(16, [Action.HOLD])
        self.assertIsNotNone(s.snapshot().held)
        self.assertIsNotNone(s.snapshot().kind)
        self.assertIsNone(self.assets.draw(screen, s.snapshot(), "Replay 00:01  4%"))

        s.update(16, [Action.PAUSE])
        self.assertIsNone(self.assets.draw(screen, s.snapshot()))

        s.update(16, [Action.PAUSE])
        while not s.game_over:
            s.update(16, [Action.HARD_DROP])
        self.assertIsNone(self.assets.draw(screen, s.snapshot()))

    def test_dims_fit_board(self):
        d = self.dims
        self.assertGreater(d.total_w, d.board_w + d.panel_w)
        self.assertEqual(d.board_h, 20 * d.cell)
        self.assertEqual(len(d.stat_ys), 5)
        self.assertLess(d.stat_ys[-1], d.hold_y)
        self.assertLess(d.hold_y, d.next_y)
        self.assertEqual(compute_dims(cell_size=20).board_w, 200)


if __name__ == "__main__":
    unittest.main()
