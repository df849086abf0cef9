import tempfile
import unittest

import pygame

from main import Game
from tetris_replay import replay_session
from tetris_session import Action
from tetris_storage import Storage

TICK = 1000.0 / 60


class GameTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.storage = Storage(self._tmp.name)

    def play_out(self, game):
        for _ in range(2000):
            if game.session.game_over:
                break
            game.step(TICK, game.key_down(pygame.K_SPACE))
            game.key_up(pygame.K_SPACE)

    def test_finished_game_is_saved_and_replays(self):
        game = Game(self.storage, seed=2468)
        self.play_out(game)
        self.assertTrue(game.session.game_over)
        self.assertTrue(game.saved)
        self.assertEqual(game.last_announcement, "Game Over")

        records = self.storage.list_replays()
        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record.seed, 2468)
        self.assertTrue(all(e.action is Action.HARD_DROP for e in record.events))

        replayed = replay_session(record, TICK)
        self.assertEqual(replayed.grid.rows(True), game.session.grid.rows(True))
        self.assertEqual(replayed.score.stats, game.session.score.stats)

        scores = self.storage.get_high_scores()
        self.assertEqual([e.score for e in scores], [game.session.score.score])

    def test_watching_a_replay(self):
        game = Game(self.storage, seed=13)
        self.play_out(game)
        record = self.storage.list_replays()[0]

        watch = Game(self.storage, replay=record)
        self.assertEqual(watch.key_down(pygame.K_LEFT), [])
        self.assertTrue(watch.progress().startswith("Replay 00:00"))
        while not watch.playback.finished and not watch.session.game_over:
            watch.step(TICK, [])
        self.assertEqual(watch.session.score.stats, game.session.score.stats)

        watch.key_down(pygame.K_p)
        self.assertTrue(watch.playback.paused)

    def test_replay_matches_at_any_speed(self):
        # drops are spaced out so gravity and lock delay shape the result
        game = Game(self.storage, seed=31337)
        for i in range(3000):
            if game.session.game_over:
                break
            pressed = []
            if i % 150 == 149:
                pressed = game.key_down(pygame.K_SPACE)
                game.key_up(pygame.K_SPACE)
            elif i % 150 == 20:
                pressed = game.key_down(pygame.K_LEFT)
                game.key_up(pygame.K_LEFT)
            game.step(TICK, pressed)
        stats = game.session.score.stats
        if not game.saved:
            game.finish()
        record = self.storage.list_replays()[0]

        for speed in (0.5, 1.0, 2.0, 3.0):
            watch = Game(self.storage, replay=record, speed=speed)
            for _ in range(20000):
                if watch.playback.finished or watch.session.game_over:
                    break
                watch.step(TICK, [])
            self.assertEqual(watch.session.score.stats, stats, f"speed {speed}")
            self.assertEqual(watch.session.grid.rows(True), game.session.grid.rows(True),
                             f"speed {speed}")
            self.assertEqual(watch.session.elapsed_ms, game.session.elapsed_ms, f"speed {speed}")
        self.assertEqual(len(self.storage.list_replays()), 1)


if __name__ == "__main__":
    unittest.main()
