
"""pygame driver: fixed-timestep loop, keyboard, recording, persistence"""
import argparse
import logging
import sys
from typing import List, Optional

import pygame

from tetris_config import CONFIG
from tetris_input import InputMapper
from tetris_layout import compute_dims
from tetris_render import RenderAssets
from tetris_replay import (ReplayRecord, ReplayRecorder, create_playback_state, format_time,
                           get_progress, toggle_pause, update_playback)
from tetris_session import Action, GameSession
from tetris_storage import Storage

log = logging.getLogger("tetris")


def recreate_window(dims, flags=pygame.DOUBLEBUF):
    try:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags)


class Game:
    """One play (or replay-watching) run, stepped by the fixed-timestep loop."""

    def __init__(self, storage: Storage, seed: Optional[int] = None,
                 replay: Optional[ReplayRecord] = None, speed: float = 1.0):
        self.storage = storage
        self.replay = replay
        self.session = GameSession(seed=replay.seed if replay else seed, announce=self.announce)
        self.inputs = InputMapper()
        self.saved = False
        self.last_announcement = ""
        if replay is None:
            self.playback = None
            self.recorder = ReplayRecorder(clock=lambda: self.session.elapsed_ms)
            self.recorder.start_recording(self.session.seed)
            self.session.add_action_listener(self.recorder.record_action)
        else:
            self.recorder = None
            self.playback = create_playback_state(replay)
        # playback runs whole recorded ticks; speed only changes how many per frame
        self.speed = speed
        self._tick_credit = 0.0

    def announce(self, message: str):
        self.last_announcement = message
        log.info("%s", message)

    def key_down(self, key: int) -> List[Action]:
        if self.playback is not None:
            if key in (pygame.K_p, pygame.K_SPACE):
                toggle_pause(self.playback)
            return []
        action = self.inputs.key_down(key)
        return [action] if action is not None else []

    def key_up(self, key: int):
        self.inputs.key_up(key)

    def step(self, dt_ms: float, pressed: List[Action]):
        if self.playback is not None:
            if self.playback.paused:
                return
            self._tick_credit += self.speed
            while self._tick_credit >= 1:
                self._tick_credit -= 1
                if self.playback.finished or self.session.game_over:
                    break
                self.session.update(dt_ms, update_playback(self.playback, dt_ms))
            return
        self.session.update(dt_ms, pressed + self.inputs.update(dt_ms))
        if self.session.game_over and not self.saved:
            self.finish()

    def finish(self):
        stats = self.session.score.stats
        record = self.recorder.stop_recording(stats.score, stats.level, stats.lines)
        self.saved = True
        self.storage.save_replay(record)
        if self.storage.is_high_score(stats.score):
            self.storage.add_high_score(
                self.storage.create_entry("", stats.score, stats.level, stats.lines))
        log.info("game over: score %d, level %d, lines %d (replay %s)",
                 stats.score, stats.level, stats.lines, record.id)

    def progress(self) -> Optional[str]:
        if self.playback is None:
            return None
        return "Replay %s  %d%%" % (format_time(self.playback.current_time),
                                   get_progress(self.playback))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Guideline falling-block puzzle")
    parser.add_argument("--seed", type=int, default=CONFIG["SEED"])
    parser.add_argument("--replay", help="replay JSON file to watch")
    parser.add_argument("--speed", type=float, default=1.0)
    parser.add_argument("--data-dir", default=CONFIG["DATA_DIR"])
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    storage = Storage(args.data_dir)
    replay = None
    if args.replay:
        replay = storage.load_replay_file(args.replay)
        if replay is None:
            log.error("cannot play %s", args.replay)
            return 1

    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN, pygame.KEYUP,
                              pygame.WINDOWFOCUSLOST])
    dims = compute_dims()
    screen = recreate_window(dims)
    pygame.display.set_caption("Tetris (Guideline rules)")
    font = pygame.font.SysFont(None, 22)
    render = RenderAssets(dims, font)
    clock = pygame.time.Clock()

    game = Game(storage, seed=args.seed, replay=replay, speed=args.speed)
    dt_ms = 1000.0 / CONFIG["UPDATE_HZ"]
    accumulator = 0.0
    pressed: List[Action] = []

    while True:
        accumulator += clock.tick(CONFIG["UPDATE_HZ"])

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                return 0
            if event.type == pygame.WINDOWFOCUSLOST:
                game.inputs.clear()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_r and game.session.game_over and replay is None:
                    game = Game(storage, seed=args.seed)
                    pressed = []
                    continue
                pressed.extend(game.key_down(event.key))
            elif event.type == pygame.KEYUP:
                game.key_up(event.key)

        # cap catch-up so a stall doesn't turn into a burst of ticks
        accumulator = min(accumulator, dt_ms * 5)
        while accumulator >= dt_ms:
            accumulator -= dt_ms
            game.step(dt_ms, pressed)
            pressed = []

        render.draw(screen, game.session.snapshot(), game.progress())
        pygame.display.flip()


if __name__ == "__main__":
    sys.exit(main())
