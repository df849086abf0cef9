
"""
Replay recording and playback.

A replay is the randomizer seed plus every input action with the time it
arrived. Since a session is a pure function of (seed, actions, tick timing),
feeding the log back through a fresh GameSession at the same tick rate
reproduces the game exactly.

Timestamps come from whatever clock the recorder is given. The driver hands
it the session's own simulated clock, which keeps playback tick-exact; the
default wall clock is fine for anything that only needs ordering.
"""
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from tetris_session import Action, GameSession

log = logging.getLogger(__name__)

DEFAULT_SPEED = 1.0


def _wall_clock_ms() -> float:
    return time.monotonic() * 1000.0


def new_replay_id() -> str:
    return f"replay_{uuid.uuid4()}"


@dataclass(frozen=True)
class ReplayEvent:
    timestamp: float
    action: Action


@dataclass(frozen=True)
class ReplayRecord:
    seed: int
    events: Tuple[ReplayEvent, ...]
    final_score: int
    final_level: int
    final_lines: int
    date: str
    duration: float
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "seed": self.seed,
            "events": [{"timestamp": e.timestamp, "action": e.action.value} for e in self.events],
            "finalScore": self.final_score,
            "finalLevel": self.final_level,
            "finalLines": self.final_lines,
            "date": self.date,
            "duration": self.duration,
        }


class ReplayRecorder:
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or _wall_clock_ms
        self.recording = False
        self.seed = 0
        self.events: List[ReplayEvent] = []
        self._start: Optional[float] = None

    def start_recording(self, seed: int):
        self.recording = True
        self.seed = seed
        self.events = []
        self._start = self.clock()
        log.debug("recording started, seed %d", seed)

    def record_action(self, action: Action):
        if not self.recording:
            return
        self.events.append(ReplayEvent(self.clock() - self._start, action))

    def stop_recording(self, final_score: int, final_level: int, final_lines: int) -> ReplayRecord:
        duration = 0.0 if self._start is None else self.clock() - self._start
        self.recording = False
        record = ReplayRecord(
            seed=self.seed,
            events=tuple(self.events),
            final_score=final_score,
            final_level=final_level,
            final_lines=final_lines,
            date=datetime.now(timezone.utc).isoformat(),
            duration=duration,
            id=new_replay_id(),
        )
        log.debug("recording stopped: %d events over %.0f ms", len(record.events), duration)
        return record

    @property
    def event_count(self) -> int:
        return len(self.events)


@dataclass
class PlaybackState:
    record: ReplayRecord
    current_time: float = 0.0
    next_index: int = 0
    paused: bool = False
    speed: float = DEFAULT_SPEED
    finished: bool = False


def create_playback_state(record: ReplayRecord) -> PlaybackState:
    return PlaybackState(record)


def update_playback(state: PlaybackState, delta_ms: float) -> List[Action]:
    """Advance playback and return every action that came due, in log order."""
    if state.paused or state.finished or delta_ms < 0:
        return []
    state.current_time += delta_ms * state.speed
    events = state.record.events
    due = []
    while state.next_index < len(events) and events[state.next_index].timestamp <= state.current_time:
        due.append(events[state.next_index].action)
        state.next_index += 1
    if state.next_index >= len(events) and state.current_time >= state.record.duration:
        state.finished = True
    return due


def set_speed(state: PlaybackState, speed: float):
    state.speed = speed


def pause(state: PlaybackState):
    state.paused = True


def resume(state: PlaybackState):
    state.paused = False


def toggle_pause(state: PlaybackState):
    state.paused = not state.paused


def get_progress(state: PlaybackState) -> float:
    if state.record.duration == 0:
        return 100.0
    return max(0.0, min(100.0, state.current_time / state.record.duration * 100.0))


def format_time(ms: float) -> str:
    seconds = int(ms // 1000)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def replay_session(record: ReplayRecord, tick_ms: float, lock_delay_ms: Optional[float] = None,
                   max_ticks: Optional[int] = None) -> GameSession:
    """Re-run a recorded game to completion at `tick_ms` per step."""
    session = GameSession(seed=record.seed, lock_delay_ms=lock_delay_ms)
    state = create_playback_state(record)
    ticks = 0
    while tick_ms > 0 and not state.finished and not session.game_over:
        if max_ticks is not None and ticks >= max_ticks:
            break
        session.update(tick_ms, update_playback(state, tick_ms))
        ticks += 1
    return session
