
"""
JSON persistence for high scores and replays.

Everything read back from disk is treated as untrusted: each record is
checked field by field before it is turned into a typed object, and records
that fail are dropped (with a warning) rather than handed to the game.
A replay with a single bad event is rejected whole, since a partial action
log would desync from its seed.

Storage is an ordinary object bound to a directory; construct one and pass
it to whatever needs it.
"""
import json
import logging
import math
import os
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from tetris_replay import ReplayEvent, ReplayRecord
from tetris_session import Action

log = logging.getLogger(__name__)

HIGH_SCORES_FILE = "high_scores.json"
REPLAY_DIR = "replays"
MAX_HIGH_SCORES = 10
DEFAULT_PLAYER_NAME = "AAA"
MAX_NAME_LEN = 16
MAX_SCORE = 10_000_000_000
MAX_EVENTS = 1_000_000

_ACTIONS = {a.value: a for a in Action}
_REPLAY_ID = re.compile(r"replay_[0-9a-fA-F-]{1,64}")


class RecordError(ValueError):
    """A stored record has the wrong shape, type or range."""


@dataclass(frozen=True)
class HighScoreEntry:
    name: str
    score: int
    level: int
    lines: int
    date: str


def _int(data: Dict[str, Any], key: str, lo: int, hi: int) -> int:
    v = data.get(key)
    # bool is an int subclass; reject it explicitly
    if not isinstance(v, int) or isinstance(v, bool) or not lo <= v <= hi:
        raise RecordError(f"{key}: expected int in [{lo}, {hi}], got {v!r}")
    return v


def _number(data: Dict[str, Any], key: str, lo: float, hi: float) -> float:
    v = data.get(key)
    if not isinstance(v, (int, float)) or isinstance(v, bool) or not math.isfinite(v) \
            or not lo <= v <= hi:
        raise RecordError(f"{key}: expected number in [{lo}, {hi}], got {v!r}")
    return float(v)


def _str(data: Dict[str, Any], key: str, max_len: int) -> str:
    v = data.get(key)
    if not isinstance(v, str) or len(v) > max_len:
        raise RecordError(f"{key}: expected string of at most {max_len} chars")
    return v


def _date(data: Dict[str, Any], key: str) -> str:
    v = _str(data, key, 64)
    try:
        datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        raise RecordError(f"{key}: not an ISO date: {v!r}") from None
    return v


def high_score_from_dict(data: Any) -> HighScoreEntry:
    if not isinstance(data, dict):
        raise RecordError("high score entry must be an object")
    return HighScoreEntry(
        name=_str(data, "name", MAX_NAME_LEN),
        score=_int(data, "score", 0, MAX_SCORE),
        level=_int(data, "level", 1, 10_000),
        lines=_int(data, "lines", 0, 1_000_000),
        date=_date(data, "date"),
    )


def replay_from_dict(data: Any) -> ReplayRecord:
    if not isinstance(data, dict):
        raise RecordError("replay must be an object")
    replay_id = _str(data, "id", 80)
    if not _REPLAY_ID.fullmatch(replay_id):
        raise RecordError(f"id: malformed {replay_id!r}")
    duration = _number(data, "duration", 0, 1e10)
    raw_events = data.get("events")
    if not isinstance(raw_events, list) or len(raw_events) > MAX_EVENTS:
        raise RecordError("events: expected a list")

    events = []
    last = 0.0
    for i, raw in enumerate(raw_events):
        if not isinstance(raw, dict):
            raise RecordError(f"events[{i}]: expected an object")
        ts = _number(raw, "timestamp", 0, duration)
        if ts < last:
            raise RecordError(f"events[{i}]: timestamp goes backwards")
        action = _ACTIONS.get(raw.get("action"))
        if action is None:
            raise RecordError(f"events[{i}]: unknown action {raw.get('action')!r}")
        events.append(ReplayEvent(ts, action))
        last = ts

    return ReplayRecord(
        seed=_int(data, "seed", 0, 0xFFFFFFFF),
        events=tuple(events),
        final_score=_int(data, "finalScore", 0, MAX_SCORE),
        final_level=_int(data, "finalLevel", 1, 10_000),
        final_lines=_int(data, "finalLines", 0, 1_000_000),
        date=_date(data, "date"),
        duration=duration,
        id=replay_id,
    )


class Storage:
    def __init__(self, directory: str):
        self.directory = os.path.expanduser(directory)

    @property
    def high_scores_path(self) -> str:
        return os.path.join(self.directory, HIGH_SCORES_FILE)

    @property
    def replay_dir(self) -> str:
        return os.path.join(self.directory, REPLAY_DIR)

    def _read_json(self, path: str) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            log.warning("could not read %s: %s", path, e)
            return None

    def _write_json(self, path: str, data: Any) -> bool:
        tmp = path + ".tmp"
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=1)
            os.replace(tmp, path)
            return True
        except OSError as e:
            log.warning("could not write %s: %s", path, e)
            return False

    # ---------- high scores ----------

    def get_high_scores(self) -> List[HighScoreEntry]:
        data = self._read_json(self.high_scores_path)
        if not isinstance(data, list):
            if data is not None:
                log.warning("ignoring malformed high score table")
            return []
        entries = []
        for i, raw in enumerate(data):
            try:
                entries.append(high_score_from_dict(raw))
            except RecordError as e:
                log.warning("dropping high score entry %d: %s", i, e)
        return sorted(entries, key=lambda e: e.score, reverse=True)[:MAX_HIGH_SCORES]

    def add_high_score(self, entry: HighScoreEntry) -> bool:
        scores = self.get_high_scores() + [entry]
        scores.sort(key=lambda e: e.score, reverse=True)
        return self._write_json(self.high_scores_path,
                                [asdict(e) for e in scores[:MAX_HIGH_SCORES]])

    def is_high_score(self, score: int) -> bool:
        scores = self.get_high_scores()
        if len(scores) < MAX_HIGH_SCORES:
            return score > 0
        return score > scores[-1].score

    def get_score_rank(self, score: int) -> Optional[int]:
        scores = self.get_high_scores()
        for i, e in enumerate(scores):
            if score > e.score:
                return i + 1
        if len(scores) < MAX_HIGH_SCORES:
            return len(scores) + 1
        return None

    def clear_high_scores(self):
        try:
            os.remove(self.high_scores_path)
        except FileNotFoundError:
            pass

    @staticmethod
    def create_entry(name: str, score: int, level: int, lines: int) -> HighScoreEntry:
        name = (name or "").strip()[:MAX_NAME_LEN] or DEFAULT_PLAYER_NAME
        return HighScoreEntry(name, score, level, lines,
                              datetime.now(timezone.utc).isoformat())

    # ---------- replays ----------

    def _replay_path(self, replay_id: str) -> str:
        return os.path.join(self.replay_dir, replay_id + ".json")

    def save_replay(self, record: ReplayRecord) -> bool:
        return self._write_json(self._replay_path(record.id), record.to_dict())

    def load_replay(self, replay_id: str) -> Optional[ReplayRecord]:
        if not _REPLAY_ID.fullmatch(replay_id):
            return None
        return self.load_replay_file(self._replay_path(replay_id))

    def load_replay_file(self, path: str) -> Optional[ReplayRecord]:
        data = self._read_json(path)
        if data is None:
            return None
        try:
            return replay_from_dict(data)
        except RecordError as e:
            log.warning("rejecting replay %s: %s", path, e)
            return None

    def list_replays(self) -> List[ReplayRecord]:
        try:
            names = sorted(os.listdir(self.replay_dir))
        except OSError:
            return []
        records = []
        for name in names:
            if not name.endswith(".json"):
                continue
            record = self.load_replay_file(os.path.join(self.replay_dir, name))
            if record is not None:
                records.append(record)
        return records
