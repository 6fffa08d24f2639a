from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from sharptype import config
from sharptype.core.levels import Level
from sharptype.core.metrics import SessionSummary
from sharptype.core.state import EngineState
from sharptype.core.text_generator import weak_keys

logger = logging.getLogger(__name__)


@dataclass
class ProgressRecord:
    best_wpm: int = 0
    best_accuracy: int = 0
    last_wpm: Optional[int] = None
    last_accuracy: Optional[int] = None
    total_sessions: int = 0
    errors_by_key: Dict[str, int] = field(default_factory=dict)
    earned_badges: List[str] = field(default_factory=list)
    current_level: Level = Level.BEGINNER
    current_lesson_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["current_level"] = self.current_level.value
        return payload


def _int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return _int(value, 0)


def _parse_record(payload: Any) -> ProgressRecord:
    """Build a record from decoded JSON; unusable fields keep their defaults."""
    record = ProgressRecord()
    if not isinstance(payload, dict):
        return record
    record.best_wpm = max(0, _int(payload.get("best_wpm"), 0))
    record.best_accuracy = min(100, max(0, _int(payload.get("best_accuracy"), 0)))
    record.last_wpm = _optional_int(payload.get("last_wpm"))
    record.last_accuracy = _optional_int(payload.get("last_accuracy"))
    record.total_sessions = max(0, _int(payload.get("total_sessions"), 0))
    record.current_lesson_index = max(0, _int(payload.get("current_lesson_index"), 0))

    errors = payload.get("errors_by_key", {})
    if isinstance(errors, dict):
        for key, count in errors.items():
            count = _int(count, 0)
            if isinstance(key, str) and count > 0:
                record.errors_by_key[key] = count

    badges = payload.get("earned_badges", [])
    if isinstance(badges, list):
        for badge_id in badges:
            if isinstance(badge_id, str) and badge_id not in record.earned_badges:
                record.earned_badges.append(badge_id)

    level = payload.get("current_level")
    if level is not None:
        try:
            record.current_level = Level.parse(level)
        except ValueError:
            logger.warning("Ignoring unknown level in progress file: %r", level)
    return record


class ProgressStore:
    """Learner progress that survives restarts, kept as JSON on disk.

    Default file: ~/.sharptype/progress.json. A missing or unreadable file
    means no prior progress.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path else config.PROGRESS_FILE
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._progress = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def progress(self) -> ProgressRecord:
        return self._progress

    def record_session(
        self,
        summary: SessionSummary,
        level: Union[Level, str],
        lesson_index: int,
        earned_badges: Iterable[str],
    ) -> ProgressRecord:
        """Merge a finished session into the record and save it."""
        record = self._progress
        record.last_wpm = summary.wpm
        record.last_accuracy = summary.accuracy
        record.total_sessions += 1
        record.best_wpm = max(record.best_wpm, summary.wpm)
        record.best_accuracy = max(record.best_accuracy, summary.accuracy)
        record.current_level = Level.parse(level)
        record.current_lesson_index = lesson_index
        for badge_id in earned_badges:
            if badge_id not in record.earned_badges:
                record.earned_badges.append(badge_id)
        for key, count in summary.errors_by_key.items():
            if count > 0:
                record.errors_by_key[key] = record.errors_by_key.get(key, 0) + count
        self._save()
        return record

    def update_position(self, level: Union[Level, str], lesson_index: int) -> None:
        """Remember the selected lesson without counting a session."""
        self._progress.current_level = Level.parse(level)
        self._progress.current_lesson_index = lesson_index
        self._save()

    def restore(self, state: EngineState) -> EngineState:
        """Seed engine counters from saved progress (badges, session count)."""
        state.session_count = max(state.session_count, self._progress.total_sessions)
        if self._progress.last_wpm is not None:
            state.last_wpm = self._progress.last_wpm
        for badge_id in self._progress.earned_badges:
            state.award(badge_id)
        return state

    def weak_keys(self, limit: int = config.WEAK_KEY_LIMIT) -> List[str]:
        return weak_keys(self._progress.errors_by_key, limit)

    def reset(self) -> None:
        """Clear all progress."""
        self._progress = ProgressRecord()
        self._save()

    def save(self) -> None:
        """Persist current state to disk (e.g. on app exit)."""
        self._save()

    def _load(self) -> ProgressRecord:
        if not self._file_path.exists():
            return ProgressRecord()
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return ProgressRecord()
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress file %s: expected a JSON object", self._file_path)
        return _parse_record(payload)

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._file_path.write_text(json.dumps(self._progress.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
