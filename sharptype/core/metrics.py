from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from sharptype import config

Clock = Callable[[], float]


def _wall_clock_ms() -> float:
    return time.time() * 1000.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def calculate_wpm(characters: int, seconds: float) -> int:
    """Words per minute with the standard five-characters-per-word convention.

    Zero elapsed time means no rate can be measured yet, so the result is 0.
    """
    if seconds <= 0:
        return 0
    words = characters / config.CHARS_PER_WORD
    return round_half_up(words / (seconds / 60.0))


def calculate_accuracy(correct: int, total: int) -> int:
    """Percentage of correct keystrokes; 100 when nothing has been typed."""
    if total == 0:
        return 100
    return round_half_up(correct / total * 100.0)


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time view of a typing session."""

    wpm: int = 0
    accuracy: int = 100
    total_keystrokes: int = 0
    correct_keystrokes: int = 0
    errors_by_key: Dict[str, int] = field(default_factory=dict)
    average_reaction_time: float = 0.0

    @property
    def errors(self) -> int:
        return self.total_keystrokes - self.correct_keystrokes


@dataclass(frozen=True)
class SessionSummary(MetricsSnapshot):
    """Final metrics of a finished session, with its duration."""

    total_time_ms: int = 0
    total_time_seconds: int = 0


class TypingMetrics:
    """Records keystrokes for one practice session and derives speed and accuracy.

    Keystrokes must be recorded in time order. The session starts on the first
    keystroke; ``reset`` discards everything so the next keystroke starts a new
    session. Timestamps come from ``clock`` (milliseconds) so callers can drive
    the recorder with synthetic time.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or _wall_clock_ms
        self.reset()

    @property
    def start_time(self) -> Optional[float]:
        """Millisecond timestamp of the first keystroke, or None."""
        return self._start_time

    @property
    def end_time(self) -> Optional[float]:
        """Millisecond timestamp set by ``finish_session``, or None."""
        return self._end_time

    @property
    def total_keystrokes(self) -> int:
        return self._total_keystrokes

    @property
    def correct_keystrokes(self) -> int:
        return self._correct_keystrokes

    @property
    def reaction_times(self) -> List[float]:
        """Intervals between consecutive keystrokes, in milliseconds."""
        return list(self._reaction_times)

    def record_keystroke(self, typed_char: str, is_correct: bool, target_char: str) -> None:
        """Count one keystroke against ``target_char``."""
        now = self._clock()
        if self._start_time is None:
            self._start_time = now
        if self._last_keystroke_time is not None:
            self._reaction_times.append(now - self._last_keystroke_time)
        self._last_keystroke_time = now

        self._total_keystrokes += 1
        if is_correct:
            self._correct_keystrokes += 1
        else:
            self._errors_by_key[target_char] = self._errors_by_key.get(target_char, 0) + 1

    def get_current_metrics(self) -> MetricsSnapshot:
        """Live metrics, measured from the first to the latest keystroke."""
        return MetricsSnapshot(
            wpm=calculate_wpm(self._correct_keystrokes, self._elapsed_ms(self._last_keystroke_time) / 1000.0),
            accuracy=calculate_accuracy(self._correct_keystrokes, self._total_keystrokes),
            total_keystrokes=self._total_keystrokes,
            correct_keystrokes=self._correct_keystrokes,
            errors_by_key=dict(self._errors_by_key),
            average_reaction_time=self._average_reaction_time(),
        )

    def finish_session(self) -> SessionSummary:
        """Stamp the end time and return the final metrics."""
        self._end_time = self._clock()
        total_ms = self._elapsed_ms(self._end_time)
        return SessionSummary(
            wpm=calculate_wpm(self._correct_keystrokes, total_ms / 1000.0),
            accuracy=calculate_accuracy(self._correct_keystrokes, self._total_keystrokes),
            total_keystrokes=self._total_keystrokes,
            correct_keystrokes=self._correct_keystrokes,
            errors_by_key=dict(self._errors_by_key),
            average_reaction_time=self._average_reaction_time(),
            total_time_ms=round_half_up(total_ms),
            total_time_seconds=round_half_up(total_ms / 1000.0),
        )

    def reset(self) -> None:
        """Forget the current session."""
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None
        self._last_keystroke_time: Optional[float] = None
        self._total_keystrokes = 0
        self._correct_keystrokes = 0
        self._errors_by_key: Dict[str, int] = {}
        self._reaction_times: List[float] = []

    def _elapsed_ms(self, until: Optional[float]) -> float:
        if self._start_time is None or until is None:
            return 0.0
        return max(0.0, until - self._start_time)

    def _average_reaction_time(self) -> float:
        if not self._reaction_times:
            return 0.0
        return sum(self._reaction_times) / len(self._reaction_times)
