from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Union

from sharptype import config
from sharptype.core.badges import Badge, check_for_badges, get_badge
from sharptype.core.curriculum import CurriculumRepository, Lesson
from sharptype.core.feedback import generate_feedback_message
from sharptype.core.levels import Level, adjust_difficulty
from sharptype.core.metrics import Clock, MetricsSnapshot, SessionSummary, TypingMetrics
from sharptype.core.progress import ProgressStore
from sharptype.core.state import EngineState
from sharptype.core.text_generator import generate_spaced_repetition_text

logger = logging.getLogger(__name__)


@dataclass
class LessonResult:
    """Everything the results screen shows for a finished lesson."""

    summary: SessionSummary
    feedback: str
    improvement: int
    suggested_level: Level
    new_badges: List[Badge] = field(default_factory=list)
    celebrate: bool = False


class TypingTutor:
    """Drives lessons: picks the text, scores keystrokes and closes sessions.

    The level suggested by adaptive difficulty is reported in each
    ``LessonResult`` but never applied here; call ``select_level`` to follow it.
    """

    def __init__(
        self,
        curriculum: CurriculumRepository,
        progress_store: ProgressStore,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        state: Optional[EngineState] = None,
    ) -> None:
        self._curriculum = curriculum
        self._progress_store = progress_store
        self._rng = rng or random.Random()
        self._metrics = TypingMetrics(clock)
        self._state = progress_store.restore(state or EngineState())
        self._text = ""
        self._position = 0
        self._is_typing = False
        self._is_drill = False

        record = progress_store.progress
        self._level = record.current_level
        self._lesson_index = 0
        if not curriculum.lessons(self._level):
            self._level = curriculum.levels()[0]
        elif record.current_lesson_index < len(curriculum.lessons(self._level)):
            self._lesson_index = record.current_lesson_index
        self._load_lesson()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def progress_store(self) -> ProgressStore:
        return self._progress_store

    @property
    def metrics(self) -> TypingMetrics:
        return self._metrics

    @property
    def current_level(self) -> Level:
        return self._level

    @property
    def current_lesson_index(self) -> int:
        return self._lesson_index

    @property
    def current_lesson(self) -> Lesson:
        return self._curriculum.get(self._level, self._lesson_index)

    @property
    def current_text(self) -> str:
        return self._text

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_typing(self) -> bool:
        return self._is_typing

    def select_level(self, level: Union[Level, str]) -> None:
        """Switch level and load its first lesson."""
        level = Level.parse(level)
        if not self._curriculum.lessons(level):
            raise ValueError(f"No lessons for level {level.value}")
        self._level = level
        self._lesson_index = 0
        self._load_lesson()
        self._progress_store.update_position(self._level, self._lesson_index)

    def select_lesson(self, index: int) -> None:
        self._curriculum.get(self._level, index)
        self._lesson_index = index
        self._load_lesson()
        self._progress_store.update_position(self._level, self._lesson_index)

    def next_lesson(self) -> bool:
        """Advance to the next lesson, rolling into the next level; False at the end."""
        position = self._curriculum.next_position(self._level, self._lesson_index)
        if position is None:
            return False
        level, index = position
        if level is not self._level:
            self.select_level(level)
        else:
            self.select_lesson(index)
        return True

    def start_lesson(self) -> None:
        self._metrics.reset()
        self._position = 0
        self._is_typing = bool(self._text)

    def start_weak_key_drill(self, length: int = config.DEFAULT_PRACTICE_LENGTH) -> str:
        """Replace the lesson text with practice aimed at the most-missed keys."""
        self._text = generate_spaced_repetition_text(
            self._progress_store.progress.errors_by_key, length, self._rng
        )
        self._is_drill = True
        self.start_lesson()
        logger.info("Weak-key drill on %s", ", ".join(self._progress_store.weak_keys()) or "common words")
        return self._text

    def reset_lesson(self) -> None:
        self._is_typing = False
        self._position = 0
        self._metrics.reset()

    def record_keystroke(self, typed_char: str) -> bool:
        """Score one typed character against the text; returns whether it matched."""
        if not self._is_typing:
            raise RuntimeError("No lesson in progress")
        if self._position >= len(self._text):
            raise RuntimeError("Text already typed; finish the lesson")
        target_char = self._text[self._position]
        is_correct = typed_char == target_char
        self._metrics.record_keystroke(typed_char, is_correct, target_char)
        self._position += 1
        return is_correct

    def backspace(self) -> None:
        """Step back one character; keystrokes already scored stay scored."""
        if self._is_typing and self._position > 0:
            self._position -= 1

    def type_text(self, typed: str) -> Optional[LessonResult]:
        """Feed characters until the text is used up; finishes the lesson when it is."""
        for char in typed:
            if self._position >= len(self._text):
                break
            self.record_keystroke(char)
        if self._is_typing and self._position >= len(self._text):
            return self.finish_lesson()
        return None

    def current_metrics(self) -> MetricsSnapshot:
        return self._metrics.get_current_metrics()

    def finish_lesson(self) -> LessonResult:
        """Close the session, pick feedback and badges, and save progress."""
        self._is_typing = False
        summary = self._metrics.finish_session()
        record = self._progress_store.progress

        suggested = adjust_difficulty(summary.accuracy, self._level)
        if suggested is not self._level:
            logger.info("Suggested level change: %s -> %s", self._level.value, suggested.value)

        improvement = summary.wpm - (record.last_wpm or 0)
        feedback = generate_feedback_message(self._state, summary, improvement, self._rng)
        new_ids = check_for_badges(self._state, summary, self._level)
        self._progress_store.record_session(summary, self._level, self._lesson_index, self._state.earned_badges)

        if self._is_drill:
            self._is_drill = False
            self._load_lesson()

        return LessonResult(
            summary=summary,
            feedback=feedback,
            improvement=improvement,
            suggested_level=suggested,
            new_badges=[badge for badge in map(get_badge, new_ids) if badge is not None],
            celebrate=summary.accuracy >= config.CELEBRATE_ACCURACY or summary.wpm >= config.CELEBRATE_WPM,
        )

    def _load_lesson(self) -> None:
        self._text = self.current_lesson.text
        self._is_drill = False
        self.reset_lesson()
