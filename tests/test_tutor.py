"""Tests for sharptype.core.tutor – lesson flow from keystrokes to saved progress."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from sharptype.core.curriculum import CurriculumRepository
from sharptype.core.feedback import ENCOURAGING_REMARKS
from sharptype.core.levels import Level
from sharptype.core.progress import ProgressStore
from sharptype.core.state import EngineState
from sharptype.core.tutor import TypingTutor


class SteppingClock:
    """Advances a fixed number of milliseconds on every reading."""

    def __init__(self, step_ms: float = 200.0) -> None:
        self.now = 0.0
        self.step_ms = step_ms

    def __call__(self) -> float:
        value = self.now
        self.now += self.step_ms
        return value


@pytest.fixture(scope="module")
def curriculum() -> CurriculumRepository:
    return CurriculumRepository()


@pytest.fixture()
def progress_file(tmp_path: Path) -> Path:
    return tmp_path / "progress.json"


@pytest.fixture()
def tutor(curriculum: CurriculumRepository, progress_file: Path) -> TypingTutor:
    return TypingTutor(curriculum, ProgressStore(progress_file), clock=SteppingClock(), rng=random.Random(0))


# ---------------------------------------------------------------------------
# Construction and selection
# ---------------------------------------------------------------------------

class TestSetup:
    def test_starts_at_first_lesson(self, tutor: TypingTutor):
        assert tutor.current_level is Level.BEGINNER
        assert tutor.current_lesson_index == 0
        assert tutor.current_lesson.id == "home-row-1"
        assert tutor.current_text == tutor.current_lesson.text
        assert not tutor.is_typing

    def test_resumes_saved_position(self, curriculum: CurriculumRepository, progress_file: Path):
        ProgressStore(progress_file).update_position("advanced", 2)
        resumed = TypingTutor(curriculum, ProgressStore(progress_file))
        assert resumed.current_level is Level.ADVANCED
        assert resumed.current_lesson.id == "business-text"

    def test_saved_index_out_of_range(self, curriculum: CurriculumRepository, progress_file: Path):
        ProgressStore(progress_file).update_position("master", 42)
        resumed = TypingTutor(curriculum, ProgressStore(progress_file))
        assert resumed.current_level is Level.MASTER
        assert resumed.current_lesson_index == 0

    def test_restores_engine_state(self, curriculum: CurriculumRepository, progress_file: Path, tutor: TypingTutor):
        tutor.start_lesson()
        tutor.type_text(tutor.current_text)
        resumed = TypingTutor(curriculum, ProgressStore(progress_file))
        assert resumed.state.session_count == 1
        assert "first-lesson" in resumed.state.earned_badges

    def test_select_level(self, tutor: TypingTutor, progress_file: Path):
        tutor.select_lesson(3)
        tutor.select_level("intermediate")
        assert tutor.current_lesson_index == 0
        assert tutor.current_lesson.id == "numbers-1"
        assert ProgressStore(progress_file).progress.current_level is Level.INTERMEDIATE

    def test_select_unknown_level(self, tutor: TypingTutor):
        with pytest.raises(ValueError):
            tutor.select_level("expert")

    def test_select_lesson_out_of_range(self, tutor: TypingTutor):
        with pytest.raises(IndexError):
            tutor.select_lesson(5)
        assert tutor.current_lesson_index == 0


class TestNextLesson:
    def test_within_level(self, tutor: TypingTutor):
        assert tutor.next_lesson() is True
        assert tutor.current_lesson.id == "home-row-2"

    def test_rolls_into_next_level(self, tutor: TypingTutor):
        tutor.select_lesson(4)
        assert tutor.next_lesson() is True
        assert tutor.current_level is Level.INTERMEDIATE
        assert tutor.current_lesson_index == 0

    def test_stops_after_last_lesson(self, tutor: TypingTutor):
        tutor.select_level("master")
        tutor.select_lesson(4)
        assert tutor.next_lesson() is False
        assert tutor.current_lesson.id == "speed-master"


# ---------------------------------------------------------------------------
# Typing
# ---------------------------------------------------------------------------

class TestTyping:
    def test_keystroke_before_start(self, tutor: TypingTutor):
        with pytest.raises(RuntimeError):
            tutor.record_keystroke("a")

    def test_scores_against_text(self, tutor: TypingTutor):
        tutor.start_lesson()
        assert tutor.record_keystroke("a") is True
        assert tutor.record_keystroke("x") is False
        assert tutor.position == 2
        metrics = tutor.current_metrics()
        assert metrics.total_keystrokes == 2
        assert metrics.errors_by_key == {"s": 1}

    def test_keystroke_past_end_of_text(self, tutor: TypingTutor):
        tutor.start_lesson()
        for char in tutor.current_text:
            tutor.record_keystroke(char)
        with pytest.raises(RuntimeError):
            tutor.record_keystroke("x")
        assert tutor.position == len(tutor.current_text)
        assert tutor.current_metrics().total_keystrokes == len(tutor.current_text)

    def test_partial_text_does_not_finish(self, tutor: TypingTutor):
        tutor.start_lesson()
        assert tutor.type_text("asdf") is None
        assert tutor.is_typing

    def test_extra_input_ignored(self, tutor: TypingTutor):
        tutor.start_lesson()
        result = tutor.type_text(tutor.current_text + "overflow")
        assert result is not None
        assert result.summary.total_keystrokes == len(tutor.current_text)

    def test_backspace(self, tutor: TypingTutor):
        tutor.start_lesson()
        tutor.type_text("ax")
        tutor.backspace()
        assert tutor.position == 1
        assert tutor.record_keystroke("s") is True
        assert tutor.current_metrics().total_keystrokes == 3

    def test_backspace_at_start(self, tutor: TypingTutor):
        tutor.start_lesson()
        tutor.backspace()
        assert tutor.position == 0

    def test_reset_lesson(self, tutor: TypingTutor):
        tutor.start_lesson()
        tutor.type_text("asd")
        tutor.reset_lesson()
        assert tutor.position == 0
        assert not tutor.is_typing
        assert tutor.current_metrics().total_keystrokes == 0


# ---------------------------------------------------------------------------
# Finishing a lesson
# ---------------------------------------------------------------------------

class TestFinishLesson:
    def test_perfect_first_session(self, tutor: TypingTutor):
        tutor.start_lesson()
        result = tutor.type_text(tutor.current_text)
        assert result is not None
        summary = result.summary
        # one keystroke every 200 ms -> 300 chars per minute
        assert summary.wpm == 60
        assert summary.accuracy == 100
        assert result.improvement == 60
        assert result.feedback in ENCOURAGING_REMARKS
        assert result.celebrate is True
        assert [badge.id for badge in result.new_badges] == [
            "first-lesson",
            "wpm-20",
            "wpm-40",
            "wpm-60",
            "accuracy-90",
            "accuracy-95",
            "perfectionist",
        ]
        assert not tutor.is_typing

    def test_suggested_level_not_applied(self, tutor: TypingTutor):
        tutor.start_lesson()
        result = tutor.type_text(tutor.current_text)
        assert result.suggested_level is Level.INTERMEDIATE
        assert tutor.current_level is Level.BEGINNER

    def test_saves_progress(self, tutor: TypingTutor, progress_file: Path):
        tutor.select_lesson(1)
        tutor.start_lesson()
        tutor.type_text("x" + tutor.current_text[1:])
        record = ProgressStore(progress_file).progress
        assert record.total_sessions == 1
        assert record.current_lesson_index == 1
        assert record.errors_by_key == {"a": 1}
        assert "first-lesson" in record.earned_badges

    def test_improvement_uses_previous_session(self, tutor: TypingTutor):
        tutor.start_lesson()
        tutor.type_text(tutor.current_text)
        tutor.start_lesson()
        result = tutor.type_text(tutor.current_text)
        assert result.improvement == 0
        assert result.new_badges == []

    def test_low_accuracy_no_celebration(self, tutor: TypingTutor):
        tutor.start_lesson()
        result = tutor.type_text("z" * len(tutor.current_text))
        assert result.summary.accuracy < 20
        assert result.celebrate is False
        assert result.suggested_level is Level.BEGINNER

    def test_finish_without_typing(self, tutor: TypingTutor):
        tutor.start_lesson()
        result = tutor.finish_lesson()
        assert result.summary.wpm == 0
        assert result.summary.accuracy == 100

    def test_independent_tutors(self, curriculum: CurriculumRepository, tmp_path: Path):
        a = TypingTutor(curriculum, ProgressStore(tmp_path / "a.json"), clock=SteppingClock(), state=EngineState())
        b = TypingTutor(curriculum, ProgressStore(tmp_path / "b.json"), clock=SteppingClock(), state=EngineState())
        a.start_lesson()
        a.type_text(a.current_text)
        assert a.state.session_count == 1
        assert b.state.session_count == 0
        assert b.state.earned_badges == []


# ---------------------------------------------------------------------------
# Weak-key drill
# ---------------------------------------------------------------------------

class TestWeakKeyDrill:
    def test_common_words_without_history(self, tutor: TypingTutor):
        text = tutor.start_weak_key_drill(40)
        assert len(text) == 40
        assert tutor.current_text == text
        assert tutor.is_typing

    def test_targets_recorded_errors(self, tutor: TypingTutor):
        tutor.start_lesson()
        tutor.type_text("q" * len(tutor.current_text))
        text = tutor.start_weak_key_drill(400)
        weak = set(tutor.progress_store.weak_keys())
        assert weak
        weak_share = sum(ch in weak for ch in text) / len(text)
        assert weak_share > 0.5

    def test_lesson_text_back_after_drill(self, tutor: TypingTutor):
        lesson_text = tutor.current_lesson.text
        text = tutor.start_weak_key_drill(30)
        result = tutor.type_text(text)
        assert result is not None
        assert tutor.current_text == lesson_text
        assert tutor.progress_store.progress.total_sessions == 1
