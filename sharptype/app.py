"""Application entry point and console host for the SharpType typing tutor."""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from sharptype import config
from sharptype.core.badges import earned_badge_details
from sharptype.core.curriculum import CurriculumRepository
from sharptype.core.levels import Level
from sharptype.core.progress import ProgressStore
from sharptype.core.tutor import LessonResult, TypingTutor

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
QUIT_COMMANDS = {":q", ":quit"}
RESET_COMMANDS = {":r", ":reset"}
SKIP_COMMANDS = {":n", ":next"}


class _Quit(Exception):
    """Leave the lesson loop."""


def configure_logging(verbose: bool = False) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def format_time(seconds: int) -> str:
    """Format seconds as M:SS."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


class PacedClock:
    """Millisecond clock the console host moves by hand.

    A line of input arrives all at once, so the host spreads its characters
    evenly between the prompt and the Enter key.
    """

    def __init__(self, wall: Callable[[], float] = time.monotonic) -> None:
        self._wall = wall
        self.now = self.wall_ms()

    def wall_ms(self) -> float:
        return self._wall() * 1000.0

    def __call__(self) -> float:
        return self.now


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sharptype", description="Adaptive typing practice")
    parser.add_argument("--level", choices=[level.value for level in Level], help="start at this level")
    parser.add_argument("--lesson", type=int, help="lesson number within the level (1-based)")
    parser.add_argument("--drill", action="store_true", help="practice your weakest keys")
    parser.add_argument("--length", type=_positive_int, default=config.DEFAULT_PRACTICE_LENGTH, help="drill length")
    parser.add_argument("--progress-file", type=Path, help=f"default: {config.PROGRESS_FILE}")
    parser.add_argument("--reset-progress", action="store_true", help="clear saved progress first")
    parser.add_argument("--verbose", action="store_true")
    return parser


def run(argv: Optional[List[str]] = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run lessons in the terminal until the learner quits or the curriculum ends."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    progress_store = ProgressStore(args.progress_file)
    if args.reset_progress:
        progress_store.reset()
    clock = PacedClock()
    tutor = TypingTutor(CurriculumRepository(), progress_store, clock=clock)
    if args.level:
        tutor.select_level(args.level)
    if args.lesson:
        try:
            tutor.select_lesson(args.lesson - 1)
        except IndexError as e:
            print_fn(str(e))
            return 2

    print_fn(f"=== {config.APP_NAME} ===")
    print_fn("Type the text and press Enter. :r restarts, :n skips, :q quits.")
    try:
        while True:
            if args.drill:
                tutor.start_weak_key_drill(args.length)
                print_fn("\n--- Weak-key drill ---")
            else:
                lesson = tutor.current_lesson
                tutor.start_lesson()
                print_fn(f"\n--- {tutor.current_level.display_name} {tutor.current_lesson_index + 1}: {lesson.title} ---")
                if lesson.description:
                    print_fn(lesson.description)

            result = _type_lesson(tutor, clock, input_fn, print_fn)
            if result is None:
                continue
            _print_result(result, tutor, print_fn)
            if args.drill:
                continue
            if not tutor.next_lesson():
                print_fn("You have finished every lesson. Well done!")
                return 0
    except _Quit:
        return 0
    except (EOFError, KeyboardInterrupt):
        print_fn("")
        return 0
    finally:
        progress_store.save()


def _type_lesson(tutor: TypingTutor, clock: PacedClock, input_fn: InputFn, print_fn: PrintFn) -> Optional[LessonResult]:
    """Collect lines until the text is typed; None when the lesson was restarted or skipped."""
    while True:
        remaining = tutor.current_text[tutor.position:]
        print_fn(remaining)
        clock.now = clock.wall_ms()
        line = input_fn("> ")
        command = line.strip().lower()
        if command in QUIT_COMMANDS:
            raise _Quit()
        if command in RESET_COMMANDS:
            return None
        if command in SKIP_COMMANDS:
            if not tutor.next_lesson():
                raise _Quit()
            return None

        typed = line[: len(remaining)]
        # a line break stands in for the space between chunks
        if len(typed) < len(remaining) and remaining[len(typed)] == " ":
            typed += " "
        started = clock.now
        finished = clock.wall_ms()
        for count, char in enumerate(typed, start=1):
            clock.now = started + (finished - started) * count / len(typed)
            tutor.record_keystroke(char)
        clock.now = finished
        if tutor.position >= len(tutor.current_text):
            return tutor.finish_lesson()
        metrics = tutor.current_metrics()
        print_fn(f"WPM {metrics.wpm}  Accuracy {metrics.accuracy}%  Errors {metrics.errors}")


def _print_result(result: LessonResult, tutor: TypingTutor, print_fn: PrintFn) -> None:
    summary = result.summary
    print_fn("")
    print_fn(f"WPM: {summary.wpm}   Accuracy: {summary.accuracy}%   "
             f"Time: {format_time(summary.total_time_seconds)}   Errors: {summary.errors}")
    if result.celebrate:
        print_fn("*** Great session! ***")
    print_fn(result.feedback)
    for badge in result.new_badges:
        print_fn(f"Badge unlocked: {badge.name} ({badge.description})")
    if result.suggested_level is not tutor.current_level:
        print_fn(f"Tip: try the {result.suggested_level.display_name} level next.")
    weak = tutor.progress_store.weak_keys()
    if weak:
        print_fn("Weak keys: " + " ".join(weak))
    earned = earned_badge_details(tutor.state)
    if earned:
        print_fn("Badges: " + " ".join(badge.name for badge in earned))


def main_entry() -> None:
    raise SystemExit(run())
