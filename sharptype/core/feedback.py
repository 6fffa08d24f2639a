from __future__ import annotations

import logging
import random
from typing import Optional

from sharptype import config
from sharptype.core.metrics import MetricsSnapshot
from sharptype.core.state import EngineState

logger = logging.getLogger(__name__)

# Delivered after a run of sessions without real speed change.
CRITICAL_REMARKS = (
    "Omo, you dey slow like snail, try small jare!",
    "Accuracy don fall o, no dull yourself abeg!",
    "No be slack, make those keystrokes sharp sharp!",
    "Your fingers dey sleep? Wake them up make we see fire!",
    "This typing speed no good at all, you fit do better!",
    "Wetin happen to your accuracy? Focus small na!",
    "You dey type like say na first time, sharpen up!",
    "Speed don reduce o, where the energy wey you get before?",
    "Make you no give up now, practice makes perfect!",
    "Your typing game weak, time to level up seriously!",
)

ENCOURAGING_REMARKS = (
    "Sharp! Well done, you're improving steadily!",
    "Excellent progress! Your fingers are getting sharper!",
    "Outstanding accuracy! Keep up the fantastic work!",
    "Impressive speed improvement! You're on fire!",
    "Perfect! Your muscle memory is developing beautifully!",
    "Brilliant typing! You're becoming a true master!",
    "Superb performance! Your dedication is paying off!",
    "Magnificent! Your typing skills are truly sharp!",
    "Exceptional work! You're reaching new heights!",
    "Phenomenal! You've mastered this level completely!",
)

GOOD_MESSAGE = "Good work! Keep practicing to improve your speed."
FAIR_MESSAGE = "Focus on accuracy first, then speed will follow naturally."
SLOW_DOWN_MESSAGE = "Take your time and focus on hitting the right keys."

_default_rng = random.Random()


def generate_feedback_message(
    state: EngineState,
    metrics: MetricsSnapshot,
    improvement: float,
    rng: Optional[random.Random] = None,
) -> str:
    """Pick the message shown after a session and update the session counters.

    Checked in order: a stagnation streak earns a critical remark (and clears
    the streak), then high accuracy or a clear WPM gain earns an encouraging
    remark, then a fixed message chosen by accuracy.
    """
    rng = rng or _default_rng
    state.session_count += 1

    if abs(metrics.wpm - state.last_wpm) < config.STAGNATION_WPM_DELTA:
        state.stagnant_sessions += 1
    else:
        state.stagnant_sessions = 0
    state.last_wpm = metrics.wpm

    if state.stagnant_sessions >= config.STAGNATION_LIMIT:
        logger.debug("Stagnation after %d sessions at %d WPM", state.stagnant_sessions, metrics.wpm)
        state.stagnant_sessions = 0
        return rng.choice(CRITICAL_REMARKS)

    if metrics.accuracy >= config.ENCOURAGE_ACCURACY or improvement > config.ENCOURAGE_IMPROVEMENT:
        return rng.choice(ENCOURAGING_REMARKS)

    if metrics.accuracy >= 85:
        return GOOD_MESSAGE
    if metrics.accuracy >= 70:
        return FAIR_MESSAGE
    return SLOW_DOWN_MESSAGE
