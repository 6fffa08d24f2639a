from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from sharptype.core.levels import Level
from sharptype.core.metrics import MetricsSnapshot
from sharptype.core.state import EngineState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str


BADGES: Dict[str, Badge] = {
    badge.id: badge
    for badge in (
        Badge("first-lesson", "🎯 First Steps", "Completed your first lesson"),
        Badge("wpm-20", "🚀 20 WPM Club", "Achieved 20 WPM"),
        Badge("wpm-40", "⚡ 40 WPM Club", "Achieved 40 WPM"),
        Badge("wpm-60", "🔥 60 WPM Club", "Achieved 60 WPM"),
        Badge("wpm-80", "💨 80 WPM Club", "Achieved 80 WPM"),
        Badge("accuracy-90", "🎯 Sharp Shooter", "90% accuracy achieved"),
        Badge("accuracy-95", "🏆 Precision Master", "95% accuracy achieved"),
        Badge("perfectionist", "💎 Perfectionist", "100% accuracy on a lesson"),
        Badge("persistent", "💪 Persistent", "Completed 10 lessons"),
        Badge("dedicated", "🌟 Dedicated", "Completed 25 lessons"),
        Badge("master", "👑 Typing Master", "Reached Master level"),
    )
}

SESSION_MILESTONES = ((1, "first-lesson"), (10, "persistent"), (25, "dedicated"))
WPM_MILESTONES = ((20, "wpm-20"), (40, "wpm-40"), (60, "wpm-60"), (80, "wpm-80"))


def get_badge(badge_id: str) -> Optional[Badge]:
    return BADGES.get(badge_id)


def earned_badge_details(state: EngineState) -> List[Badge]:
    """Catalog entries for the earned identifiers; unknown ids are skipped."""
    return [BADGES[badge_id] for badge_id in state.earned_badges if badge_id in BADGES]


def check_for_badges(
    state: EngineState,
    metrics: MetricsSnapshot,
    level: Union[Level, str],
) -> List[str]:
    """Award every badge the session qualifies for and return the new ones.

    Session milestones are matched against ``state.session_count`` exactly,
    so the caller should count the session before checking. A badge already
    in ``state.earned_badges`` is never returned again.
    """
    candidates: List[str] = []
    for count, badge_id in SESSION_MILESTONES:
        if state.session_count == count:
            candidates.append(badge_id)
    for threshold, badge_id in WPM_MILESTONES:
        if metrics.wpm >= threshold:
            candidates.append(badge_id)
    if metrics.accuracy >= 90:
        candidates.append("accuracy-90")
    if metrics.accuracy >= 95:
        candidates.append("accuracy-95")
    if metrics.accuracy == 100:
        candidates.append("perfectionist")
    if Level.parse(level) is Level.MASTER:
        candidates.append("master")

    new_badges = [badge_id for badge_id in candidates if state.award(badge_id)]
    if new_badges:
        logger.info("Unlocked badges: %s", ", ".join(new_badges))
    return new_badges
