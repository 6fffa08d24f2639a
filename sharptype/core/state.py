from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class EngineState:
    """Counters that outlive a single session: feedback history and earned badges.

    Owned by the host and passed to the feedback and badge functions, so
    independent tutors in one process never share counters.
    """

    session_count: int = 0
    stagnant_sessions: int = 0
    last_wpm: int = 0
    earned_badges: List[str] = field(default_factory=list)

    def has_badge(self, badge_id: str) -> bool:
        return badge_id in self.earned_badges

    def award(self, badge_id: str) -> bool:
        """Record a badge; False when it was already earned."""
        if badge_id in self.earned_badges:
            return False
        self.earned_badges.append(badge_id)
        return True
