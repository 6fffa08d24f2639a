from __future__ import annotations

from enum import Enum
from typing import List, Union

from sharptype import config


class Level(str, Enum):
    """Difficulty levels, declared from easiest to hardest."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    MASTER = "master"

    @classmethod
    def ordered(cls) -> List["Level"]:
        return list(cls)

    @classmethod
    def parse(cls, value: Union["Level", str]) -> "Level":
        """Accept a Level or its name (case-insensitive); raise ValueError otherwise."""
        if isinstance(value, Level):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown level: {value!r}") from None

    @property
    def rank(self) -> int:
        return Level.ordered().index(self)

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def next(self) -> "Level":
        """One step harder; master stays master."""
        levels = Level.ordered()
        return levels[min(self.rank + 1, len(levels) - 1)]

    def previous(self) -> "Level":
        """One step easier; beginner stays beginner."""
        return Level.ordered()[max(self.rank - 1, 0)]


def adjust_difficulty(accuracy: float, current_level: Union[Level, str]) -> Level:
    """Suggest the level that keeps accuracy inside the target band.

    Above the band the learner moves up one level, below it down one level,
    inside it (bounds included) the level is unchanged.
    """
    level = Level.parse(current_level)
    if accuracy > config.TARGET_ACCURACY_MAX:
        return level.next()
    if accuracy < config.TARGET_ACCURACY_MIN:
        return level.previous()
    return level
