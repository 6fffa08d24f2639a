from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml

from sharptype.core.levels import Level


@dataclass(frozen=True)
class Lesson:
    id: str
    title: str
    description: str
    text: str
    level: Level


class CurriculumRepository:
    """Lessons grouped by level, read from ``data/curriculum/<level>.yaml``."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = base_dir or Path(__file__).resolve().parent.parent / "data" / "curriculum"
        self._lessons = self._load_lessons()

    def levels(self) -> List[Level]:
        return [level for level in Level.ordered() if level in self._lessons]

    def lessons(self, level: Union[Level, str]) -> List[Lesson]:
        return list(self._lessons.get(Level.parse(level), []))

    def get(self, level: Union[Level, str], index: int) -> Lesson:
        lessons = self._lessons.get(Level.parse(level), [])
        if not 0 <= index < len(lessons):
            raise IndexError(f"No lesson {index} in level {Level.parse(level).value}")
        return lessons[index]

    def next_position(self, level: Union[Level, str], index: int) -> Optional[Tuple[Level, int]]:
        """Position after ``(level, index)``: the next lesson, else the next level's first.

        Returns None after the last lesson of the hardest level.
        """
        level = Level.parse(level)
        if index + 1 < len(self._lessons.get(level, [])):
            return level, index + 1
        for candidate in Level.ordered()[level.rank + 1:]:
            if self._lessons.get(candidate):
                return candidate, 0
        return None

    def _load_lessons(self) -> Dict[Level, List[Lesson]]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Curriculum directory not found: {self._base_dir}")

        lessons: Dict[Level, List[Lesson]] = {}
        for level in Level.ordered():
            path = self._base_dir / f"{level.value}.yaml"
            if not path.exists():
                continue
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{path.name}: expected YAML with a 'lessons' list")
            items = raw.get("lessons")
            if not isinstance(items, list) or not items:
                raise ValueError(f"{path.name}: missing or empty 'lessons'")
            parsed = []
            for position, item in enumerate(items):
                if not isinstance(item, dict):
                    raise ValueError(f"{path.name}: lesson {position} is not a mapping")
                lesson_id = str(item.get("id") or "").strip()
                text = str(item.get("text") or "").strip()
                if not lesson_id:
                    raise ValueError(f"{path.name}: lesson {position} has no 'id'")
                if not text:
                    raise ValueError(f"{path.name}: lesson '{lesson_id}' has no 'text'")
                parsed.append(
                    Lesson(
                        id=lesson_id,
                        title=str(item.get("title") or lesson_id).strip(),
                        description=str(item.get("description") or "").strip(),
                        # folded YAML keeps single spaces; collapse any stray runs
                        text=" ".join(text.split()),
                        level=level,
                    )
                )
            lessons[level] = parsed

        if not lessons:
            raise ValueError(f"No curriculum files (<level>.yaml) found in {self._base_dir}")
        return lessons
