from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import ScoreType
from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_weekly_percentages(self, student_id: int, score_type: ScoreType) -> dict[int, float]:
        """Week number -> percentage for graded weeks of the given type."""

        raise NotImplementedError

    def compare_and_set_score(self, student_id: int, *, expected: int, new: int) -> bool:
        """Write `new` only if the stored score still equals `expected`."""

        raise NotImplementedError

    def create(self, *, student_id: int, name: str, score: int) -> None:
        raise NotImplementedError
