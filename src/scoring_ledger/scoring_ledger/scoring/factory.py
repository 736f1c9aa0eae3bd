from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import ScoreType
from ..core.exceptions import ValidationError
from .strategies.attendance_strategy import AttendanceStrategy
from .strategies.base import ScoringStrategy
from .strategies.homework_done_strategy import HomeworkDoneStrategy
from .strategies.percentage_strategy import PercentageStrategy


def _default_table() -> dict[tuple[ScoreType, Optional[bool]], ScoringStrategy]:
    return {
        (ScoreType.ATTENDANCE, None): AttendanceStrategy(),
        (ScoreType.HOMEWORK, True): PercentageStrategy("Homework (with degree)"),
        (ScoreType.HOMEWORK, False): HomeworkDoneStrategy(),
        (ScoreType.QUIZ, None): PercentageStrategy("Quiz"),
    }


@dataclass
class ScoringStrategyFactory:
    """Factory Pattern: choose the strategy keyed by (type, with_degree)."""

    table: dict[tuple[ScoreType, Optional[bool]], ScoringStrategy] = field(default_factory=_default_table)

    def for_type(self, score_type: ScoreType, with_degree: Optional[bool] = None) -> ScoringStrategy:
        key = (score_type, bool(with_degree) if score_type == ScoreType.HOMEWORK else None)
        strategy = self.table.get(key)
        if strategy is None:
            raise ValidationError(f"Unsupported type: {score_type.value}")
        return strategy
