from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.enums import ScoreType


@dataclass(frozen=True)
class HistoryEntry:
    """One applied scoring event. Never updated; reversals are new entries.

    `base_points`/`bonus_points` hold what this entry credited for its own
    state (negated amounts for a reversal entry), while `score_added` is the
    net change actually applied to the score.
    """

    student_id: int
    process_id: str
    process_name: str
    process_week: Optional[int]
    type: ScoreType
    score_before: int
    score_after: int
    score_added: int
    base_points: int
    bonus_points: int
    timestamp: datetime
    bonus_weeks: tuple[int, ...] = ()
    data: Mapping[str, Any] = field(default_factory=dict)
    reverse_only: bool = False
    reverses: Optional[str] = None
    caused_by: Optional[str] = None

    @property
    def standing_base(self) -> int:
        """Base points still in effect from this entry."""
        return 0 if self.reverse_only else self.base_points

    @property
    def standing_bonus(self) -> int:
        return 0 if self.reverse_only else self.bonus_points

    def to_dict(self) -> dict[str, Any]:
        return {
            "student_id": self.student_id,
            "process_id": self.process_id,
            "process_name": self.process_name,
            "process_week": self.process_week,
            "score_before_process": self.score_before,
            "score_added": self.score_added,
            "score_after_process": self.score_after,
            "type": self.type.value,
            "data": dict(self.data),
            "base_points": self.base_points,
            "bonus_points": self.bonus_points,
            "bonus_weeks": list(self.bonus_weeks),
            "reverse_only": self.reverse_only,
            "reverses": self.reverses,
            "caused_by": self.caused_by,
            "timestamp": self.timestamp.isoformat(),
        }
