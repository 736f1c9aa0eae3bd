from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .mutator import CascadeOutcome


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of one scoring call; zero points is still a success."""

    success: bool
    points_added: int
    base_points: int
    bonus_points: int
    previous_score: int
    new_score: int
    process_id: Optional[str]
    history_recorded: bool = True
    cascades: tuple[CascadeOutcome, ...] = ()
    message: Optional[str] = None

    @classmethod
    def disabled(cls) -> "ScoreResult":
        return cls(
            success=True,
            points_added=0,
            base_points=0,
            bonus_points=0,
            previous_score=0,
            new_score=0,
            process_id=None,
            history_recorded=False,
            message="Scoring system is disabled",
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "success": self.success,
            "pointsAdded": self.points_added,
            "basePoints": self.base_points,
            "bonusPoints": self.bonus_points,
            "previousScore": self.previous_score,
            "newScore": self.new_score,
            "processId": self.process_id,
            "historyRecorded": self.history_recorded,
        }
        if self.cascades:
            out["autoReversed"] = [c.to_dict() for c in self.cascades]
        if self.message:
            out["message"] = self.message
        return out
