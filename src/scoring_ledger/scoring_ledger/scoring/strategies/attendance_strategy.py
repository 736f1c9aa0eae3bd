from __future__ import annotations

from typing import Optional

from ...conditions.model import KeyRule, ScoringCondition
from ..observations import AttendanceObservation, Observation
from .base import ScoringStrategy


class AttendanceStrategy(ScoringStrategy):
    """Exact match on attendance status; an unknown status scores 0."""

    label = "Attendance"

    def evaluate(self, condition: ScoringCondition, observation: Observation) -> int:
        if not isinstance(observation, AttendanceObservation):
            raise TypeError(f"Attendance rules cannot score {type(observation).__name__}")
        for rule in condition.rules:
            if isinstance(rule, KeyRule) and rule.key == observation.status:
                return rule.points
        return 0

    def is_negative_terminal(self, condition: ScoringCondition, observation: Observation) -> bool:
        # Statuses are admin-defined keys; the penalised ones are the terminal states.
        return self.evaluate(condition, observation) < 0

    def describe(self, observation: Optional[Observation]) -> str:
        if isinstance(observation, AttendanceObservation):
            return observation.status
        return "unknown"
