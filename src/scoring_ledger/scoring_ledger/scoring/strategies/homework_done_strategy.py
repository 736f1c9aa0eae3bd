from __future__ import annotations

from typing import Optional

from ...conditions.model import KeyRule, ScoringCondition
from ..observations import HomeworkDoneObservation, Observation
from .base import ScoringStrategy


class HomeworkDoneStrategy(ScoringStrategy):
    """Homework without degree: True / "Not Completed" / False."""

    label = "Homework (without degree)"

    def evaluate(self, condition: ScoringCondition, observation: Observation) -> int:
        if not isinstance(observation, HomeworkDoneObservation):
            raise TypeError(f"Homework rules cannot score {type(observation).__name__}")
        value = observation.hw_done
        for rule in condition.rules:
            if not isinstance(rule, KeyRule):
                continue
            # bool == str is never true, so fall back to the string forms.
            if rule.key == value or str(rule.key) == str(value):
                return rule.points
        return 0

    def is_negative_terminal(self, condition: ScoringCondition, observation: Observation) -> bool:
        return isinstance(observation, HomeworkDoneObservation) and observation.hw_done is False

    def describe(self, observation: Optional[Observation]) -> str:
        if isinstance(observation, HomeworkDoneObservation):
            return str(observation.hw_done)
        return "unknown"
