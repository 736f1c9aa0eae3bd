from __future__ import annotations

from typing import Optional

from ...conditions.model import RangeRule, ScoringCondition
from ..observations import Observation, PercentageObservation
from .base import ScoringStrategy


class PercentageStrategy(ScoringStrategy):
    """Range lookup for quizzes and homework graded with a degree."""

    def __init__(self, label: str):
        self.label = label

    def evaluate(self, condition: ScoringCondition, observation: Observation) -> int:
        if not isinstance(observation, PercentageObservation):
            raise TypeError(f"{self.label} rules cannot score {type(observation).__name__}")
        for rule in condition.rules:
            if isinstance(rule, RangeRule) and rule.contains(observation.percentage):
                return rule.points
        return 0

    def is_negative_terminal(self, condition: ScoringCondition, observation: Observation) -> bool:
        return isinstance(observation, PercentageObservation) and observation.percentage == 0

    def describe(self, observation: Optional[Observation]) -> str:
        if isinstance(observation, PercentageObservation):
            return f"{observation.percentage:g}%"
        return "0%"
