from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import ScoreType
from ..core.exceptions import ConfigurationError, NoScoringRuleError
from .model import ScoringCondition
from .repository import ConditionRepository
from .validation import validate_condition


class ConditionService:
    """Read-side access to the rule table, validated on every load."""

    def __init__(self, conditions: ConditionRepository):
        self._conditions = conditions

    def list_conditions(self) -> list[ScoringCondition]:
        return [validate_condition(c) for c in self._conditions.list_all()]

    def resolve(self, score_type: ScoreType, with_degree: Optional[bool] = None) -> ScoringCondition:
        matches = [c for c in self._conditions.list_all() if c.matches(score_type, with_degree)]
        if not matches:
            if score_type == ScoreType.HOMEWORK:
                mode = "with" if with_degree else "without"
                raise NoScoringRuleError(f"No scoring condition found for type: homework ({mode} degree)")
            raise NoScoringRuleError(f"No scoring condition found for type: {score_type.value}")
        return validate_condition(matches[0])

    def replace_conditions(self, documents: Sequence[dict[str, Any]]) -> int:
        conditions = [validate_condition(ScoringCondition.from_document(d)) for d in documents]

        seen: set[tuple[ScoreType, Optional[bool]]] = set()
        for c in conditions:
            slot = (c.type, c.with_degree if c.type == ScoreType.HOMEWORK else None)
            if slot in seen:
                raise ConfigurationError(f"Duplicate scoring condition for {c.type.value}")
            seen.add(slot)

        return self._conditions.replace_all(conditions)
