from __future__ import annotations

from typing import Protocol, Sequence

from .model import ScoringCondition


class ConditionRepository(Protocol):
    def list_all(self) -> Sequence[ScoringCondition]:
        raise NotImplementedError

    def replace_all(self, conditions: Sequence[ScoringCondition]) -> int:
        """Swap the whole rule table in one write; returns the number stored."""

        raise NotImplementedError
