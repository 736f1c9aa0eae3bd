from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...conditions.model import ScoringCondition
from ...ledger.model import HistoryEntry
from ..observations import Observation


@dataclass(frozen=True)
class DeltaDecision:
    net_points: int
    base_points: int


class ScoringStrategy(ABC):
    """Strategy Pattern: how one event type turns observations into points.

    Subclasses only evaluate rules and name their negative terminal state;
    the transition policy in `compute_delta` is shared by every type.
    """

    label: str = ""

    @abstractmethod
    def evaluate(self, condition: ScoringCondition, observation: Observation) -> int:
        raise NotImplementedError

    @abstractmethod
    def is_negative_terminal(self, condition: ScoringCondition, observation: Observation) -> bool:
        raise NotImplementedError

    @abstractmethod
    def describe(self, observation: Optional[Observation]) -> str:
        raise NotImplementedError

    def process_name(self, observation: Optional[Observation]) -> str:
        return f"{self.label}: {self.describe(observation)}"

    def compute_delta(
        self,
        condition: ScoringCondition,
        current: Optional[Observation],
        previous: Optional[Observation],
        *,
        reverse_only: bool = False,
        recorded: Optional[HistoryEntry] = None,
    ) -> DeltaDecision:
        """Net points for moving from `previous` to `current`.

        `recorded` is the ledger entry for the previous state; when given, the
        points it still has standing replace both the rule-table lookup and
        the negative-terminal check on `previous`.
        """
        if reverse_only and previous is not None:
            if recorded is not None:
                undo = -recorded.standing_base
            else:
                undo = -self.evaluate(condition, previous)
            return DeltaDecision(net_points=undo, base_points=undo)

        if current is None:
            return DeltaDecision(net_points=0, base_points=0)

        standing = self._standing_points(condition, previous, recorded)

        # The penalty never applies on a first record or on a regression.
        if self.is_negative_terminal(condition, current):
            return DeltaDecision(net_points=-standing, base_points=0)

        new_points = self.evaluate(condition, current)
        return DeltaDecision(net_points=new_points - standing, base_points=new_points)

    def _standing_points(
        self,
        condition: ScoringCondition,
        previous: Optional[Observation],
        recorded: Optional[HistoryEntry],
    ) -> int:
        """Points the previous state still holds on the score."""
        if recorded is not None:
            return recorded.standing_base
        if previous is None or self.is_negative_terminal(condition, previous):
            return 0
        return self.evaluate(condition, previous)
