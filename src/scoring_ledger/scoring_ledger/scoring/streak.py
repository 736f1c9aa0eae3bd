from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ..conditions.model import BonusRule, ScoringCondition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BonusGroup:
    rule: BonusRule
    weeks: tuple[int, ...]

    @property
    def points(self) -> int:
        return self.rule.bonus_points


@dataclass(frozen=True)
class StreakResult:
    bonus_points: int = 0
    involved_weeks: tuple[int, ...] = ()
    groups: tuple[BonusGroup, ...] = ()

    @classmethod
    def from_groups(cls, groups: Iterable[BonusGroup]) -> "StreakResult":
        groups = tuple(groups)
        weeks = sorted({w for g in groups for w in g.weeks})
        return cls(
            bonus_points=sum(g.points for g in groups),
            involved_weeks=tuple(weeks),
            groups=groups,
        )

    def without(self, credited_weeks: set[int]) -> "StreakResult":
        """Drop groups whose weeks are all already credited elsewhere."""
        if not credited_weeks:
            return self
        return StreakResult.from_groups(g for g in self.groups if not set(g.weeks) <= credited_weeks)


def compute_bonus(
    condition: ScoringCondition,
    weekly: Mapping[int, float],
    triggering_week: Optional[int] = None,
) -> StreakResult:
    """Award bonus rules over week-anchored groups [1..N], [N+1..2N], ...

    A group qualifies only if every week in it is present and equals the
    rule's percentage exactly. With `triggering_week`, only groups containing
    that week count. Pure: history is never consulted here.
    """
    if not condition.bonus_rules or not weekly:
        return StreakResult()

    max_week = max(weekly)
    groups: list[BonusGroup] = []
    for rule in condition.bonus_rules:
        n = rule.required_consecutive_count
        if len(weekly) < n:
            continue

        for start in range(1, max_week + 1, n):
            weeks = tuple(range(start, start + n))
            if not all(w in weekly and weekly[w] == rule.required_percentage for w in weeks):
                continue
            if triggering_week is not None and triggering_week not in weeks:
                continue
            logger.debug(
                "Bonus (%s streak): +%s points for weeks %s-%s (all %s%%)",
                condition.type.value,
                rule.bonus_points,
                weeks[0],
                weeks[-1],
                rule.required_percentage,
            )
            groups.append(BonusGroup(rule=rule, weeks=weeks))

    return StreakResult.from_groups(groups)
