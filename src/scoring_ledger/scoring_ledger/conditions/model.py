from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..core.enums import ScoreType
from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class KeyRule:
    """Exact-key rule: an attendance status or a homework-done value."""

    key: Union[str, bool]
    points: int


@dataclass(frozen=True)
class RangeRule:
    """Inclusive percentage range rule."""

    min: float
    max: float
    points: int

    def contains(self, percentage: float) -> bool:
        return self.min <= percentage <= self.max


@dataclass(frozen=True)
class BonusRule:
    required_consecutive_count: int
    required_percentage: float
    bonus_points: int
    key: Optional[str] = None


ScoringRule = Union[KeyRule, RangeRule]


@dataclass(frozen=True)
class ScoringCondition:
    """Rule set for one event type (and, for homework, one degree mode)."""

    type: ScoreType
    rules: tuple[ScoringRule, ...]
    with_degree: Optional[bool] = None
    bonus_rules: tuple[BonusRule, ...] = field(default_factory=tuple)
    condition_id: Optional[str] = None

    @property
    def is_percentage_based(self) -> bool:
        if self.type == ScoreType.QUIZ:
            return True
        return self.type == ScoreType.HOMEWORK and self.with_degree is True

    def matches(self, score_type: ScoreType, with_degree: Optional[bool]) -> bool:
        if self.type != score_type:
            return False
        if score_type == ScoreType.HOMEWORK:
            return bool(self.with_degree) == bool(with_degree)
        return True

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "ScoringCondition":
        """Build a condition from its stored document shape.

        Rules are `{key, points}`, `{hwDone, points}` or `{min, max, points}`;
        bonus rules are `{key, condition: {lastN, percentage}, points}`.
        """
        try:
            score_type = ScoreType(str(doc["type"]))
        except (KeyError, ValueError):
            raise ConfigurationError(f"Unknown condition type: {doc.get('type')!r}")

        with_degree = doc.get("withDegree")
        rules: list[ScoringRule] = []
        for raw in doc.get("rules") or []:
            rules.append(_rule_from_document(raw))

        bonus_rules: list[BonusRule] = []
        for raw in doc.get("bonusRules") or []:
            cond = raw.get("condition") or {}
            try:
                bonus_rules.append(
                    BonusRule(
                        required_consecutive_count=int(cond["lastN"]),
                        required_percentage=float(cond["percentage"]),
                        bonus_points=int(raw["points"]),
                        key=raw.get("key"),
                    )
                )
            except (KeyError, TypeError, ValueError):
                raise ConfigurationError(f"Malformed bonus rule: {raw!r}")

        condition_id = doc.get("_id", doc.get("id"))
        return cls(
            type=score_type,
            rules=tuple(rules),
            with_degree=None if with_degree is None else bool(with_degree),
            bonus_rules=tuple(bonus_rules),
            condition_id=None if condition_id is None else str(condition_id),
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {"type": self.type.value}
        if self.with_degree is not None:
            doc["withDegree"] = self.with_degree

        rules = []
        for r in self.rules:
            if isinstance(r, RangeRule):
                rules.append({"min": r.min, "max": r.max, "points": r.points})
            elif self.type == ScoreType.HOMEWORK:
                rules.append({"hwDone": r.key, "points": r.points})
            else:
                rules.append({"key": r.key, "points": r.points})
        doc["rules"] = rules

        doc["bonusRules"] = [
            {
                "key": b.key,
                "condition": {"lastN": b.required_consecutive_count, "percentage": b.required_percentage},
                "points": b.bonus_points,
            }
            for b in self.bonus_rules
        ]
        if self.condition_id is not None:
            doc["_id"] = self.condition_id
        return doc


def _rule_from_document(raw: dict[str, Any]) -> ScoringRule:
    try:
        points = int(raw["points"])
        if "min" in raw or "max" in raw:
            return RangeRule(min=float(raw["min"]), max=float(raw["max"]), points=points)
        if "hwDone" in raw:
            return KeyRule(key=raw["hwDone"], points=points)
        return KeyRule(key=str(raw["key"]), points=points)
    except (KeyError, TypeError, ValueError):
        raise ConfigurationError(f"Malformed scoring rule: {raw!r}")
