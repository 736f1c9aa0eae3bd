from __future__ import annotations

from ..core.constants import PERCENTAGE_MAX, PERCENTAGE_MIN
from ..core.enums import HomeworkState, ScoreType
from ..core.exceptions import ConfigurationError
from .model import KeyRule, RangeRule, ScoringCondition

_HW_DONE_KEYS = {"True", "False", HomeworkState.NOT_COMPLETED.value}


def validate_condition(condition: ScoringCondition) -> ScoringCondition:
    """Check a condition's rule table at load time.

    Evaluation never re-checks these invariants, so every condition handed
    to the scoring strategies must pass through here first.
    """
    label = _label(condition)
    if not condition.rules:
        raise ConfigurationError(f"{label}: at least one rule is required")

    if condition.type == ScoreType.HOMEWORK and condition.with_degree is None:
        raise ConfigurationError(f"{label}: homework conditions must set withDegree")

    if condition.is_percentage_based:
        _validate_ranges(condition, label)
    else:
        _validate_keys(condition, label)

    if condition.bonus_rules and not condition.is_percentage_based:
        raise ConfigurationError(f"{label}: bonus rules need percentage-based rules")
    for b in condition.bonus_rules:
        if b.required_consecutive_count < 1:
            raise ConfigurationError(f"{label}: bonus rule needs a consecutive count of at least 1")
        if not PERCENTAGE_MIN <= b.required_percentage <= PERCENTAGE_MAX:
            raise ConfigurationError(f"{label}: bonus percentage out of range")

    return condition


def _validate_ranges(condition: ScoringCondition, label: str) -> None:
    ranges = []
    for r in condition.rules:
        if not isinstance(r, RangeRule):
            raise ConfigurationError(f"{label}: expected only percentage range rules")
        if r.min > r.max:
            raise ConfigurationError(f"{label}: range {r.min}-{r.max} is inverted")
        ranges.append(r)

    ranges.sort(key=lambda r: r.min)
    if ranges[0].min != PERCENTAGE_MIN:
        raise ConfigurationError(f"{label}: ranges must start at {PERCENTAGE_MIN}")
    if ranges[-1].max != PERCENTAGE_MAX:
        raise ConfigurationError(f"{label}: ranges must end at {PERCENTAGE_MAX}")

    for prev, cur in zip(ranges, ranges[1:]):
        if cur.min <= prev.max:
            raise ConfigurationError(f"{label}: ranges {prev.min}-{prev.max} and {cur.min}-{cur.max} overlap")
        if cur.min > prev.max + 1:
            raise ConfigurationError(f"{label}: gap between {prev.max} and {cur.min}")


def _validate_keys(condition: ScoringCondition, label: str) -> None:
    seen: set[str] = set()
    for r in condition.rules:
        if not isinstance(r, KeyRule):
            raise ConfigurationError(f"{label}: expected only key rules")
        key = str(r.key)
        if condition.type == ScoreType.HOMEWORK and key not in _HW_DONE_KEYS:
            raise ConfigurationError(f"{label}: unsupported hwDone value {r.key!r}")
        if key in seen:
            raise ConfigurationError(f"{label}: duplicate rule for key {r.key!r}")
        seen.add(key)


def _label(condition: ScoringCondition) -> str:
    if condition.with_degree is None:
        return f"{condition.type.value} condition"
    mode = "with" if condition.with_degree else "without"
    return f"{condition.type.value} condition ({mode} degree)"
