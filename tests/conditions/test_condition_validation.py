import pytest

from src.scoring_ledger.scoring_ledger.conditions.defaults import DEFAULT_CONDITIONS
from src.scoring_ledger.scoring_ledger.conditions.model import ScoringCondition
from src.scoring_ledger.scoring_ledger.conditions.validation import validate_condition
from src.scoring_ledger.scoring_ledger.core.exceptions import ConfigurationError


def _quiz(ranges, bonus_rules=None):
    return ScoringCondition.from_document(
        {
            "type": "quiz",
            "rules": [{"min": lo, "max": hi, "points": pts} for lo, hi, pts in ranges],
            "bonusRules": bonus_rules or [],
        }
    )


def test_default_conditions_are_valid():
    for doc in DEFAULT_CONDITIONS:
        validate_condition(ScoringCondition.from_document(doc))


def test_ranges_with_gap_are_rejected():
    condition = _quiz([(0, 0, -25), (1, 49, 10), (60, 100, 20)])

    with pytest.raises(ConfigurationError, match="gap"):
        validate_condition(condition)


def test_overlapping_ranges_are_rejected():
    condition = _quiz([(0, 50, 5), (50, 100, 20)])

    with pytest.raises(ConfigurationError, match="overlap"):
        validate_condition(condition)


def test_ranges_must_cover_zero_to_hundred():
    with pytest.raises(ConfigurationError):
        validate_condition(_quiz([(1, 100, 10)]))
    with pytest.raises(ConfigurationError):
        validate_condition(_quiz([(0, 99, 10)]))


def test_duplicate_attendance_keys_are_rejected():
    condition = ScoringCondition.from_document(
        {"type": "attendance", "rules": [{"key": "attend", "points": 10}, {"key": "attend", "points": 5}]}
    )

    with pytest.raises(ConfigurationError, match="duplicate"):
        validate_condition(condition)


def test_homework_requires_degree_mode():
    condition = ScoringCondition.from_document({"type": "homework", "rules": [{"hwDone": True, "points": 20}]})

    with pytest.raises(ConfigurationError, match="withDegree"):
        validate_condition(condition)


def test_unknown_hw_done_value_is_rejected():
    condition = ScoringCondition.from_document(
        {"type": "homework", "withDegree": False, "rules": [{"hwDone": "Maybe", "points": 5}]}
    )

    with pytest.raises(ConfigurationError):
        validate_condition(condition)


def test_bonus_rules_need_percentage_rules():
    condition = ScoringCondition.from_document(
        {
            "type": "attendance",
            "rules": [{"key": "attend", "points": 10}],
            "bonusRules": [{"condition": {"lastN": 4, "percentage": 100}, "points": 5}],
        }
    )

    with pytest.raises(ConfigurationError, match="bonus"):
        validate_condition(condition)


def test_malformed_documents_raise_configuration_error():
    with pytest.raises(ConfigurationError):
        ScoringCondition.from_document({"type": "exam", "rules": []})
    with pytest.raises(ConfigurationError):
        ScoringCondition.from_document({"type": "quiz", "rules": [{"min": 0, "points": 1}]})
    with pytest.raises(ConfigurationError):
        ScoringCondition.from_document({"type": "quiz", "rules": [], "bonusRules": [{"points": 5}]})


def test_document_shape_survives_storage():
    doc = DEFAULT_CONDITIONS[1]
    condition = ScoringCondition.from_document(doc)

    out = condition.to_document()

    assert out["type"] == "homework"
    assert out["withDegree"] is True
    assert out["bonusRules"][0]["condition"] == {"lastN": 4, "percentage": 100.0}
    assert ScoringCondition.from_document(out) == condition
