import pytest

from src.scoring_ledger.scoring_ledger.conditions.defaults import DEFAULT_CONDITIONS
from src.scoring_ledger.scoring_ledger.core.enums import ScoreType
from src.scoring_ledger.scoring_ledger.core.exceptions import ConfigurationError, NoScoringRuleError


def test_resolve_picks_homework_by_degree_mode(make_engine):
    service = make_engine().conditions

    with_degree = service.resolve(ScoreType.HOMEWORK, True)
    without_degree = service.resolve(ScoreType.HOMEWORK, False)

    assert with_degree.with_degree is True
    assert without_degree.with_degree is False


def test_resolve_missing_type_raises(make_engine, conditions):
    service = make_engine(conditions=[conditions[("attendance", None)]]).conditions

    with pytest.raises(NoScoringRuleError, match="homework \\(with degree\\)"):
        service.resolve(ScoreType.HOMEWORK, True)
    with pytest.raises(NoScoringRuleError, match="quiz"):
        service.resolve(ScoreType.QUIZ)


def test_no_scoring_rule_is_a_configuration_error():
    assert issubclass(NoScoringRuleError, ConfigurationError)


def test_replace_conditions_validates_and_stores(make_engine):
    service = make_engine(conditions=[]).conditions

    count = service.replace_conditions(DEFAULT_CONDITIONS)

    assert count == 4
    assert {c.type for c in service.list_conditions()} == set(ScoreType)


def test_replace_conditions_rejects_duplicate_slots(make_engine):
    service = make_engine(conditions=[]).conditions

    with pytest.raises(ConfigurationError, match="Duplicate"):
        service.replace_conditions([DEFAULT_CONDITIONS[0], DEFAULT_CONDITIONS[0]])

    assert service.list_conditions() == []


def test_replace_conditions_rejects_invalid_table(make_engine):
    service = make_engine(conditions=[]).conditions
    broken = {"type": "quiz", "rules": [{"min": 0, "max": 40, "points": 5}, {"min": 50, "max": 100, "points": 20}]}

    with pytest.raises(ConfigurationError):
        service.replace_conditions([broken])
