import pytest

from src.scoring_ledger.scoring_ledger.common.validators import (
    optional_hw_done,
    optional_limit,
    optional_percentage,
    optional_week,
    require_score_type,
    require_student_id,
)
from src.scoring_ledger.scoring_ledger.core.enums import ScoreType
from src.scoring_ledger.scoring_ledger.core.exceptions import ValidationError


def test_student_id_and_type():
    assert require_student_id("7") == 7
    assert require_score_type("Quiz") == ScoreType.QUIZ

    for bad in (None, "", "abc", 0):
        with pytest.raises(ValidationError):
            require_student_id(bad)
    with pytest.raises(ValidationError, match="Unsupported type"):
        require_score_type("exam")


def test_week_must_be_positive():
    assert optional_week(None) is None
    assert optional_week("3") == 3
    with pytest.raises(ValidationError):
        optional_week(0)


def test_percentage_bounds():
    assert optional_percentage("75", "percentage") == 75.0
    with pytest.raises(ValidationError):
        optional_percentage(101, "percentage")
    with pytest.raises(ValidationError):
        optional_percentage(True, "percentage")


def test_hw_done_values():
    assert optional_hw_done("true", "hwDone") is True
    assert optional_hw_done(False, "hwDone") is False
    assert optional_hw_done("Not Completed", "hwDone") == "Not Completed"
    with pytest.raises(ValidationError):
        optional_hw_done("done", "hwDone")


def test_percentage_rounds_half_up_to_whole():
    assert optional_percentage(99.5, "percentage") == 100
    assert optional_percentage("74.4", "percentage") == 74
    assert optional_percentage(0.5, "percentage") == 1


def test_limit():
    assert optional_limit(None) == 50
    assert optional_limit("5") == 5
    with pytest.raises(ValidationError):
        optional_limit(0)
