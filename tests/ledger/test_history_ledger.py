import dataclasses
import logging
from datetime import datetime, timedelta, timezone

import pytest

from src.scoring_ledger.scoring_ledger.core.enums import ScoreType
from src.scoring_ledger.scoring_ledger.ledger.service import HistoryLedger


def _record(ledger, *, week, added=10, score_type=ScoreType.QUIZ, bonus=0, bonus_weeks=(), reverse_only=False):
    return ledger.record(
        student_id=1,
        score_type=score_type,
        process_id=ledger.new_process_id(1, score_type),
        process_name="Quiz: 80%",
        week=week,
        score_before=10,
        score_after=10 + added,
        score_added=added,
        base_points=added,
        bonus_points=bonus,
        bonus_weeks=bonus_weeks,
        data={"percentage": 80},
        reverse_only=reverse_only,
    )


def test_find_last_prefers_exact_week_then_any_week(engine):
    ledger = engine.ledger
    week1 = _record(ledger, week=1)
    week2 = _record(ledger, week=2)

    assert ledger.find_last(1, ScoreType.QUIZ, 1) == week1
    assert ledger.find_last(1, ScoreType.QUIZ, 3) == week2
    assert ledger.find_last(1, ScoreType.QUIZ) == week2
    assert ledger.find_last(1, ScoreType.HOMEWORK) is None


def test_find_for_week_has_no_fallback(engine):
    _record(engine.ledger, week=1)

    assert engine.ledger.find_for_week(1, ScoreType.QUIZ, 2) is None
    assert engine.ledger.find_for_week(1, ScoreType.QUIZ, None) is None


def test_latest_entry_for_a_week_wins(engine):
    _record(engine.ledger, week=1, added=10)
    latest = _record(engine.ledger, week=1, added=-10, reverse_only=True)

    assert engine.ledger.find_last(1, ScoreType.QUIZ, 1) == latest
    assert latest.standing_base == 0


def test_timestamps_strictly_increase_with_a_stalled_clock(engine):
    entries = [_record(engine.ledger, week=1) for _ in range(3)]

    stamps = [e.timestamp for e in entries]
    assert stamps == sorted(stamps)
    assert len(set(stamps)) == 3
    assert stamps[0] == datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


def test_entries_are_immutable(engine):
    entry = _record(engine.ledger, week=1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.score_added = 99
    with pytest.raises(TypeError):
        entry.data["percentage"] = 0


def test_history_is_newest_first_and_limited(engine):
    for week in range(1, 6):
        _record(engine.ledger, week=week)

    rows = engine.ledger.history(1, limit=3)

    assert [e.process_week for e in rows] == [5, 4, 3]


def test_credited_bonus_weeks_ignores_excluded_and_reversed_weeks(engine):
    _record(engine.ledger, week=4, bonus=25, bonus_weeks=(1, 2, 3, 4))
    _record(engine.ledger, week=8, bonus=25, bonus_weeks=(5, 6, 7, 8))
    _record(engine.ledger, week=8, added=-10, bonus=-25, bonus_weeks=(5, 6, 7, 8), reverse_only=True)

    assert engine.ledger.credited_bonus_weeks(1, ScoreType.QUIZ, exclude_week=None) == {1, 2, 3, 4}
    assert engine.ledger.credited_bonus_weeks(1, ScoreType.QUIZ, exclude_week=4) == set()


def test_process_ids_are_unique(engine):
    ids = {engine.ledger.new_process_id(1, ScoreType.ATTENDANCE) for _ in range(50)}

    assert len(ids) == 50
    assert all(pid.startswith("1_attendance_") for pid in ids)
    assert "_auto_reverse_" in engine.ledger.new_process_id(1, ScoreType.QUIZ, tag="auto_reverse")


def test_record_failure_is_logged_not_raised(make_engine, caplog):
    eng = make_engine(fail_appends=True)

    with caplog.at_level(logging.ERROR):
        entry = _record(eng.ledger, week=1)

    assert entry is None
    assert "Failed to save scoring history" in caplog.text


def test_to_dict_uses_stored_field_names(engine):
    entry = _record(engine.ledger, week=3)

    out = entry.to_dict()

    assert out["score_before_process"] == 10
    assert out["score_after_process"] == 20
    assert out["type"] == "quiz"
    assert out["data"] == {"percentage": 80}


def test_timestamp_cache_drops_students_the_clock_has_passed():
    ticks = iter(range(10_000))
    start = datetime(2026, 3, 2, tzinfo=timezone.utc)
    ledger = HistoryLedger(None, clock=lambda: start + timedelta(seconds=next(ticks)))

    for sid in range(1, 1100):
        ledger.next_timestamp(sid)

    assert len(ledger._last_ts) < 1024
    first = ledger.next_timestamp(5)
    assert ledger.next_timestamp(5) > first
