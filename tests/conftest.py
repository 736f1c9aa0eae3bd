from __future__ import annotations

import threading
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from src.scoring_ledger.scoring_ledger.conditions.defaults import DEFAULT_CONDITIONS
from src.scoring_ledger.scoring_ledger.conditions.model import ScoringCondition
from src.scoring_ledger.scoring_ledger.conditions.service import ConditionService
from src.scoring_ledger.scoring_ledger.core.exceptions import StorageError
from src.scoring_ledger.scoring_ledger.ledger.service import HistoryLedger
from src.scoring_ledger.scoring_ledger.scoring.mutator import ScoreMutator
from src.scoring_ledger.scoring_ledger.scoring.service import ScoringService
from src.scoring_ledger.scoring_ledger.students.model import Student


class FakeConditionsRepo:
    def __init__(self, conditions=None):
        self._conditions = list(conditions or [])

    def list_all(self):
        return list(self._conditions)

    def replace_all(self, conditions):
        self._conditions = list(conditions)
        return len(self._conditions)


class FakeStudentsRepo:
    def __init__(self):
        self._students: dict[int, Student] = {}
        self._weekly: dict[tuple[int, str], dict[int, float]] = {}
        self._lock = threading.Lock()
        self.cas_failures = 0
        self.cas_calls = 0
        # Successful writes left before every write fails; None means unlimited.
        self.cas_budget = None

    def add(self, student_id, score=10, name="Student"):
        self._students[int(student_id)] = Student(student_id=int(student_id), name=name, score=int(score))

    def set_weekly(self, student_id, score_type, weekly):
        self._weekly[(int(student_id), score_type)] = dict(weekly)

    def score_of(self, student_id):
        return self._students[int(student_id)].score

    def get_by_id(self, student_id):
        return self._students.get(int(student_id))

    def get_weekly_percentages(self, student_id, score_type):
        return dict(self._weekly.get((int(student_id), score_type.value), {}))

    def compare_and_set_score(self, student_id, *, expected, new):
        with self._lock:
            self.cas_calls += 1
            if self.cas_failures > 0:
                self.cas_failures -= 1
                return False
            if self.cas_budget is not None:
                if self.cas_budget <= 0:
                    return False
                self.cas_budget -= 1
            current = self._students[int(student_id)]
            if current.score != expected:
                return False
            self._students[int(student_id)] = Student(student_id=current.student_id, name=current.name, score=int(new))
            return True

    def create(self, *, student_id, name, score):
        self.add(student_id, score=score, name=name)


class FakeHistoryRepo:
    def __init__(self, *, fail_appends=False):
        self.entries = []
        self.fail_appends = fail_appends

    def append(self, entry):
        if self.fail_appends:
            raise StorageError("history table unavailable")
        self.entries.append(entry)
        return entry.process_id

    def _newest_first(self, student_id, score_type=None):
        rows = [
            (i, e)
            for i, e in enumerate(self.entries)
            if e.student_id == student_id and (score_type is None or e.type == score_type)
        ]
        rows.sort(key=lambda r: (r[1].timestamp, r[0]), reverse=True)
        return [e for _, e in rows]

    def find_latest(self, *, student_id, score_type, week=None):
        for e in self._newest_first(student_id, score_type):
            if week is None or e.process_week == week:
                return e
        return None

    def list_for_student(self, student_id, *, score_type=None, limit=None):
        rows = self._newest_first(student_id, score_type)
        return rows if limit is None else rows[:limit]


def fixed_clock():
    return datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


def default_conditions():
    return [ScoringCondition.from_document(d) for d in DEFAULT_CONDITIONS]


def build_engine(*, conditions=None, enabled=True, fail_appends=False, max_attempts=5):
    students = FakeStudentsRepo()
    history = FakeHistoryRepo(fail_appends=fail_appends)
    condition_service = ConditionService(FakeConditionsRepo(default_conditions() if conditions is None else conditions))
    ledger = HistoryLedger(history, clock=fixed_clock)
    mutator = ScoreMutator(students, ledger, max_attempts=max_attempts)
    service = ScoringService(condition_service, students, ledger, mutator, enabled=enabled)
    return SimpleNamespace(
        students=students,
        history=history,
        conditions=condition_service,
        ledger=ledger,
        mutator=mutator,
        service=service,
    )


@pytest.fixture
def engine():
    eng = build_engine()
    eng.students.add(1, score=10)
    return eng


@pytest.fixture
def conditions():
    return {(c.type.value, c.with_degree): c for c in default_conditions()}


@pytest.fixture
def make_engine():
    return build_engine
