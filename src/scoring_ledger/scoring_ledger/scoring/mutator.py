from __future__ import annotations

import logging
import threading
import weakref
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from ..core.constants import AUTO_REVERSED_BY_ATTENDANCE, DEFAULT_SCORE_UPDATE_ATTEMPTS
from ..core.enums import ScoreType
from ..core.exceptions import NotFoundError, StorageError
from ..ledger.service import HistoryLedger
from ..students.repository import StudentRepository

logger = logging.getLogger(__name__)

_DEPENDENT_LABELS = {
    ScoreType.HOMEWORK: "Homework",
    ScoreType.QUIZ: "Quiz",
}


@dataclass(frozen=True)
class CascadeOutcome:
    type: ScoreType
    process_id: str
    reversed_process_id: str
    points: int
    score_before: int
    score_after: int
    history_recorded: bool

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "processId": self.process_id,
            "reversedProcessId": self.reversed_process_id,
            "pointsAdded": self.points,
            "previousScore": self.score_before,
            "newScore": self.score_after,
            "historyRecorded": self.history_recorded,
        }


@dataclass(frozen=True)
class CascadeReport:
    outcomes: tuple[CascadeOutcome, ...] = ()
    failed: tuple[ScoreType, ...] = ()


class ScoreMutator:
    """The only writer of a student's score.

    Mutations for one student are serialized in-process with a per-student
    re-entrant lock; the store write is a compare-and-set so writers in
    other processes cannot lose an update either.
    """

    def __init__(
        self,
        students: StudentRepository,
        ledger: HistoryLedger,
        *,
        max_attempts: int = DEFAULT_SCORE_UPDATE_ATTEMPTS,
    ):
        self._students = students
        self._ledger = ledger
        self._max_attempts = max(1, int(max_attempts))
        # Entries live only while some caller holds the lock object.
        self._locks: weakref.WeakValueDictionary[int, threading.RLock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, student_id: int) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(student_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[student_id] = lock
            return lock

    @contextmanager
    def locked(self, student_id: int) -> Iterator[None]:
        lock = self._lock_for(student_id)
        with lock:
            yield

    def apply(self, student_id: int, net_base: int, net_bonus: int) -> tuple[int, int]:
        """Add base + bonus to the stored score, floored at zero."""
        with self.locked(student_id):
            for _ in range(self._max_attempts):
                student = self._students.get_by_id(student_id)
                if student is None:
                    raise NotFoundError(f"Student {student_id} not found")

                before = int(student.score)
                after = max(0, before + int(net_base) + int(net_bonus))
                if after == before:
                    return before, after
                if self._students.compare_and_set_score(student_id, expected=before, new=after):
                    logger.info("Student %s: %s -> %s (%+d points)", student_id, before, after, after - before)
                    return before, after
                logger.warning("Score for student %s changed concurrently; retrying", student_id)

        raise StorageError(f"Could not update score for student {student_id} after {self._max_attempts} attempts")

    def reverse_dependents(
        self,
        student_id: int,
        week: int,
        *,
        caused_by: Optional[str],
        reverse_homework: bool = True,
        reverse_quiz: bool = True,
    ) -> CascadeReport:
        """Undo homework/quiz points of `week` after its attendance was reversed.

        Each type commits on its own. A storage failure on one type is logged
        and reported in `failed`; reversals already committed stay in
        `outcomes`.
        """
        targets = []
        if reverse_homework:
            targets.append(ScoreType.HOMEWORK)
        if reverse_quiz:
            targets.append(ScoreType.QUIZ)

        outcomes: list[CascadeOutcome] = []
        failed: list[ScoreType] = []
        with self.locked(student_id):
            for score_type in targets:
                try:
                    outcome = self._reverse_week(student_id, score_type, week, caused_by=caused_by)
                except StorageError:
                    logger.exception("Auto-reverse of %s failed for student %s week %s", score_type.value, student_id, week)
                    failed.append(score_type)
                    continue
                if outcome is not None:
                    outcomes.append(outcome)
        return CascadeReport(outcomes=tuple(outcomes), failed=tuple(failed))

    def _reverse_week(
        self,
        student_id: int,
        score_type: ScoreType,
        week: int,
        *,
        caused_by: Optional[str],
    ) -> Optional[CascadeOutcome]:
        entry = self._ledger.find_for_week(student_id, score_type, week)
        if entry is None or (entry.standing_base == 0 and entry.standing_bonus == 0):
            return None

        base = -entry.standing_base
        bonus = -entry.standing_bonus
        before, after = self.apply(student_id, base, bonus)

        label = _DEPENDENT_LABELS[score_type]
        process_id = self._ledger.new_process_id(student_id, score_type, tag="auto_reverse")
        recorded = self._ledger.record(
            student_id=student_id,
            score_type=score_type,
            process_id=process_id,
            process_name=f"{label} (auto-reverse from attendance): {_describe(entry.data)}",
            week=week,
            score_before=before,
            score_after=after,
            score_added=base + bonus,
            base_points=base,
            bonus_points=bonus,
            bonus_weeks=entry.bonus_weeks if bonus else (),
            data={**entry.data, "reverseOnly": True, "autoReversedBy": AUTO_REVERSED_BY_ATTENDANCE},
            reverse_only=True,
            reverses=entry.process_id,
            caused_by=caused_by,
        )
        logger.info(
            "Auto-reversed %s for week %s: %s -> %s (%+d points)",
            score_type.value,
            week,
            before,
            after,
            base + bonus,
        )
        return CascadeOutcome(
            type=score_type,
            process_id=process_id,
            reversed_process_id=entry.process_id,
            points=base + bonus,
            score_before=before,
            score_after=after,
            history_recorded=recorded is not None,
        )


def _describe(data) -> str:
    if data.get("hwDone") is not None:
        return str(data["hwDone"])
    return f"{float(data.get('percentage') or 0):g}%"
