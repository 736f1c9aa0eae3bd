from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import epoch_millis, now_utc
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import ScoreType
from ..core.exceptions import StorageError
from .model import HistoryEntry
from .repository import HistoryRepository

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)
_TIMESTAMP_CACHE_SIZE = 1024


class HistoryLedger:
    """Append-only record of every score mutation.

    Lookups return None for "not found"; storage failures propagate as
    StorageError. Only `record` is best-effort.
    """

    def __init__(self, history: HistoryRepository, *, clock: Callable[[], datetime] = now_utc):
        self._history = history
        self._clock = clock
        self._last_ts: dict[int, datetime] = {}
        self._guard = threading.Lock()

    def new_process_id(self, student_id: int, score_type: ScoreType, *, tag: Optional[str] = None) -> str:
        parts = [str(student_id), score_type.value]
        if tag:
            parts.append(tag)
        parts.append(str(epoch_millis(self._clock())))
        parts.append(uuid.uuid4().hex[:9])
        return "_".join(parts)

    def next_timestamp(self, student_id: int) -> datetime:
        """Strictly increasing per student, even when the clock stalls."""
        with self._guard:
            now = self._clock()
            last = self._last_ts.get(student_id)
            ts = last + _TICK if last is not None and now <= last else now
            if len(self._last_ts) >= _TIMESTAMP_CACHE_SIZE:
                # Entries the clock has already passed cannot collide again.
                self._last_ts = {sid: t for sid, t in self._last_ts.items() if t >= now}
            self._last_ts[student_id] = ts
            return ts

    def append(self, entry: HistoryEntry) -> str:
        return self._history.append(entry)

    def find_last(self, student_id: int, score_type: ScoreType, week: Optional[int] = None) -> Optional[HistoryEntry]:
        """Most recent entry, preferring an exact week match over any week."""
        if week is not None:
            entry = self._history.find_latest(student_id=student_id, score_type=score_type, week=week)
            if entry is not None:
                return entry
        return self._history.find_latest(student_id=student_id, score_type=score_type, week=None)

    def find_for_week(self, student_id: int, score_type: ScoreType, week: Optional[int]) -> Optional[HistoryEntry]:
        if week is None:
            return None
        return self._history.find_latest(student_id=student_id, score_type=score_type, week=week)

    def history(
        self,
        student_id: int,
        *,
        score_type: Optional[ScoreType] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[HistoryEntry]:
        return self._history.list_for_student(student_id, score_type=score_type, limit=limit)

    def credited_bonus_weeks(self, student_id: int, score_type: ScoreType, *, exclude_week: Optional[int]) -> set[int]:
        """Weeks covered by bonuses still standing on entries of other weeks."""
        latest_by_week: dict[Optional[int], HistoryEntry] = {}
        for entry in self._history.list_for_student(student_id, score_type=score_type):
            latest_by_week.setdefault(entry.process_week, entry)

        weeks: set[int] = set()
        for week, entry in latest_by_week.items():
            if week is not None and week == exclude_week:
                continue
            if entry.standing_bonus:
                weeks.update(entry.bonus_weeks)
        return weeks

    def record(
        self,
        *,
        student_id: int,
        score_type: ScoreType,
        process_id: str,
        process_name: str,
        week: Optional[int],
        score_before: int,
        score_after: int,
        score_added: int,
        base_points: int,
        bonus_points: int = 0,
        bonus_weeks: Iterable[int] = (),
        data: Optional[Mapping[str, Any]] = None,
        reverse_only: bool = False,
        reverses: Optional[str] = None,
        caused_by: Optional[str] = None,
    ) -> Optional[HistoryEntry]:
        """Build and store an entry; returns None if the write failed.

        A failed write never undoes the score change it describes, so the
        failure is logged with the full entry for later reconciliation.
        """
        entry = HistoryEntry(
            student_id=student_id,
            process_id=process_id,
            process_name=process_name,
            process_week=week,
            type=score_type,
            score_before=score_before,
            score_after=score_after,
            score_added=score_added,
            base_points=base_points,
            bonus_points=bonus_points,
            timestamp=self.next_timestamp(student_id),
            bonus_weeks=tuple(sorted(set(bonus_weeks))),
            data=MappingProxyType(dict(data or {})),
            reverse_only=reverse_only,
            reverses=reverses,
            caused_by=caused_by,
        )
        try:
            self.append(entry)
        except StorageError:
            logger.exception("Failed to save scoring history %s: %s", entry.process_id, entry.to_dict())
            return None

        logger.debug("History saved: %s", entry.process_id)
        return entry
