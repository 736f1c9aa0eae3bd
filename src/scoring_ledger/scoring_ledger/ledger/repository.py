from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ScoreType
from .model import HistoryEntry


class HistoryRepository(Protocol):
    def append(self, entry: HistoryEntry) -> str:
        """Store the entry as-is and return its process id."""

        raise NotImplementedError

    def find_latest(
        self,
        *,
        student_id: int,
        score_type: ScoreType,
        week: Optional[int] = None,
    ) -> Optional[HistoryEntry]:
        """Newest entry for (student, type); `week=None` means any week."""

        raise NotImplementedError

    def list_for_student(
        self,
        student_id: int,
        *,
        score_type: Optional[ScoreType] = None,
        limit: Optional[int] = None,
    ) -> Sequence[HistoryEntry]:
        """Entries newest first."""

        raise NotImplementedError
