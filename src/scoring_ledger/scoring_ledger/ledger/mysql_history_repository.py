from __future__ import annotations

import json
from datetime import timezone
from typing import Any, Optional, Sequence

from ..core.enums import ScoreType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import HistoryEntry
from .repository import HistoryRepository

_COLUMNS = """
    process_id, student_id, process_name, process_week, type,
    score_before, score_after, score_added, base_points, bonus_points,
    bonus_weeks, data, reverse_only, reverses, caused_by, created_at
"""


class MySQLHistoryRepository(HistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: HistoryEntry) -> str:
        ts = entry.timestamp
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc).replace(tzinfo=None)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO scoring_history({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.process_id,
                    entry.student_id,
                    entry.process_name,
                    entry.process_week,
                    entry.type.value,
                    entry.score_before,
                    entry.score_after,
                    entry.score_added,
                    entry.base_points,
                    entry.bonus_points,
                    json.dumps(list(entry.bonus_weeks)),
                    json.dumps(dict(entry.data), default=str),
                    int(entry.reverse_only),
                    entry.reverses,
                    entry.caused_by,
                    ts,
                ),
            )
        return entry.process_id

    def find_latest(
        self,
        *,
        student_id: int,
        score_type: ScoreType,
        week: Optional[int] = None,
    ) -> Optional[HistoryEntry]:
        clauses = ["student_id=%s", "type=%s"]
        params: list[object] = [int(student_id), score_type.value]
        if week is not None:
            clauses.append("process_week=%s")
            params.append(int(week))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM scoring_history
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at DESC, history_id DESC
                LIMIT 1
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_student(
        self,
        student_id: int,
        *,
        score_type: Optional[ScoreType] = None,
        limit: Optional[int] = None,
    ) -> Sequence[HistoryEntry]:
        clauses = ["student_id=%s"]
        params: list[object] = [int(student_id)]
        if score_type is not None:
            clauses.append("type=%s")
            params.append(score_type.value)

        sql = f"""
            SELECT {_COLUMNS}
            FROM scoring_history
            WHERE {" AND ".join(clauses)}
            ORDER BY created_at DESC, history_id DESC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_entry(r) for r in fetchall(cur)]


def _load_json(value: Any, default):
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value else default
    return value


def _to_entry(r: dict) -> HistoryEntry:
    ts = r["created_at"]
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return HistoryEntry(
        student_id=int(r["student_id"]),
        process_id=r["process_id"],
        process_name=r.get("process_name") or "",
        process_week=None if r.get("process_week") is None else int(r["process_week"]),
        type=ScoreType(r["type"]),
        score_before=int(r["score_before"]),
        score_after=int(r["score_after"]),
        score_added=int(r["score_added"]),
        base_points=int(r["base_points"]),
        bonus_points=int(r["bonus_points"]),
        timestamp=ts,
        bonus_weeks=tuple(int(w) for w in _load_json(r.get("bonus_weeks"), [])),
        data=_load_json(r.get("data"), {}),
        reverse_only=bool(r.get("reverse_only")),
        reverses=r.get("reverses"),
        caused_by=r.get("caused_by"),
    )
