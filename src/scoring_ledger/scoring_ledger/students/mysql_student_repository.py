from __future__ import annotations

from typing import Optional

from ..common.degree import parse_degree
from ..core.constants import QUIZ_ABSENT_MARKERS
from ..core.enums import ScoreType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id, name, score FROM students WHERE student_id=%s",
                (int(student_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Student(student_id=int(r["student_id"]), name=r["name"], score=int(r["score"] or 0))

    def get_weekly_percentages(self, student_id: int, score_type: ScoreType) -> dict[int, float]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT week, source, degree
                FROM student_weekly_results
                WHERE student_id=%s AND type=%s
                ORDER BY week ASC
                """,
                (int(student_id), score_type.value),
            )
            rows = fetchall(cur)

        # In-center degrees first; online results for the same week take precedence.
        weekly: dict[int, float] = {}
        for source in ("center", "online"):
            for r in rows:
                if r["source"] != source:
                    continue
                degree = r.get("degree")
                if degree in QUIZ_ABSENT_MARKERS:
                    continue
                pct = parse_degree(degree)
                if pct is None:
                    continue
                weekly[int(r["week"])] = pct
        return weekly

    def compare_and_set_score(self, student_id: int, *, expected: int, new: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET score=%s WHERE student_id=%s AND score=%s",
                (int(new), int(student_id), int(expected)),
            )
            return cur.rowcount > 0

    def create(self, *, student_id: int, name: str, score: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO students(student_id, name, score) VALUES(%s,%s,%s)",
                (int(student_id), name, int(score)),
            )
