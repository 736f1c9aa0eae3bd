from __future__ import annotations

import json
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ScoringCondition
from .repository import ConditionRepository


class MySQLConditionRepository(ConditionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ScoringCondition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT condition_id, type, with_degree, rules, bonus_rules
                FROM scoring_conditions
                ORDER BY condition_id ASC
                """
            )
            rows = fetchall(cur)
            return [
                ScoringCondition.from_document(
                    {
                        "_id": r["condition_id"],
                        "type": r["type"],
                        "withDegree": None if r.get("with_degree") is None else bool(r["with_degree"]),
                        "rules": _load_json(r.get("rules")),
                        "bonusRules": _load_json(r.get("bonus_rules")),
                    }
                )
                for r in rows
            ]

    def replace_all(self, conditions: Sequence[ScoringCondition]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM scoring_conditions")
            for c in conditions:
                doc = c.to_document()
                cur.execute(
                    """
                    INSERT INTO scoring_conditions(type, with_degree, rules, bonus_rules)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (
                        c.type.value,
                        None if c.with_degree is None else int(c.with_degree),
                        json.dumps(doc["rules"]),
                        json.dumps(doc["bonusRules"]),
                    ),
                )
            return len(conditions)


def _load_json(value) -> list:
    if value is None:
        return []
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value else []
    return list(value)
