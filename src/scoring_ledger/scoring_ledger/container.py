from __future__ import annotations

from dataclasses import dataclass

from .conditions.mysql_condition_repository import MySQLConditionRepository
from .conditions.service import ConditionService
from .core.constants import (
    DEFAULT_SCORE_UPDATE_ATTEMPTS,
    DEFAULT_STORAGE_TIMEOUT_SECONDS,
    DEFAULT_STUDENT_SCORE,
)
from .database.connection import DBConfig, DatabaseConnection
from .ledger.mysql_history_repository import MySQLHistoryRepository
from .ledger.service import HistoryLedger
from .scoring.factory import ScoringStrategyFactory
from .scoring.mutator import ScoreMutator
from .scoring.service import ScoringService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    conditions_repo: MySQLConditionRepository
    students_repo: MySQLStudentRepository
    history_repo: MySQLHistoryRepository

    condition_service: ConditionService
    student_service: StudentService
    ledger: HistoryLedger
    mutator: ScoreMutator
    scoring_service: ScoringService


def build_container(
    *,
    db_config: dict,
    scoring_enabled: bool = True,
    default_score: int = DEFAULT_STUDENT_SCORE,
    score_update_attempts: int = DEFAULT_SCORE_UPDATE_ATTEMPTS,
    storage_timeout_seconds: int = DEFAULT_STORAGE_TIMEOUT_SECONDS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        timeout_seconds=int(storage_timeout_seconds),
    )
    conn = DatabaseConnection.get_instance(config)

    conditions_repo = MySQLConditionRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    history_repo = MySQLHistoryRepository(conn)

    condition_service = ConditionService(conditions_repo)
    student_service = StudentService(
        students_repo,
        scoring_enabled=scoring_enabled,
        default_score=default_score,
    )
    ledger = HistoryLedger(history_repo)
    mutator = ScoreMutator(students_repo, ledger, max_attempts=score_update_attempts)
    scoring_service = ScoringService(
        condition_service,
        students_repo,
        ledger,
        mutator,
        strategy_factory=ScoringStrategyFactory(),
        enabled=scoring_enabled,
    )

    return Container(
        conn=conn,
        conditions_repo=conditions_repo,
        students_repo=students_repo,
        history_repo=history_repo,
        condition_service=condition_service,
        student_service=student_service,
        ledger=ledger,
        mutator=mutator,
        scoring_service=scoring_service,
    )
