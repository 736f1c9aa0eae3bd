"""Replace the rule table with the center's default scoring conditions."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.scoring_ledger.scoring_ledger.conditions.defaults import DEFAULT_CONDITIONS
from src.scoring_ledger.scoring_ledger.conditions.mysql_condition_repository import MySQLConditionRepository
from src.scoring_ledger.scoring_ledger.conditions.service import ConditionService
from src.scoring_ledger.scoring_ledger.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    conn = DatabaseConnection.get_instance(
        DBConfig(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
        )
    )
    count = ConditionService(MySQLConditionRepository(conn)).replace_conditions(DEFAULT_CONDITIONS)

    print(
        f"OK: Seeded {count} scoring conditions -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
