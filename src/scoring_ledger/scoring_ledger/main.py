from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .conditions.defaults import DEFAULT_CONDITIONS
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .scoring.controller import register as register_scoring

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        scoring_enabled=bool(getattr(settings, "SCORING_ENABLED", True)),
        default_score=int(getattr(settings, "DEFAULT_STUDENT_SCORE", 10)),
        score_update_attempts=int(getattr(settings, "SCORE_UPDATE_ATTEMPTS", 5)),
        storage_timeout_seconds=int(getattr(settings, "STORAGE_TIMEOUT_SECONDS", 5)),
    )

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        count = container.condition_service.replace_conditions(DEFAULT_CONDITIONS)
        logger.info("seeded %s scoring conditions", count)

    register_scoring(app, container)

    return app
