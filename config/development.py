import os

from config import env_flag

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "scoring_db"),
}

# Master switch: when off, scoring calls succeed with zero points and new students start at 0.
SCORING_ENABLED = env_flag("SYSTEM_SCORING_SYSTEM", "true")
DEFAULT_STUDENT_SCORE = int(os.getenv("DEFAULT_STUDENT_SCORE", "10"))

STORAGE_TIMEOUT_SECONDS = int(os.getenv("STORAGE_TIMEOUT_SECONDS", "5"))
SCORE_UPDATE_ATTEMPTS = int(os.getenv("SCORE_UPDATE_ATTEMPTS", "5"))

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the default scoring conditions on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
