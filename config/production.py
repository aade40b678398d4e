import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_BACKEND = os.getenv("DB_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workhours_db"),
}

WORK_TOKEN_HORIZON = os.getenv("WORK_TOKEN_HORIZON", "fixed")
WORK_TOKEN_TTL_HOURS = int(os.getenv("WORK_TOKEN_TTL_HOURS", "168"))
WORK_TOKEN_REFRESH_MARGIN_MINUTES = int(os.getenv("WORK_TOKEN_REFRESH_MARGIN_MINUTES", "10"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
