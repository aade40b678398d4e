import os

SECRET_KEY = "test-secret"

DB_BACKEND = os.getenv("DB_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workhours_test"),
}

WORK_TOKEN_HORIZON = "fixed"
WORK_TOKEN_TTL_HOURS = 168
WORK_TOKEN_REFRESH_MARGIN_MINUTES = 10

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
