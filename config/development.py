import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "mysql" or "memory" (process-local, data lost on restart)
DB_BACKEND = os.getenv("DB_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workhours_db"),
}

# Work-hours QR tokens
WORK_TOKEN_HORIZON = os.getenv("WORK_TOKEN_HORIZON", "fixed")  # "fixed" or "event_end"
WORK_TOKEN_TTL_HOURS = int(os.getenv("WORK_TOKEN_TTL_HOURS", "168"))
WORK_TOKEN_REFRESH_MARGIN_MINUTES = int(os.getenv("WORK_TOKEN_REFRESH_MARGIN_MINUTES", "10"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
