from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .work_schedule.controller import register as register_work_schedule

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    backend = getattr(settings, "DB_BACKEND", "mysql")
    db_config = getattr(settings, "DB_CONFIG", None)

    if backend == "mysql":
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
    else:
        logger.info("settings=%s backend=%s", settings_module, backend)

    container = build_container(
        secret_key=app.secret_key,
        db_config=db_config,
        backend=backend,
        token_ttl_hours=getattr(settings, "WORK_TOKEN_TTL_HOURS"),
        token_horizon=getattr(settings, "WORK_TOKEN_HORIZON"),
        token_refresh_margin_minutes=getattr(settings, "WORK_TOKEN_REFRESH_MARGIN_MINUTES"),
    )
    app.extensions["workhours"] = container

    register_work_schedule(app, container)

    return app
