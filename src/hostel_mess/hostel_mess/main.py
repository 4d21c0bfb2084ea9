from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.flow_log import configure_logging
from .audit.emitter import configure_audit_logging
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import CoreSettings, build_container
from .assignments.controller import register as register_assignments
from .attendance.controller import register as register_attendance
from .menus.controller import register as register_menus
from .stats.controller import register as register_stats
from .tokens.controller import register as register_tokens

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    configure_audit_logging()

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    database_dir = Path(__file__).resolve().parents[3] / "database"
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=database_dir / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")
        logger.info("demo seed ready")

    container = build_container(db_config=db_config, core=CoreSettings.from_module(settings))

    register_assignments(app, container)
    register_attendance(app, container)
    register_menus(app, container)
    register_tokens(app, container)
    register_stats(app, container)

    return app
