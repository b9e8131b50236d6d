from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .approvals.controller import register as register_approvals
from .common.http import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .events.controller import register as register_events
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app(container=None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)
    app.json.sort_keys = False

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_path = Path(__file__).resolve().parents[3] / "database" / "seed.sql"
            apply_seed_sql(db_config, seed_path=seed_path)
            logger.info("default job sites seeded")

        container = build_container(
            db_config=db_config,
            week_start=getattr(settings, "WEEK_START", "monday"),
            worker_timezone=getattr(settings, "WORKER_TIMEZONE", "UTC"),
            retention_days=int(getattr(settings, "RETENTION_DAYS", 90)),
        )

    register_error_handlers(app)
    register_events(app, container)
    register_approvals(app, container)
    register_reports(app, container)

    return app
