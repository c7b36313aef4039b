from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .core.logging import setup_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_staff_user, list_tables
from .database.connection import DBConfig

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Container | None = None, *, settings_module: str | None = None) -> Flask:
    """Application factory. Pass a prebuilt container to skip all database setup."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.ensure_ascii = False

    if not app.config["TESTING"]:
        setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_staff_user(
                db_config,
                email=getattr(settings, "SEED_ADMIN_EMAIL"),
                password=getattr(settings, "SEED_ADMIN_PASSWORD"),
                role="admin",
            )
            logger.info("Demo seed ready")

        container = build_container(db_config=db_config, settings=settings)

    app.extensions["camp_checkin"] = container
    _register_routes(app, container)
    return app


def _register_routes(app: Flask, container: Container) -> None:
    from .attendees.controller import register as register_attendees
    from .checkin.controller import register as register_checkin
    from .common.http import register_error_handlers
    from .payments.controller import register as register_payments
    from .reports.controller import register as register_reports
    from .tickets.controller import register as register_tickets
    from .users.controller import register as register_users

    register_error_handlers(app)
    register_users(app, container)
    register_attendees(app, container)
    register_checkin(app, container)
    register_payments(app, container)
    register_reports(app, container)
    register_tickets(app, container)
