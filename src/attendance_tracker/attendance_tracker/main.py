from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_root_admin, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .attendance.qr_controller import register as register_qr
from .classes.controller import register as register_classes
from .devices.controller import register as register_devices
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        admin_password = getattr(settings, "ADMIN_PASSWORD", "")
        if admin_password:
            ensure_root_admin(db_config, password=admin_password)
        else:
            logger.warning("ADMIN_PASSWORD not set; root admin not created")
        logger.info("demo seed ready")


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Build the JSON API.

    When ``container`` is given (tests) no database bootstrap runs and the
    session sweeper is left stopped.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _bootstrap_database(settings, db_config)
        container = build_container(db_config=db_config, settings=settings)
        if bool(getattr(settings, "ENABLE_SESSION_SWEEPER", False)):
            container.session_sweeper.start()

    app.extensions["attendance_container"] = container

    @app.route("/api/test", methods=["GET"], endpoint="api_test")
    def api_test():
        return jsonify({"message": "API is working"})

    register_users(app, container)
    register_classes(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_qr(app, container)
    register_sessions(app, container)
    register_reports(app, container)
    register_devices(app, container)

    return app
