from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from .attendance.controller import register as register_attendance
from .common.clock import Clock
from .common.http import error_response
from .config import get_settings_module
from .container import build_container
from .core.exceptions import ValidationError
from .database.bootstrap import apply_schema, ensure_demo_admin, list_tables, seed_overtime_config
from .logging_config import configure_logging, get_logger
from .mpl.controller import register as register_mpl
from .overtime.controller import register as register_overtime
from .users.controller import register as register_users

logger = get_logger("app")

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(*, clock: Optional[Clock] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        json_output=bool(getattr(settings, "LOG_JSON", True)),
    )
    logger.info(
        "starting",
        extra={
            "fields": {
                "settings": settings_module,
                "db": f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
            }
        },
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        seed_overtime_config(db_config, getattr(settings, "DEFAULT_OVERTIME_CONFIG"))
        ensure_demo_admin(db_config)
        logger.info("schema ready", extra={"fields": {"tables": len(list_tables(db_config))}})

    container = build_container(db_config=db_config, clock=clock)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return error_response(str(e), 400, code="VALIDATION_ERROR")

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return error_response(e.description or e.name, e.code or 500)
        logger.exception("unhandled error")
        return error_response("Internal server error.", 500)

    register_users(app, container)
    register_attendance(app, container)
    register_overtime(app, container)
    register_mpl(app, container)

    return app
