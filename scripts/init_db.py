from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from attendance_tracker.config import get_settings_module
from attendance_tracker.database.bootstrap import apply_schema, ensure_demo_admin, list_tables, seed_overtime_config
from attendance_tracker.logging_config import configure_logging, get_logger

logger = get_logger("scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), json_output=False)
    db_config = dict(settings.DB_CONFIG)

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    seeded = seed_overtime_config(db_config, settings.DEFAULT_OVERTIME_CONFIG)
    ensure_demo_admin(db_config)

    logger.info(
        "OK: applied schema.sql -> %s@%s:%s/%s (tables=%d, config_seeded=%s)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(list_tables(db_config)),
        seeded,
    )


if __name__ == "__main__":
    main()
