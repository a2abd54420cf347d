from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterable, Mapping

import mysql.connector
from werkzeug.security import generate_password_hash

from ..logging_config import get_logger
from .connection import DBConfig

logger = get_logger("database.bootstrap")


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql names a default database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: Mapping[str, Any]) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping[str, Any], *, schema_path: str | Path) -> None:
    target = DBConfig.from_mapping(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    conn = _connect(target)
    try:
        cur = conn.cursor()
        count = 0
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied", extra={"fields": {"database": target.database, "statements": count}})


def seed_overtime_config(db_config: Mapping[str, Any], defaults: Mapping[str, Any]) -> bool:
    """Insert the configuration singleton if it does not exist yet. Returns True when inserted."""
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SELECT config_id FROM overtime_config WHERE config_id=1")
        if cur.fetchone():
            return False
        cur.execute(
            """
            INSERT INTO overtime_config(
                config_id, office_start_time, office_end_time, break_max_minutes,
                night_diff_start_time, night_diff_end_time, overtime_daily_max_minutes
            )
            VALUES(1,%s,%s,%s,%s,%s,%s)
            """,
            (
                defaults["office_start_time"],
                defaults["office_end_time"],
                int(defaults["break_max_minutes"]),
                defaults["night_diff_start_time"],
                defaults["night_diff_end_time"],
                int(defaults["overtime_daily_max_minutes"]),
            ),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("overtime config seeded", extra={"fields": dict(defaults)})
    return True


def ensure_demo_admin(db_config: Mapping[str, Any], *, username: str = "admin", password: str = "admin123") -> None:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
        if cur.fetchone():
            return
        cur.execute(
            """
            INSERT INTO users(name, username, password_hash, role)
            VALUES(%s,%s,%s,'admin')
            """,
            ("Admin Demo", username, generate_password_hash(password)),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("demo admin created", extra={"fields": {"username": username}})


def list_tables(db_config: Mapping[str, Any]) -> list[str]:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
