from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import ROOT_ADMIN_CODE
from .connection import DBConfig
from .mysql_base import is_duplicate_key

logger = logging.getLogger(__name__)

# (table, index name, columns) that enforce one row per business key.
UNIQUE_INDEXES = (
    ("accounts", "uq_accounts_username", ("username",)),
    ("accounts", "uq_accounts_email", ("email",)),
    ("accounts", "uq_accounts_user_code", ("user_code",)),
    ("enrollments", "uq_enrollments_class_student", ("class_id", "student_code")),
    ("attendance_events", "uq_attendance_class_student_day", ("class_id", "student_code", "event_date")),
)


def _connect(db_config: dict, *, with_database: bool = True):
    target = DBConfig.from_mapping(db_config)
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
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


def _exec_sql(cur, sql: str) -> None:
    for stmt in iter_sql_statements(_strip_line_comments(sql)):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def _apply_sql_file(db_config: dict, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _apply_sql_file(db_config, schema_path)
    logger.info("schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _apply_sql_file(db_config, seed_path)
    logger.info("seed applied from %s", seed_path)


def ensure_root_admin(db_config: dict, *, password: str) -> None:
    """Create or refresh the root admin account (ADMIN-001)."""

    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(password)
        cur.execute("SELECT account_id FROM accounts WHERE user_code=%s", (ROOT_ADMIN_CODE,))
        existing = cur.fetchone()
        if existing:
            cur.execute(
                "UPDATE accounts SET password_hash=%s, role='admin' WHERE account_id=%s",
                (password_hash, int(existing["account_id"])),
            )
        else:
            cur.execute(
                """
                INSERT INTO accounts (username, email, password_hash, role, user_code)
                VALUES (%s, %s, %s, 'admin', %s)
                """,
                ("admin", "admin@example.com", password_hash, ROOT_ADMIN_CODE),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def list_indexes(db_config: dict, table: str) -> list[dict]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute(f"SHOW INDEX FROM `{table}`")
        return [
            {"name": r["Key_name"], "column": r["Column_name"], "unique": not bool(r["Non_unique"])}
            for r in cur.fetchall()
        ]
    finally:
        conn.close()


def ensure_unique_indexes(db_config: dict) -> list[str]:
    """Create any missing UNIQUE index from UNIQUE_INDEXES; returns the names created.

    Fails on tables that already hold duplicates; those rows must be cleaned first.
    """

    created: list[str] = []
    for table, name, columns in UNIQUE_INDEXES:
        present = {ix["name"] for ix in list_indexes(db_config, table) if ix["unique"]}
        if name in present:
            continue
        conn = _connect(db_config)
        try:
            cur = conn.cursor()
            cols = ", ".join(f"`{c}`" for c in columns)
            try:
                cur.execute(f"ALTER TABLE `{table}` ADD UNIQUE INDEX `{name}` ({cols})")
            except mysql.connector.Error as e:
                if is_duplicate_key(e):
                    logger.error("cannot create %s on %s: duplicate rows exist", name, table)
                raise
            conn.commit()
            created.append(name)
            logger.info("created unique index %s on %s", name, table)
        finally:
            conn.close()
    return created
