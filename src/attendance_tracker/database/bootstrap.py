from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..auth.passwords import hash_password
from ..core.constants import EMPLOYEE_ID_PREFIX, EMPLOYEE_ID_WIDTH
from ..core.enums import Role
from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for line in sql.splitlines(keepends=True):
        if not in_single and not in_double and line.lstrip().startswith("--"):
            continue
        for ch in line:
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
                buf.append(ch)
                continue

            if ch == '"' and not in_single:
                in_double = not in_double
                buf.append(ch)
                continue

            if ch == ";" and not in_single and not in_double:
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue

            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        connection_timeout=target.connect_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_admin_user(db_config: dict, *, email: str, password: str, name: str = "Administrator") -> None:
    """Create (or re-activate and reset) the initial admin account."""
    email = (email or "").strip().lower()
    if not email or not password:
        logger.warning("AUTO_SEED_DB is set but ADMIN_EMAIL/ADMIN_PASSWORD are empty; skipping admin seed")
        return

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = hash_password(password)
        cur.execute("SELECT user_id FROM users WHERE email=%s ORDER BY is_active DESC LIMIT 1", (email,))
        existing = cur.fetchone()
        if existing:
            cur.execute(
                "UPDATE users SET password_hash=%s, role=%s, is_active=1 WHERE user_id=%s",
                (password_hash, Role.ADMIN.value, existing["user_id"]),
            )
        else:
            cur.execute("UPDATE sequences SET value = LAST_INSERT_ID(value + 1) WHERE name='employee_id'")
            cur.execute("SELECT LAST_INSERT_ID() AS value")
            number = int(cur.fetchone()["value"])
            cur.execute(
                """
                INSERT INTO users(employee_id, name, email, password_hash, department, position,
                                  phone, address, role, is_active, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,1,UTC_TIMESTAMP())
                """,
                (
                    f"{EMPLOYEE_ID_PREFIX}{number:0{EMPLOYEE_ID_WIDTH}d}",
                    name,
                    email,
                    password_hash,
                    "Administration",
                    "Administrator",
                    "",
                    "",
                    Role.ADMIN.value,
                ),
            )
        conn.commit()
        logger.info("Admin account %s ready", email)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
