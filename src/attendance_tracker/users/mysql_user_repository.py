from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, employee_id, name, email, password_hash, department, position,
    phone, address, role, is_active, reset_token, reset_token_expires_at, created_at
"""

EMPLOYEE_SEQUENCE = "employee_id"


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        employee_id=row["employee_id"],
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        department=row.get("department") or "",
        position=row.get("position") or "",
        phone=row.get("phone") or "",
        address=row.get("address") or "",
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        reset_token=row.get("reset_token"),
        reset_token_expires_at=row.get("reset_token_expires_at"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_active_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s AND is_active=1",
                (email.lower(),),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def next_employee_number(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(expr) makes the increment and the read one atomic step per connection.
            cur.execute(
                "UPDATE sequences SET value = LAST_INSERT_ID(value + 1) WHERE name=%s",
                (EMPLOYEE_SEQUENCE,),
            )
            if cur.rowcount == 0:
                cur.execute(
                    "INSERT INTO sequences(name, value) VALUES(%s, LAST_INSERT_ID(1))",
                    (EMPLOYEE_SEQUENCE,),
                )
            cur.execute("SELECT LAST_INSERT_ID() AS value")
            row = fetchone(cur)
            return int(row["value"])

    def create_user(
        self,
        *,
        employee_id: str,
        name: str,
        email: str,
        password_hash: str,
        department: str,
        position: str,
        phone: str,
        address: str,
        role: Role,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(
                    employee_id, name, email, password_hash, department, position,
                    phone, address, role, is_active, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,1,UTC_TIMESTAMP())
                """,
                (employee_id, name, email.lower(), password_hash, department, position, phone, address, role.value),
            )
            return int(cur.lastrowid)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def set_reset_token(self, user_id: int, *, token: str, expires_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET reset_token=%s, reset_token_expires_at=%s WHERE user_id=%s",
                (token, expires_at, int(user_id)),
            )
            return cur.rowcount > 0

    def clear_reset_token(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET reset_token=NULL, reset_token_expires_at=NULL WHERE user_id=%s",
                (int(user_id),),
            )
            return cur.rowcount > 0

    def get_active_by_reset_token(self, token: str, *, now: datetime) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_USER_COLUMNS} FROM users
                WHERE reset_token=%s AND reset_token_expires_at > %s AND is_active=1
                """,
                (token, now),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def consume_reset_token(self, user_id: int, *, token: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET password_hash=%s, reset_token=NULL, reset_token_expires_at=NULL
                WHERE user_id=%s AND reset_token=%s
                """,
                (password_hash, int(user_id), token),
            )
            return cur.rowcount > 0
