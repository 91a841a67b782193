from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import RegistrationStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import RegistrationRequest
from .repository import RegistrationRepository

_SELECT = """
    SELECT r.request_id, r.name, r.email, r.password_hash, r.department, r.position,
           r.phone, r.address, r.role, r.status, r.created_at, r.reviewed_at,
           r.reviewed_by, r.rejection_reason,
           u.name AS reviewer_name, u.email AS reviewer_email
    FROM registration_requests r
    LEFT JOIN users u ON u.user_id = r.reviewed_by
"""


def _to_request(r: Dict[str, Any]) -> RegistrationRequest:
    return RegistrationRequest(
        request_id=int(r["request_id"]),
        name=r["name"],
        email=r["email"],
        password_hash=r["password_hash"],
        department=r["department"],
        position=r["position"],
        phone=r["phone"],
        address=r["address"],
        role=Role(r["role"]),
        status=RegistrationStatus(r["status"]),
        created_at=r["created_at"],
        reviewed_at=r.get("reviewed_at"),
        reviewed_by=r.get("reviewed_by"),
        rejection_reason=r.get("rejection_reason"),
        reviewer_name=r.get("reviewer_name"),
        reviewer_email=r.get("reviewer_email"),
    )


class MySQLRegistrationRepository(RegistrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_request(
        self,
        *,
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
                INSERT INTO registration_requests(
                    name, email, password_hash, department, position, phone, address, role, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,UTC_TIMESTAMP())
                """,
                (
                    name,
                    email.lower(),
                    password_hash,
                    department,
                    position,
                    phone,
                    address,
                    role.value,
                    RegistrationStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[RegistrationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def find_by_email(
        self, email: str, *, statuses: Sequence[RegistrationStatus]
    ) -> Optional[RegistrationRequest]:
        if not statuses:
            return None
        placeholders = ",".join(["%s"] * len(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE r.email=%s AND r.status IN ({placeholders})
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT 1
                """,
                tuple([email.lower()] + [s.value for s in statuses]),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RegistrationStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[RegistrationRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def count(self, *, status: Optional[RegistrationStatus] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute("SELECT COUNT(*) AS total FROM registration_requests")
            else:
                cur.execute(
                    "SELECT COUNT(*) AS total FROM registration_requests WHERE status=%s",
                    (status.value,),
                )
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def count_by_status(self) -> Dict[RegistrationStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS total FROM registration_requests GROUP BY status")
            return {RegistrationStatus(r["status"]): int(r["total"]) for r in fetchall(cur)}

    def mark_approved(self, request_id: int, *, reviewed_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE registration_requests
                SET status=%s, reviewed_by=%s, reviewed_at=UTC_TIMESTAMP()
                WHERE request_id=%s AND status=%s
                """,
                (
                    RegistrationStatus.APPROVED.value,
                    int(reviewed_by),
                    int(request_id),
                    RegistrationStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def mark_rejected(self, request_id: int, *, reviewed_by: int, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE registration_requests
                SET status=%s, reviewed_by=%s, reviewed_at=UTC_TIMESTAMP(), rejection_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    RegistrationStatus.REJECTED.value,
                    int(reviewed_by),
                    reason,
                    int(request_id),
                    RegistrationStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
