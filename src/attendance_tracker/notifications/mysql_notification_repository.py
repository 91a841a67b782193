from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import NotificationType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


def _to_notification(r: Dict[str, Any]) -> Notification:
    roles = tuple(Role(v) for v in (r.get("recipient_roles") or "").split(",") if v)
    return Notification(
        notification_id=int(r["notification_id"]),
        type=NotificationType(r["type"]),
        message=r["message"],
        link=r.get("link") or "",
        recipient_roles=roles,
        created_at=r["created_at"],
        related_id=r.get("related_id"),
        related_model=r.get("related_model"),
    )


class MySQLNotificationRepository(NotificationRepository):
    """Recipient roles are kept as a MySQL SET-style comma list (FIND_IN_SET)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        type: NotificationType,
        message: str,
        link: str,
        recipient_roles: Sequence[Role],
        related_id: Optional[int] = None,
        related_model: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(type, message, link, recipient_roles, related_id, related_model, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,UTC_TIMESTAMP())
                """,
                (
                    type.value,
                    message,
                    link,
                    ",".join(r.value for r in recipient_roles),
                    related_id,
                    related_model,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, type, message, link, recipient_roles,
                       related_id, related_model, created_at
                FROM notifications
                WHERE notification_id=%s
                """,
                (int(notification_id),),
            )
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def list_unread(self, *, role: Role, user_id: int, limit: int = 20) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT n.notification_id, n.type, n.message, n.link, n.recipient_roles,
                       n.related_id, n.related_model, n.created_at
                FROM notifications n
                LEFT JOIN notification_reads nr
                       ON nr.notification_id = n.notification_id AND nr.user_id = %s
                WHERE FIND_IN_SET(%s, n.recipient_roles) > 0 AND nr.user_id IS NULL
                ORDER BY n.created_at DESC, n.notification_id DESC
                LIMIT %s
                """,
                (int(user_id), role.value, int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, notification_id: int, *, user_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO notification_reads(notification_id, user_id, read_at) VALUES(%s,%s,UTC_TIMESTAMP())",
                (int(notification_id), int(user_id)),
            )
