from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType, Role
from .model import Notification


class NotificationRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_unread(self, *, role: Role, user_id: int, limit: int = 20) -> Sequence[Notification]:
        """Newest first; only notifications addressed to ``role`` not yet read by ``user_id``."""

        raise NotImplementedError

    def mark_read(self, notification_id: int, *, user_id: int) -> None:
        """Idempotent."""

        raise NotImplementedError
