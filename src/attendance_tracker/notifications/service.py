from __future__ import annotations

import logging
from typing import Sequence

from ..core.constants import NOTIFICATION_FEED_LIMIT
from ..core.enums import NotificationType, Role
from ..core.exceptions import NotFoundError
from ..users.model import User
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Admin-facing notification feed (no push delivery)."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify_registration_request(self, *, request_id: int, name: str, email: str) -> int:
        notification_id = self._notifications.create(
            type=NotificationType.REGISTRATION_REQUEST,
            message=f"New registration request from {name} ({email}) is pending approval.",
            link="/registration-requests",
            recipient_roles=(Role.ADMIN,),
            related_id=int(request_id),
            related_model="RegistrationRequest",
        )
        logger.debug("Notification %s recorded for registration request %s", notification_id, request_id)
        return notification_id

    def list_for_user(self, user: User) -> Sequence[Notification]:
        return self._notifications.list_unread(
            role=user.role, user_id=user.user_id, limit=NOTIFICATION_FEED_LIMIT
        )

    def mark_read(self, user: User, notification_id: int) -> None:
        if not self._notifications.get_by_id(int(notification_id)):
            raise NotFoundError("Notification not found")
        self._notifications.mark_read(int(notification_id), user_id=user.user_id)
