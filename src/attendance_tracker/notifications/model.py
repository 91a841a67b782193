from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import NotificationType, Role


@dataclass(frozen=True)
class Notification:
    notification_id: int
    type: NotificationType
    message: str
    link: str
    recipient_roles: Tuple[Role, ...]
    created_at: datetime
    related_id: Optional[int] = None
    related_model: Optional[str] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "type": self.type.value,
            "message": self.message,
            "link": self.link,
            "recipientRoles": [r.value for r in self.recipient_roles],
            "relatedId": self.related_id,
            "relatedModel": self.related_model,
            "createdAt": isoformat_or_none(self.created_at),
        }
