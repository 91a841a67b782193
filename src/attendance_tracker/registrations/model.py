from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import RegistrationStatus, Role


@dataclass(frozen=True)
class RegistrationRequest:
    """An application to become a User, awaiting an admin decision.

    Immutable once it leaves ``pending``; never deleted.
    """

    request_id: int
    name: str
    email: str
    password_hash: str
    department: str
    position: str
    phone: str
    address: str
    role: Role
    status: RegistrationStatus
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    rejection_reason: Optional[str] = None
    reviewer_name: Optional[str] = None
    reviewer_email: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RegistrationStatus.PENDING

    def to_public_dict(self) -> dict:
        reviewer = None
        if self.reviewed_by is not None:
            reviewer = {"id": self.reviewed_by, "name": self.reviewer_name, "email": self.reviewer_email}
        return {
            "id": self.request_id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "position": self.position,
            "phone": self.phone,
            "address": self.address,
            "role": self.role.value,
            "status": self.status.value,
            "createdAt": isoformat_or_none(self.created_at),
            "reviewedAt": isoformat_or_none(self.reviewed_at),
            "reviewedBy": reviewer,
            "rejectionReason": self.rejection_reason,
        }
