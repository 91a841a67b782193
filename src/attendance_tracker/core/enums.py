from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    MANAGER = "manager"
    EMPLOYEE = "employee"

    @property
    def can_review_registrations(self) -> bool:
        return self in {Role.ADMIN, Role.HR}


class RegistrationStatus(str, Enum):
    """Lifecycle of a registration request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    REGISTRATION_REQUEST = "registration_request"
