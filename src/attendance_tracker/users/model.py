from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code). Created only when a
    registration request is approved, or by administrative seeding.
    """

    user_id: int
    employee_id: str
    name: str
    email: str
    password_hash: str
    department: str
    position: str
    phone: str
    address: str
    role: Role
    is_active: bool = True
    reset_token: Optional[str] = None
    reset_token_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        """Profile safe to return to clients (no hash, no reset token)."""
        return {
            "id": self.user_id,
            "employeeId": self.employee_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "position": self.position,
            "phone": self.phone,
            "address": self.address,
            "isActive": self.is_active,
        }
