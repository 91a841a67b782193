"""Typed request/response payloads for the registration endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import normalize_email, require_fields, require_object
from ..core.enums import RegistrationStatus, Role
from ..core.exceptions import ValidationError
from .model import RegistrationRequest

REQUIRED_FIELDS = ("name", "email", "password", "department", "position", "phone", "address", "adminCode")


@dataclass(frozen=True)
class RegistrationSubmission:
    name: str
    email: str
    password: str
    department: str
    position: str
    phone: str
    address: str
    role: Role
    admin_code: str

    @classmethod
    def from_json(cls, data: Optional[Mapping[str, Any]]) -> "RegistrationSubmission":
        data = require_object(data)
        require_fields(
            data,
            REQUIRED_FIELDS,
            "All fields are required: name, email, password, department, position, phone, address, and admin code",
        )
        role_s = data.get("role") or Role.EMPLOYEE.value
        if not isinstance(role_s, str):
            raise ValidationError("Role must be a string")
        role_s = role_s.strip().lower()
        try:
            role = Role(role_s)
        except ValueError:
            raise ValidationError(f"Unknown role: {role_s}")

        return cls(
            name=str(data["name"]).strip(),
            email=normalize_email(str(data["email"])),
            password=str(data["password"]),
            department=str(data["department"]).strip(),
            position=str(data["position"]).strip(),
            phone=str(data["phone"]).strip(),
            address=str(data["address"]).strip(),
            role=role,
            admin_code=str(data["adminCode"]),
        )


@dataclass(frozen=True)
class RegistrationAck:
    request_id: int
    status: RegistrationStatus

    def to_dict(self) -> dict:
        return {
            "message": "Registration request submitted successfully! Please wait for admin approval before you can login.",
            "requestId": self.request_id,
            "status": self.status.value,
            "note": "You will be notified once your registration is approved by an administrator.",
        }


@dataclass(frozen=True)
class RegistrationPage:
    requests: Sequence[RegistrationRequest]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict:
        return {
            "requests": [r.to_public_dict() for r in self.requests],
            "totalPages": self.total_pages,
            "currentPage": self.page,
            "total": self.total,
        }


@dataclass(frozen=True)
class RegistrationStats:
    pending: int = 0
    approved: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.pending + self.approved + self.rejected

    def to_dict(self) -> dict:
        return {
            "pending": self.pending,
            "approved": self.approved,
            "rejected": self.rejected,
            "total": self.total,
        }
