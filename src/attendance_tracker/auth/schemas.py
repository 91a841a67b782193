"""Typed request/response payloads for the login and password endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import normalize_email, require_fields, require_object
from ..users.model import User

GENERIC_RESET_ACK = (
    "If this email exists in our system, you will receive a password reset link shortly. "
    "Please check your inbox and spam folder."
)


@dataclass(frozen=True)
class LoginPayload:
    email: str
    password: str

    @classmethod
    def from_json(cls, data: Optional[Mapping[str, Any]]) -> "LoginPayload":
        data = require_object(data)
        require_fields(data, ("email", "password"), "Email and password are required")
        return cls(email=normalize_email(str(data["email"])), password=str(data["password"]))


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User

    def to_dict(self) -> dict:
        return {"message": "Login successful", "token": self.token, "user": self.user.to_public_dict()}


@dataclass(frozen=True)
class ForgotPasswordPayload:
    email: str

    @classmethod
    def from_json(cls, data: Optional[Mapping[str, Any]]) -> "ForgotPasswordPayload":
        data = require_object(data)
        require_fields(data, ("email",), "Email is required")
        return cls(email=normalize_email(str(data["email"])))


@dataclass(frozen=True)
class ResetPasswordPayload:
    token: str
    new_password: str

    @classmethod
    def from_json(cls, data: Optional[Mapping[str, Any]]) -> "ResetPasswordPayload":
        data = require_object(data)
        require_fields(data, ("token", "newPassword"), "Reset token and new password are required")
        return cls(token=str(data["token"]).strip(), new_password=str(data["newPassword"]))
