from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note: services depend on this interface, never on a concrete DB.
    Emails are stored and queried lower-case.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_active_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def next_employee_number(self) -> int:
        """Atomically allocate the next employee sequence number (1, 2, ...)."""

        raise NotImplementedError

    def create_user(
        self,
        *,
        employee_id: str,
        name: str,
        email: str,
        password_hash: str,
        department: str,
        position: str,
        phone: str,
        address: str,
        role: Role,
    ) -> int:
        """Insert an active user. Raises DuplicateKeyError on email/employee id clash."""

        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_reset_token(self, user_id: int, *, token: str, expires_at: datetime) -> bool:
        raise NotImplementedError

    def clear_reset_token(self, user_id: int) -> bool:
        raise NotImplementedError

    def get_active_by_reset_token(self, token: str, *, now: datetime) -> Optional[User]:
        raise NotImplementedError

    def consume_reset_token(self, user_id: int, *, token: str, password_hash: str) -> bool:
        """Replace the hash and clear the token, only if ``token`` is still current."""

        raise NotImplementedError
