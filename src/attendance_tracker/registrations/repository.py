from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import RegistrationStatus, Role
from .model import RegistrationRequest


class RegistrationRepository(Protocol):
    """Repository interface for registration requests.

    The store guarantees at most one pending/approved request per email and
    raises DuplicateKeyError when an insert would break that.
    """

    def create_request(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        department: str,
        position: str,
        phone: str,
        address: str,
        role: Role,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[RegistrationRequest]:
        raise NotImplementedError

    def find_by_email(
        self, email: str, *, statuses: Sequence[RegistrationStatus]
    ) -> Optional[RegistrationRequest]:
        """Most recent request for ``email`` whose status is in ``statuses``."""

        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RegistrationStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[RegistrationRequest]:
        """Newest first, with reviewer name/email filled in."""

        raise NotImplementedError

    def count(self, *, status: Optional[RegistrationStatus] = None) -> int:
        raise NotImplementedError

    def count_by_status(self) -> Dict[RegistrationStatus, int]:
        raise NotImplementedError

    def mark_approved(self, request_id: int, *, reviewed_by: int) -> bool:
        """Transition pending -> approved. False if it was no longer pending."""

        raise NotImplementedError

    def mark_rejected(self, request_id: int, *, reviewed_by: int, reason: str) -> bool:
        """Transition pending -> rejected. False if it was no longer pending."""

        raise NotImplementedError
