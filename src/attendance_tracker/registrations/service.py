from __future__ import annotations

import hmac
import logging
from typing import Optional

from ..auth.passwords import hash_password
from ..common.validators import require_min_length
from ..core.constants import (
    DEFAULT_REJECTION_REASON,
    EMPLOYEE_ID_PREFIX,
    EMPLOYEE_ID_WIDTH,
    MIN_PASSWORD_LENGTH,
)
from ..core.enums import RegistrationStatus, Role
from ..core.exceptions import (
    ConflictError,
    DuplicateKeyError,
    ForbiddenError,
    InvalidAdminCodeError,
    NotFoundError,
    ServiceUnavailableError,
    StorageError,
)
from ..notifications.service import NotificationService
from ..users.model import User
from ..users.repository import UserRepository
from .model import RegistrationRequest
from .repository import RegistrationRepository
from .schemas import RegistrationAck, RegistrationPage, RegistrationStats, RegistrationSubmission

logger = logging.getLogger(__name__)


def format_employee_id(number: int) -> str:
    return f"{EMPLOYEE_ID_PREFIX}{int(number):0{EMPLOYEE_ID_WIDTH}d}"


class RegistrationService:
    """Use case: self-registration and the admin approval workflow.

    pending -> approved (creates the User) or pending -> rejected. Decisions
    are single-shot; the store's conditional update decides concurrent races.
    """

    def __init__(
        self,
        requests: RegistrationRepository,
        users: UserRepository,
        notifications: NotificationService,
        *,
        admin_code: str,
    ):
        self._requests = requests
        self._users = users
        self._notifications = notifications
        self._admin_code = admin_code

    @staticmethod
    def _require_reviewer(current_role: Role) -> None:
        if not current_role.can_review_registrations:
            raise ForbiddenError("Admin or HR access required")

    def submit(self, submission: RegistrationSubmission) -> RegistrationAck:
        require_min_length(submission.password, "Password", MIN_PASSWORD_LENGTH)

        if not hmac.compare_digest(submission.admin_code.encode(), self._admin_code.encode()):
            raise InvalidAdminCodeError("Invalid admin verification code. Contact your administrator.")

        if self._users.get_active_by_email(submission.email):
            raise ConflictError("User with this email already exists")

        existing = self._requests.find_by_email(
            submission.email,
            statuses=(RegistrationStatus.PENDING, RegistrationStatus.APPROVED),
        )
        if existing and existing.status == RegistrationStatus.PENDING:
            raise ConflictError("A registration request with this email is already pending admin approval")
        if existing:
            raise ConflictError("A registration request with this email has already been approved")

        try:
            request_id = self._requests.create_request(
                name=submission.name,
                email=submission.email,
                password_hash=hash_password(submission.password),
                department=submission.department,
                position=submission.position,
                phone=submission.phone,
                address=submission.address,
                role=submission.role,
            )
        except DuplicateKeyError:
            raise ConflictError("A registration request with this email already exists")

        logger.info("Registration request %s created for %s", request_id, submission.email)

        try:
            self._notifications.notify_registration_request(
                request_id=request_id, name=submission.name, email=submission.email
            )
        except (StorageError, ServiceUnavailableError):
            logger.exception("Could not record notification for registration request %s", request_id)

        return RegistrationAck(request_id=request_id, status=RegistrationStatus.PENDING)

    def list_requests(
        self,
        *,
        current_role: Role,
        status: Optional[RegistrationStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> RegistrationPage:
        self._require_reviewer(current_role)

        rows = self._requests.list_requests(status=status, offset=(page - 1) * limit, limit=limit)
        total = self._requests.count(status=status)
        return RegistrationPage(requests=rows, total=total, page=page, limit=limit)

    def stats(self, *, current_role: Role) -> RegistrationStats:
        self._require_reviewer(current_role)

        counts = self._requests.count_by_status()
        return RegistrationStats(
            pending=counts.get(RegistrationStatus.PENDING, 0),
            approved=counts.get(RegistrationStatus.APPROVED, 0),
            rejected=counts.get(RegistrationStatus.REJECTED, 0),
        )

    def _get_pending(self, request_id: int) -> RegistrationRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Registration request not found")
        if not req.is_pending:
            raise ConflictError("Registration request has already been processed")
        return req

    def approve(self, *, current_role: Role, reviewer_id: int, request_id: int) -> User:
        self._require_reviewer(current_role)
        req = self._get_pending(request_id)

        if self._users.get_active_by_email(req.email):
            raise ConflictError("User with this email already exists")

        employee_id = format_employee_id(self._users.next_employee_number())
        try:
            user_id = self._users.create_user(
                employee_id=employee_id,
                name=req.name,
                email=req.email,
                password_hash=req.password_hash,
                department=req.department,
                position=req.position,
                phone=req.phone,
                address=req.address,
                role=req.role,
            )
        except DuplicateKeyError:
            raise ConflictError("User with this email already exists")

        # The user must exist before the request reads as approved.
        try:
            approved = self._requests.mark_approved(req.request_id, reviewed_by=int(reviewer_id))
        except (StorageError, ServiceUnavailableError):
            self._users.set_active(user_id, is_active=False)
            logger.exception(
                "Could not mark registration request %s approved; deactivated user %s",
                req.request_id,
                user_id,
            )
            raise
        if not approved:
            self._users.set_active(user_id, is_active=False)
            logger.warning(
                "Registration request %s was decided concurrently; deactivated user %s",
                req.request_id,
                user_id,
            )
            raise ConflictError("Registration request has already been processed")

        logger.info("Registration request %s approved by %s as %s", req.request_id, reviewer_id, employee_id)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def reject(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        reason: Optional[str] = None,
    ) -> str:
        self._require_reviewer(current_role)
        req = self._get_pending(request_id)

        reason = (reason or "").strip() or DEFAULT_REJECTION_REASON
        if not self._requests.mark_rejected(req.request_id, reviewed_by=int(reviewer_id), reason=reason):
            raise ConflictError("Registration request has already been processed")

        logger.info("Registration request %s rejected by %s", req.request_id, reviewer_id)
        return reason

    def status_for_email(self, email: str) -> Optional[RegistrationStatus]:
        """Pending wins over rejected; approved requests are not reported."""
        pending = self._requests.find_by_email(email, statuses=(RegistrationStatus.PENDING,))
        if pending:
            return RegistrationStatus.PENDING
        rejected = self._requests.find_by_email(email, statuses=(RegistrationStatus.REJECTED,))
        if rejected:
            return RegistrationStatus.REJECTED
        return None
