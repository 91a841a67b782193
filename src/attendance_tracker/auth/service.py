from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Protocol
from urllib.parse import urlencode

from ..common.datetime_utils import now_utc
from ..common.validators import require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH, RESET_TOKEN_BYTES, RESET_TOKEN_TTL_MINUTES
from ..core.enums import RegistrationStatus
from ..core.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    RegistrationPendingError,
    RegistrationRejectedError,
    ServiceUnavailableError,
)
from ..notifications.mailer import DeliveryError
from ..registrations.service import RegistrationService
from ..users.model import User
from ..users.repository import UserRepository
from .passwords import hash_password, verify_password
from .schemas import ForgotPasswordPayload, LoginPayload, LoginResult, ResetPasswordPayload
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class ResetMailer(Protocol):
    @property
    def is_configured(self) -> bool:
        raise NotImplementedError

    def send_password_reset(self, *, to: str, name: str, reset_url: str) -> None:
        raise NotImplementedError


class AuthService:
    """Use case: login gate, bearer identity and password reset."""

    def __init__(
        self,
        users: UserRepository,
        registrations: RegistrationService,
        tokens: TokenIssuer,
        mailer: ResetMailer,
        *,
        frontend_url: str,
    ):
        self._users = users
        self._registrations = registrations
        self._tokens = tokens
        self._mailer = mailer
        self._frontend_url = frontend_url.rstrip("/")

    def login(self, payload: LoginPayload) -> LoginResult:
        user = self._users.get_active_by_email(payload.email)
        if not user:
            status = self._registrations.status_for_email(payload.email)
            if status == RegistrationStatus.PENDING:
                logger.info("Login refused for %s: registration pending", payload.email)
                raise RegistrationPendingError(
                    "Your registration is still pending admin approval. Please wait for approval before logging in."
                )
            if status == RegistrationStatus.REJECTED:
                logger.info("Login refused for %s: registration rejected", payload.email)
                raise RegistrationRejectedError(
                    "Your registration request was rejected. Please contact the administrator."
                )
            logger.info("Login failed for %s", payload.email)
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        if not verify_password(payload.password, user.password_hash):
            logger.info("Login failed for %s", payload.email)
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        logger.info("Login succeeded for %s (%s)", user.email, user.employee_id)
        return LoginResult(token=self._tokens.issue(user.user_id), user=user)

    def resolve_token(self, token: str) -> int:
        return self._tokens.verify(token)

    def get_profile(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def request_password_reset(self, payload: ForgotPasswordPayload) -> None:
        """Same outcome for known and unknown emails; only dependency failures differ."""
        if not self._mailer.is_configured:
            logger.error("Password reset requested but email delivery is not configured")
            raise ServiceUnavailableError(
                "Email service is not configured. Please contact your system administrator."
            )

        user = self._users.get_active_by_email(payload.email)
        if not user:
            logger.info("Password reset requested for unknown email %s", payload.email)
            return

        token = secrets.token_hex(RESET_TOKEN_BYTES)
        expires_at = now_utc() + timedelta(minutes=RESET_TOKEN_TTL_MINUTES)
        self._users.set_reset_token(user.user_id, token=token, expires_at=expires_at)

        reset_url = f"{self._frontend_url}/reset-password?{urlencode({'token': token})}"
        try:
            self._mailer.send_password_reset(to=user.email, name=user.name, reset_url=reset_url)
        except DeliveryError as exc:
            self._users.clear_reset_token(user.user_id)
            logger.warning("Reset token for user %s cleared after delivery failure", user.user_id)
            raise ServiceUnavailableError(
                "Email service configuration error. Please contact your administrator."
            ) from exc

    def reset_password(self, payload: ResetPasswordPayload) -> None:
        require_min_length(payload.new_password, "Password", MIN_PASSWORD_LENGTH)

        user = self._users.get_active_by_reset_token(payload.token, now=now_utc())
        if not user:
            raise InvalidTokenError("Invalid or expired reset token. Please request a new password reset.")

        if not self._users.consume_reset_token(
            user.user_id, token=payload.token, password_hash=hash_password(payload.new_password)
        ):
            raise InvalidTokenError("Invalid or expired reset token. Please request a new password reset.")

        logger.info("Password reset completed for user %s", user.user_id)
