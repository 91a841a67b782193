from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .auth.service import AuthService, ResetMailer
from .auth.tokens import TokenIssuer
from .core.constants import DEFAULT_SESSION_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mailer import SmtpMailer, SmtpSettings
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .registrations.mysql_registration_repository import MySQLRegistrationRepository
from .registrations.repository import RegistrationRepository
from .registrations.service import RegistrationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


class ReadinessProbe(Protocol):
    def is_ready(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Container:
    conn: ReadinessProbe

    users_repo: UserRepository
    registrations_repo: RegistrationRepository
    notifications_repo: NotificationRepository

    notification_service: NotificationService
    registration_service: RegistrationService
    auth_service: AuthService


def build_services(
    *,
    conn: ReadinessProbe,
    users_repo: UserRepository,
    registrations_repo: RegistrationRepository,
    notifications_repo: NotificationRepository,
    tokens: TokenIssuer,
    mailer: ResetMailer,
    admin_code: str,
    frontend_url: str,
) -> Container:
    notification_service = NotificationService(notifications_repo)
    registration_service = RegistrationService(
        registrations_repo,
        users_repo,
        notification_service,
        admin_code=admin_code,
    )
    auth_service = AuthService(
        users_repo,
        registration_service,
        tokens,
        mailer,
        frontend_url=frontend_url,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        registrations_repo=registrations_repo,
        notifications_repo=notifications_repo,
        notification_service=notification_service,
        registration_service=registration_service,
        auth_service=auth_service,
    )


def build_container(*, db_config: dict, settings) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    mailer = SmtpMailer(
        SmtpSettings(
            host=str(getattr(settings, "EMAIL_HOST", "smtp.gmail.com")),
            port=int(getattr(settings, "EMAIL_PORT", 587)),
            user=str(getattr(settings, "EMAIL_USER", "")),
            password=str(getattr(settings, "EMAIL_PASS", "")),
            timeout=int(getattr(settings, "EMAIL_TIMEOUT", 10)),
        )
    )
    tokens = TokenIssuer(
        str(getattr(settings, "JWT_SECRET")),
        expires_days=int(getattr(settings, "JWT_EXPIRES_DAYS", DEFAULT_SESSION_DAYS)),
    )

    return build_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        registrations_repo=MySQLRegistrationRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        tokens=tokens,
        mailer=mailer,
        admin_code=str(getattr(settings, "ADMIN_VERIFICATION_CODE")),
        frontend_url=str(getattr(settings, "FRONTEND_URL", "http://localhost:5173")),
    )
