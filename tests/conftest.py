from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from attendance_tracker.auth.passwords import hash_password
from attendance_tracker.auth.tokens import TokenIssuer
from attendance_tracker.container import build_services
from attendance_tracker.core.enums import RegistrationStatus, Role
from attendance_tracker.core.exceptions import DuplicateKeyError
from attendance_tracker.notifications.mailer import DeliveryError
from attendance_tracker.notifications.model import Notification
from attendance_tracker.registrations.model import RegistrationRequest
from attendance_tracker.users.model import User

ADMIN_CODE = "TEST-CODE"


class InMemoryUsers:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._next_id = 1
        self._sequence = 0

    def get_by_id(self, user_id):
        return self._users.get(int(user_id))

    def get_active_by_email(self, email):
        for u in self._users.values():
            if u.is_active and u.email == email.lower():
                return u
        return None

    def next_employee_number(self):
        self._sequence += 1
        return self._sequence

    def create_user(self, *, employee_id, name, email, password_hash, department, position, phone, address, role):
        if self.get_active_by_email(email) or any(u.employee_id == employee_id for u in self._users.values()):
            raise DuplicateKeyError("Duplicate entry")
        uid = self._next_id
        self._next_id += 1
        self._users[uid] = User(
            user_id=uid,
            employee_id=employee_id,
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            department=department,
            position=position,
            phone=phone,
            address=address,
            role=role,
            is_active=True,
            created_at=datetime(2026, 2, 1, 9, 0, 0),
        )
        return uid

    def set_active(self, user_id, *, is_active):
        user = self._users.get(int(user_id))
        if not user:
            return False
        self._users[user.user_id] = replace(user, is_active=is_active)
        return True

    def set_reset_token(self, user_id, *, token, expires_at):
        user = self._users[int(user_id)]
        self._users[user.user_id] = replace(user, reset_token=token, reset_token_expires_at=expires_at)
        return True

    def clear_reset_token(self, user_id):
        user = self._users[int(user_id)]
        self._users[user.user_id] = replace(user, reset_token=None, reset_token_expires_at=None)
        return True

    def get_active_by_reset_token(self, token, *, now):
        for u in self._users.values():
            if u.is_active and u.reset_token == token and u.reset_token_expires_at and u.reset_token_expires_at > now:
                return u
        return None

    def consume_reset_token(self, user_id, *, token, password_hash):
        user = self._users.get(int(user_id))
        if not user or user.reset_token != token:
            return False
        self._users[user.user_id] = replace(
            user, password_hash=password_hash, reset_token=None, reset_token_expires_at=None
        )
        return True

    # test helper
    def add(self, *, email, password, role=Role.EMPLOYEE, name="Test User", is_active=True, employee_id=None) -> User:
        employee_id = employee_id or f"EMP{self.next_employee_number():04d}"
        uid = self.create_user(
            employee_id=employee_id,
            name=name,
            email=email,
            password_hash=hash_password(password),
            department="IT",
            position="Engineer",
            phone="0900000000",
            address="1 Main St",
            role=role,
        )
        if not is_active:
            self.set_active(uid, is_active=False)
        return self._users[uid]


class InMemoryRegistrations:
    def __init__(self, users: Optional[InMemoryUsers] = None):
        self._requests: dict[int, RegistrationRequest] = {}
        self._next_id = 1
        self._users = users

    def create_request(self, *, name, email, password_hash, department, position, phone, address, role):
        active = (RegistrationStatus.PENDING, RegistrationStatus.APPROVED)
        if self.find_by_email(email, statuses=active):
            raise DuplicateKeyError("Duplicate entry")
        rid = self._next_id
        self._next_id += 1
        self._requests[rid] = RegistrationRequest(
            request_id=rid,
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            department=department,
            position=position,
            phone=phone,
            address=address,
            role=role,
            status=RegistrationStatus.PENDING,
            created_at=datetime(2026, 2, 1, 10, 0, rid % 60),
        )
        return rid

    def _with_reviewer(self, req):
        if req.reviewed_by is None or self._users is None:
            return req
        reviewer = self._users.get_by_id(req.reviewed_by)
        if not reviewer:
            return req
        return replace(req, reviewer_name=reviewer.name, reviewer_email=reviewer.email)

    def get_by_id(self, request_id):
        req = self._requests.get(int(request_id))
        return self._with_reviewer(req) if req else None

    def find_by_email(self, email, *, statuses):
        matches = [r for r in self._requests.values() if r.email == email.lower() and r.status in statuses]
        matches.sort(key=lambda r: r.request_id, reverse=True)
        return matches[0] if matches else None

    def _filtered(self, status):
        items = [r for r in self._requests.values() if status is None or r.status == status]
        items.sort(key=lambda r: r.request_id, reverse=True)
        return items

    def list_requests(self, *, status=None, offset=0, limit=10):
        return [self._with_reviewer(r) for r in self._filtered(status)[offset:offset + limit]]

    def count(self, *, status=None):
        return len(self._filtered(status))

    def count_by_status(self):
        out: dict[RegistrationStatus, int] = {}
        for r in self._requests.values():
            out[r.status] = out.get(r.status, 0) + 1
        return out

    def _decide(self, request_id, **changes):
        req = self._requests.get(int(request_id))
        if not req or req.status != RegistrationStatus.PENDING:
            return False
        self._requests[req.request_id] = replace(req, reviewed_at=datetime(2026, 2, 1, 11, 0, 0), **changes)
        return True

    def mark_approved(self, request_id, *, reviewed_by):
        return self._decide(request_id, status=RegistrationStatus.APPROVED, reviewed_by=int(reviewed_by))

    def mark_rejected(self, request_id, *, reviewed_by, reason):
        return self._decide(
            request_id,
            status=RegistrationStatus.REJECTED,
            reviewed_by=int(reviewed_by),
            rejection_reason=reason,
        )


class InMemoryNotifications:
    def __init__(self):
        self._items: dict[int, Notification] = {}
        self._reads: set[tuple[int, int]] = set()
        self._next_id = 1

    def create(self, *, type, message, link, recipient_roles, related_id=None, related_model=None):
        nid = self._next_id
        self._next_id += 1
        self._items[nid] = Notification(
            notification_id=nid,
            type=type,
            message=message,
            link=link,
            recipient_roles=tuple(recipient_roles),
            created_at=datetime(2026, 2, 1, 10, 0, 0),
            related_id=related_id,
            related_model=related_model,
        )
        return nid

    def get_by_id(self, notification_id):
        return self._items.get(int(notification_id))

    def list_unread(self, *, role, user_id, limit=20):
        items = [
            n
            for n in self._items.values()
            if role in n.recipient_roles and (n.notification_id, int(user_id)) not in self._reads
        ]
        items.sort(key=lambda n: n.notification_id, reverse=True)
        return items[:limit]

    def mark_read(self, notification_id, *, user_id):
        self._reads.add((int(notification_id), int(user_id)))


class FakeMailer:
    def __init__(self, *, configured=True, fail=False):
        self.configured = configured
        self.fail = fail
        self.sent: list[dict] = []

    @property
    def is_configured(self):
        return self.configured

    def send_password_reset(self, *, to, name, reset_url):
        if self.fail:
            raise DeliveryError("Email delivery failed")
        self.sent.append({"to": to, "name": name, "reset_url": reset_url})


class FakeConnection:
    def __init__(self, ready=True):
        self.ready = ready

    def is_ready(self):
        return self.ready


@pytest.fixture
def users():
    return InMemoryUsers()


@pytest.fixture
def registrations(users):
    return InMemoryRegistrations(users)


@pytest.fixture
def notifications():
    return InMemoryNotifications()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def tokens():
    return TokenIssuer("test-jwt-secret-for-the-suite-0123456789", expires_days=7)


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def container(conn, users, registrations, notifications, tokens, mailer):
    return build_services(
        conn=conn,
        users_repo=users,
        registrations_repo=registrations,
        notifications_repo=notifications,
        tokens=tokens,
        mailer=mailer,
        admin_code=ADMIN_CODE,
        frontend_url="http://frontend.test",
    )


@pytest.fixture
def admin(users):
    return users.add(email="admin@example.com", password="admin123", role=Role.ADMIN, name="Admin", employee_id="ADM0001")


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from attendance_tracker.main import create_app

    flask_app = create_app(container=container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def submission_data(**overrides) -> dict:
    data = {
        "name": "Alice Nguyen",
        "email": "a@x.com",
        "password": "secret1",
        "department": "Engineering",
        "position": "Developer",
        "phone": "0901234567",
        "address": "12 Le Loi",
        "adminCode": ADMIN_CODE,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_submission():
    return submission_data
