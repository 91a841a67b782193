from datetime import datetime, timedelta, timezone

import jwt
import pytest

from attendance_tracker.auth.tokens import TokenIssuer
from attendance_tracker.core.exceptions import AuthenticationError

SECRET = "unit-test-signing-secret-0123456789"


def test_token_round_trips_user_id():
    issuer = TokenIssuer(SECRET, expires_days=7)
    assert issuer.verify(issuer.issue(42)) == 42


def test_token_expires_after_window():
    issuer = TokenIssuer(SECRET, expires_days=7)
    token = issuer.issue(42, now=datetime.now(timezone.utc) - timedelta(days=8))

    with pytest.raises(AuthenticationError, match="expired"):
        issuer.verify(token)


def test_token_signed_with_other_secret_is_rejected():
    token = TokenIssuer("another-secret-that-is-long-enough-1").issue(42)
    with pytest.raises(AuthenticationError):
        TokenIssuer(SECRET).verify(token)


def test_token_without_subject_is_rejected():
    token = jwt.encode({"exp": datetime.now(timezone.utc) + timedelta(days=1)}, SECRET, algorithm="HS256")
    with pytest.raises(AuthenticationError):
        TokenIssuer(SECRET).verify(token)


def test_garbage_token_is_rejected():
    with pytest.raises(AuthenticationError):
        TokenIssuer(SECRET).verify("not-a-jwt")


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        TokenIssuer("")
