"""Session tokens: stateless HS256 JWTs carrying the user id."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import AuthenticationError

JWT_ALGORITHM = "HS256"


class TokenIssuer:
    def __init__(self, secret: str, *, expires_days: int = DEFAULT_SESSION_DAYS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(days=int(expires_days))

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> int:
        """Return the user id carried by ``token``."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
            return int(payload["sub"])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except (jwt.InvalidTokenError, ValueError):
            raise AuthenticationError("Invalid token")
