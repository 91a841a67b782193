from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.exceptions import AuthenticationError, ForbiddenError
from ..container import Container


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Access denied. No token provided.")
    return token.strip()


def build_guards(container: Container):
    """Return ``(token_required, user_required, admin_required)`` view decorators.

    token_required only checks the signature and stores ``g.user_id``;
    user_required also loads an active user into ``g.current_user``;
    admin_required additionally requires the admin or HR role.
    Errors propagate as DomainError and are rendered by the error handlers.
    """

    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.user_id = container.auth_service.resolve_token(_bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def user_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user_id = container.auth_service.resolve_token(_bearer_token())
            user = container.users_repo.get_by_id(user_id)
            if not user or not user.is_active:
                raise ForbiddenError("Invalid token or inactive user")
            g.user_id = user.user_id
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @user_required
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not g.current_user.role.can_review_registrations:
                raise ForbiddenError("Admin or HR access required")
            return view(*args, **kwargs)

        return wrapper

    return token_required, user_required, admin_required
