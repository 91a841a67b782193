from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.decorators import build_guards
from ..common.validators import parse_positive_int, require_object
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import RegistrationStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .schemas import RegistrationSubmission

API_PREFIX = "/api/auth"


def register(app: Flask, container: Container) -> None:
    _, _, admin_required = build_guards(container)

    def _parse_status(value: str):
        if not value:
            return None
        try:
            return RegistrationStatus(value.strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown status: {value}")

    @app.route(f"{API_PREFIX}/register", methods=["POST"], endpoint="register")
    def register_request():
        submission = RegistrationSubmission.from_json(request.get_json(silent=True))
        ack = container.registration_service.submit(submission)
        return jsonify(ack.to_dict()), 201

    @app.route(f"{API_PREFIX}/registration-requests", methods=["GET"], endpoint="registration_requests")
    @admin_required
    def registration_requests():
        page = container.registration_service.list_requests(
            current_role=g.current_user.role,
            status=_parse_status(request.args.get("status", "")),
            page=parse_positive_int(request.args.get("page"), "page", default=1),
            limit=parse_positive_int(
                request.args.get("limit"), "limit", default=DEFAULT_PAGE_SIZE, maximum=MAX_PAGE_SIZE
            ),
        )
        return jsonify(page.to_dict())

    @app.route(
        f"{API_PREFIX}/approve-registration/<int:request_id>",
        methods=["POST"],
        endpoint="approve_registration",
    )
    @admin_required
    def approve_registration(request_id: int):
        user = container.registration_service.approve(
            current_role=g.current_user.role,
            reviewer_id=g.current_user.user_id,
            request_id=request_id,
        )
        return jsonify({"message": "Registration approved successfully! User can now login.", "user": user.to_public_dict()})

    @app.route(
        f"{API_PREFIX}/reject-registration/<int:request_id>",
        methods=["POST"],
        endpoint="reject_registration",
    )
    @admin_required
    def reject_registration(request_id: int):
        data = require_object(request.get_json(silent=True))
        reason = data.get("reason")
        reason = container.registration_service.reject(
            current_role=g.current_user.role,
            reviewer_id=g.current_user.user_id,
            request_id=request_id,
            reason=reason if isinstance(reason, str) else None,
        )
        return jsonify({"message": "Registration request rejected successfully.", "reason": reason})

    @app.route(f"{API_PREFIX}/registration-stats", methods=["GET"], endpoint="registration_stats")
    @admin_required
    def registration_stats():
        stats = container.registration_service.stats(current_role=g.current_user.role)
        return jsonify(stats.to_dict())
