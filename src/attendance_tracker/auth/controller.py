from __future__ import annotations

from flask import Flask, g, jsonify, request

from .schemas import GENERIC_RESET_ACK, ForgotPasswordPayload, LoginPayload, ResetPasswordPayload
from ..container import Container
from .decorators import build_guards

API_PREFIX = "/api/auth"


def register(app: Flask, container: Container) -> None:
    token_required, _, _ = build_guards(container)

    @app.route(f"{API_PREFIX}/login", methods=["POST"], endpoint="login")
    def login():
        result = container.auth_service.login(LoginPayload.from_json(request.get_json(silent=True)))
        return jsonify(result.to_dict())

    @app.route(f"{API_PREFIX}/forgot-password", methods=["POST"], endpoint="forgot_password")
    def forgot_password():
        container.auth_service.request_password_reset(
            ForgotPasswordPayload.from_json(request.get_json(silent=True))
        )
        return jsonify({"message": GENERIC_RESET_ACK, "success": True})

    @app.route(f"{API_PREFIX}/reset-password", methods=["POST"], endpoint="reset_password")
    def reset_password():
        container.auth_service.reset_password(ResetPasswordPayload.from_json(request.get_json(silent=True)))
        return jsonify(
            {"message": "Password reset successful! You can now login with your new password.", "success": True}
        )

    @app.route(f"{API_PREFIX}/profile", methods=["GET"], endpoint="profile")
    @token_required
    def profile():
        user = container.auth_service.get_profile(g.user_id)
        return jsonify(user.to_public_dict())
