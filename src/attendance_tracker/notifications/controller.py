from __future__ import annotations

from flask import Flask, g, jsonify

from ..auth.decorators import build_guards
from ..container import Container

API_PREFIX = "/api/auth"


def register(app: Flask, container: Container) -> None:
    _, user_required, _ = build_guards(container)

    @app.route(f"{API_PREFIX}/notifications", methods=["GET"], endpoint="notifications")
    @user_required
    def notifications():
        items = container.notification_service.list_for_user(g.current_user)
        return jsonify([n.to_public_dict() for n in items])

    @app.route(
        f"{API_PREFIX}/notifications/<int:notification_id>/read",
        methods=["PUT"],
        endpoint="mark_notification_read",
    )
    @user_required
    def mark_notification_read(notification_id: int):
        container.notification_service.mark_read(g.current_user, notification_id)
        return jsonify({"message": "Notification marked as read"})
