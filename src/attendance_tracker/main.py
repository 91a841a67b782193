from __future__ import annotations

import importlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .auth.controller import register as register_auth
from .common.log import configure_logging
from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .notifications.controller import register as register_notifications
from .registrations.controller import register as register_registrations

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def _register_service_routes(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        return jsonify(
            {
                "message": "Employee Attendance System API is running",
                "status": "active",
                "version": API_VERSION,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "endpoints": {"health": "/api/health", "auth": "/api/auth/*"},
            }
        )

    @app.route("/api", methods=["GET"], endpoint="api_index")
    def api_index():
        return jsonify(
            {
                "message": "Employee Attendance System API",
                "version": API_VERSION,
                "endpoints": {
                    "POST /api/auth/register": "Register new user (requires admin approval)",
                    "POST /api/auth/login": "Login with email and password",
                    "POST /api/auth/forgot-password": "Request password reset",
                    "POST /api/auth/reset-password": "Reset password with token",
                    "GET /api/auth/profile": "Get user profile",
                    "GET /api/auth/notifications": "Get user notifications",
                    "GET /api/auth/registration-requests": "Get registration requests (admin only)",
                    "GET /api/auth/registration-stats": "Get registration statistics (admin only)",
                },
            }
        )

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        ready = container.conn.is_ready()
        body = {
            "status": "OK" if ready else "DEGRADED",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if ready else "disconnected",
        }
        return jsonify(body), (200 if ready else 503)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return jsonify({"error": str(exc)}), exc.status_code

    @app.errorhandler(404)
    def handle_not_found(exc):
        return (
            jsonify({"error": "Route not found", "path": request.path, "method": request.method}),
            404,
        )

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return jsonify({"error": "Internal server error", "details": str(exc)}), 500
        return jsonify({"error": "Internal server error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_admin_user(
                db_config,
                email=str(getattr(settings, "ADMIN_EMAIL", "")),
                password=str(getattr(settings, "ADMIN_PASSWORD", "")),
            )

        container = build_container(db_config=db_config, settings=settings)

    _register_service_routes(app, container)
    register_registrations(app, container)
    register_auth(app, container)
    register_notifications(app, container)
    _register_error_handlers(app)

    return app
