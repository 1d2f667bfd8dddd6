"""Streakline application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify

from streakline.config import config_by_name
from streakline.core.errors import DomainError
from streakline.extensions import db, init_extensions, jwt


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Streakline Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    instance_root.mkdir(parents=True, exist_ok=True)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and db_uri != "sqlite:///:memory:":
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    _configure_logging(app)
    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from streakline.scripts.cli import register_commands

    register_commands(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("streakline").setLevel(level)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from streakline.core.auth.controllers import auth_bp  # local import to avoid circulars
    from streakline.domains.habits.controllers.dashboard_api import dashboard_api_bp
    from streakline.domains.habits.controllers.habit_api import habit_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(habit_api_bp, url_prefix="/api/habits")
    app.register_blueprint(dashboard_api_bp, url_prefix="/api")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        return jsonify(exc.to_payload()), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.name.lower().replace(" ", "_"), "message": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        db.session.rollback()
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": "unexpected_error", "message": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Missing or bad bearer tokens answer 401 in the JSON envelope."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return jsonify({"ok": False, "error": "unauthorized", "message": reason}), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return jsonify({"ok": False, "error": "invalid_token", "message": reason}), 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return jsonify({"ok": False, "error": "token_expired", "message": "Token has expired."}), 401
