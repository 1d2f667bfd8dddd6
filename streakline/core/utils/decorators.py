"""Reusable decorators and request helpers for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity

from streakline.core.auth.csrf import CSRF_HEADER, validate_csrf_token

F = TypeVar("F", bound=Callable)


def csrf_protected(fn: F) -> F:
    """Validate CSRF token from header X-CSRF-Token."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not current_app.config.get("WTF_CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        token = request.headers.get(CSRF_HEADER)
        if not validate_csrf_token(token or ""):
            return jsonify({"ok": False, "error": "csrf_failed"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    """Numeric identity of the authenticated caller; use under ``jwt_required``."""
    return int(get_jwt_identity())
