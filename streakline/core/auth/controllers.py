"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from streakline.core.auth.csrf import CSRF_HEADER, generate_csrf_token
from streakline.core.utils.decorators import current_user_id

auth_bp = Blueprint("auth_api", __name__)


@auth_bp.get("/csrf")
@jwt_required()
def csrf_token():
    """Hand out the session CSRF token mutating habit requests must echo back."""
    return jsonify(
        {
            "ok": True,
            "user_id": current_user_id(),
            "csrf_token": generate_csrf_token(),
            "header": CSRF_HEADER,
        }
    )
