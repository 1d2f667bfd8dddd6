"""Session-bound CSRF tokens for the mutating habit endpoints."""

from __future__ import annotations

import secrets

from flask import session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def generate_csrf_token() -> str:
    """Return the caller's CSRF token, creating one on first use."""
    token = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token:
        token = secrets.token_hex(32)
        session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def validate_csrf_token(token: str) -> bool:
    expected = session.get(CSRF_TOKEN_SESSION_KEY, "")
    if not token or not expected:
        return False
    return secrets.compare_digest(token, expected)
