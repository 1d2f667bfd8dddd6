"""Token helpers for the external identity boundary.

Streakline never authenticates credentials itself. Whoever fronts the service
mints access tokens whose identity is the numeric user id; this helper exists
for operators (``flask seed-demo``) and tests.
"""

from __future__ import annotations

from flask_jwt_extended import create_access_token

from streakline.core.users.models import User


def issue_access_token(user: User) -> str:
    """Create an access token carrying the user's id as identity."""
    return create_access_token(identity=str(user.id))

