"""Domain error taxonomy shared by services and controllers.

Services raise these; the app-level handler registered in ``create_app`` turns
them into ``{"ok": False, "error": code, "message": ...}`` responses. ``str(exc)``
is the machine code, so callers can keep matching on ``ValueError`` codes.
"""

from __future__ import annotations


class DomainError(ValueError):
    code = "domain_error"
    status_code = 400
    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.code)
        self.message = message or self.default_message

    def to_payload(self) -> dict:
        return {"ok": False, "error": self.code, "message": self.message}


class ValidationError(DomainError):
    code = "validation_error"
    status_code = 400
    default_message = "Invalid input."


class NotFound(DomainError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found."


class Forbidden(DomainError):
    code = "forbidden"
    status_code = 403
    default_message = "You do not have permission to access this resource."


__all__ = ["DomainError", "ValidationError", "NotFound", "Forbidden"]
