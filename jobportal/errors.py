# jobportal/errors.py
"""
Error taxonomy shared by every service module.

Services raise these; the errors blueprint turns them into the JSON error
envelope. None of them is retried: every error is final for the request.
"""
from __future__ import annotations
from typing import Optional


class PortalError(Exception):
    kind = "error"
    status_code = 500
    default_message = "Unexpected error."

    def __init__(self, message: Optional[str] = None, fields: Optional[dict] = None):
        self.message = str(message or self.default_message)
        self.fields = fields or None
        super().__init__(self.message)

    def to_dict(self) -> dict:
        out = {"kind": self.kind, "message": self.message}
        if self.fields:
            out["fields"] = {k: [str(m) for m in v] for k, v in self.fields.items()}
        return out


class ValidationError(PortalError):
    """Malformed or out-of-range input; `fields` maps field name -> messages."""
    kind = "validation_error"
    status_code = 400
    default_message = "Invalid input."


class NotFound(PortalError):
    kind = "not_found"
    status_code = 404
    default_message = "Resource not found."


class Forbidden(PortalError):
    kind = "forbidden"
    status_code = 403
    default_message = "Not authorized."


class Conflict(PortalError):
    kind = "conflict"
    status_code = 409
    default_message = "Resource already exists."


class InvalidState(PortalError):
    kind = "invalid_state"
    status_code = 400
    default_message = "Operation not allowed in the current state."


class PreconditionError(InvalidState):
    kind = "precondition_failed"
    default_message = "A required resource is missing."


class Unavailable(PortalError):
    kind = "unavailable"
    status_code = 503
    default_message = "Service temporarily unavailable."
