# coachhub/errors.py
from __future__ import annotations

from typing import Any, Optional


class CoachHubError(Exception):
    """
    Structured error raised by the policy layer and the routes.

    The app maps these to HTTP responses in one place (see main.py),
    keeping a stable machine-readable `code` for the client.
    """
    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, detail: str, *, details: Optional[Any] = None):
        super().__init__(detail)
        self.detail = detail
        self.details = details

    def to_dict(self) -> dict:
        body = {"detail": self.detail, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class AuthenticationError(CoachHubError):
    status_code = 401
    code = "unauthenticated"


class AuthorizationError(CoachHubError):
    status_code = 403
    code = "forbidden"


class NotFoundError(CoachHubError):
    status_code = 404
    code = "not_found"


class ValidationError(CoachHubError):
    status_code = 400
    code = "bad_request"


class ConflictError(CoachHubError):
    status_code = 409
    code = "conflict"
