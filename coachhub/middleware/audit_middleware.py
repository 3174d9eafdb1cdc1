# coachhub/middleware/audit_middleware.py
from __future__ import annotations

import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from coachhub.utils.audit import AccessEvent, write_audit_event

DENIAL_ACTIONS = {
    401: "auth_missing_or_invalid",
    403: "permission_denied",
    404: "not_visible",
}


def _client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else ""


class AuditMiddleware(BaseHTTPMiddleware):
    """
    Tags every response with x-request-id and records denials.

    A viewer without read access on a file is answered with not-found,
    so 404s count as denials alongside 401 and 403.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        def _record(action: str, status: int, err: str) -> None:
            write_audit_event(AccessEvent.build(
                action=action,
                status=status,
                method=request.method,
                path=request.url.path,
                request_id=request_id,
                actor=getattr(request.state, "actor", None),
                ip=_client_ip(request),
                err=err,
            ))

        try:
            response = await call_next(request)
        except Exception as e:
            _record("server_error", 500, repr(e))
            raise

        response.headers["x-request-id"] = request_id
        action = DENIAL_ACTIONS.get(response.status_code)
        if action:
            _record(action, response.status_code, f"HTTP {response.status_code}")
        return response
