# coachhub/authz.py
from __future__ import annotations

from typing import Callable

from fastapi import Depends

from coachhub.auth import get_current_user
from coachhub.errors import AuthorizationError


def require_role(*allowed_roles: str) -> Callable:
    """
    Usage:
        @router.post("/relationships")
        def invite(user: dict = Depends(require_role("coach"))):
            ...
    """
    allowed = set(r.strip().lower() for r in allowed_roles if r)

    def _dep(user: dict = Depends(get_current_user)) -> dict:
        role = (user.get("role") or "player").strip().lower()
        if role not in allowed:
            raise AuthorizationError("Insufficient role")
        return user

    return _dep
