# coachhub/policy/authorization.py
"""
The one place that decides what a viewer may do with a file.

Every handler calls `authorize` and gates on the returned level, so the
owner / public / shared rule lives here and nowhere else.
"""
from __future__ import annotations

from typing import Iterable, Optional

from coachhub.errors import AuthorizationError, NotFoundError
from coachhub.policy.levels import Action, PermissionLevel
from coachhub.policy.models import Resource, ShareGrant


def find_grant(resource_id: str, viewer_id: str, grants: Iterable[ShareGrant]) -> Optional[ShareGrant]:
    for g in grants:
        if g.resource_id == resource_id and g.grantee_id == viewer_id:
            return g
    return None


def authorize(
    viewer_id: Optional[str],
    resource: Optional[Resource],
    grants: Iterable[ShareGrant] = (),
) -> PermissionLevel:
    """
    Never raises: missing viewer or missing resource is simply NONE.
    """
    if not viewer_id or resource is None:
        return PermissionLevel.NONE

    if viewer_id == resource.owner_id:
        return PermissionLevel.ADMIN

    level = PermissionLevel.VIEW if resource.is_public else PermissionLevel.NONE

    grant = find_grant(resource.id, viewer_id, grants)
    if grant is not None:
        # an explicit grant only ever raises the public baseline; ADMIN stays with the owner
        level = max(level, min(grant.level, PermissionLevel.EDIT))

    return level


def can(level: PermissionLevel, action: Action) -> bool:
    return level >= action.minimum


def require(level: PermissionLevel, action: Action, *, what: str = "File") -> PermissionLevel:
    """
    Gate an action. Viewers who cannot even read get the same not-found
    answer as for a missing record, so existence never leaks.
    """
    if level < PermissionLevel.VIEW:
        raise NotFoundError(f"{what} not found")
    if not can(level, action):
        raise AuthorizationError(
            f"Requires {action.minimum.label} permission",
            details={"action": action.value, "have": level.label, "need": action.minimum.label},
        )
    return level


def visible_files_filter(viewer_id: str, shared_file_ids: Iterable) -> dict:
    """
    Mongo filter matching exactly the files `authorize` rates >= VIEW:
    owned, public, or explicitly shared with the viewer.
    """
    clauses = [{"uploaded_by": viewer_id}, {"is_public": True}]
    ids = list(shared_file_ids)
    if ids:
        clauses.append({"_id": {"$in": ids}})
    return {"$or": clauses}
