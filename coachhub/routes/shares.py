from fastapi import APIRouter, Depends
from pymongo.database import Database

from coachhub.auth import get_current_user
from coachhub.db import get_db
from coachhub.errors import NotFoundError
from coachhub.policy.grants import ShareGrantRegistry
from coachhub.policy.levels import Action
from coachhub.schemas.files import ShareCreate
from coachhub.services.file_access import decide
from coachhub.utils.logger import log_activity

router = APIRouter(tags=["shares"])


# ---------------------------------
# Share list (GET /files/{id}/shares)
# ---------------------------------
@router.get("/files/{file_id}/shares")
def list_shares(
    file_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    decision = decide(db, file_id, current_user["_id"]).require(Action.MANAGE_SHARES)
    grants = ShareGrantRegistry(db).list_for(decision.resource.id)
    return {"data": [g.to_dict() for g in grants]}


# -----------------------------------
# Grant / re-grant (POST /files/{id}/shares)
# -----------------------------------
@router.post("/files/{file_id}/shares")
def create_share(
    file_id: str,
    body: ShareCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    decision = decide(db, file_id, current_user["_id"]).require(Action.MANAGE_SHARES)

    grant = ShareGrantRegistry(db).grant(
        decision.resource.id,
        current_user["_id"],
        body.shared_with_user_id.strip(),
        body.permission_level,
    )

    log_activity(
        current_user["_id"],
        "share_file",
        {"file_id": grant.resource_id, "grantee": grant.grantee_id, "level": grant.level.label},
    )
    return {"data": grant.to_dict()}


# ------------------------------
# Revoke (DELETE /shares/{id})
# ------------------------------
@router.delete("/shares/{share_id}")
def revoke_share(
    share_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    registry = ShareGrantRegistry(db)
    grant = registry.get(share_id)
    if grant is None:
        raise NotFoundError("Share not found")

    # a grantee sees the file but still cannot curate its share list
    decide(db, grant.resource_id, current_user["_id"]).require(Action.MANAGE_SHARES, what="Share")
    revoked = registry.revoke(share_id, current_user["_id"])

    log_activity(
        current_user["_id"],
        "revoke_share",
        {"file_id": revoked.resource_id, "grantee": revoked.grantee_id, "share_id": share_id},
    )
    return {"success": True}
