import re
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Query
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from coachhub.auth import get_current_user
from coachhub.db import FILE_COMMENTS, FILES, get_db
from coachhub.errors import ValidationError
from coachhub.policy.authorization import authorize, visible_files_filter
from coachhub.policy.grants import ShareGrantRegistry
from coachhub.policy.levels import Action
from coachhub.policy.models import Resource
from coachhub.schemas.files import FileCreate, FileUpdate
from coachhub.services.file_access import decide, file_out
from coachhub.settings import settings
from coachhub.utils.logger import log_activity

router = APIRouter(prefix="/files", tags=["files"])


def _utcnow():
    return datetime.now(timezone.utc)


# ---------------------------
# List / search (GET /files)
# ---------------------------
@router.get("")
def list_files(
    q: Optional[str] = Query(None),
    entity_type: Optional[str] = Query(None),
    file_type: Optional[str] = Query(None),
    sort: str = Query("newest"),
    page: int = Query(1),
    page_size: int = Query(settings.SEARCH_DEFAULT_PAGE_SIZE),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    viewer_id = current_user["_id"]
    page = max(1, page)
    page_size = settings.clamp_page_size(page_size)

    # grants read fresh per request; a just-revoked share must not show up
    grants = ShareGrantRegistry(db).grants_for_viewer(viewer_id)
    shared_ids = [ObjectId(g.resource_id) for g in grants if ObjectId.is_valid(g.resource_id)]

    clauses = [visible_files_filter(viewer_id, shared_ids)]
    if entity_type:
        clauses.append({"entity_type": entity_type})
    if file_type:
        clauses.append({"file_type": {"$regex": "^" + re.escape(file_type), "$options": "i"}})
    if q:
        pattern = {"$regex": re.escape(q.strip()), "$options": "i"}
        clauses.append({"$or": [{"file_name": pattern}, {"description": pattern}]})
    query = {"$and": clauses}

    direction = ASCENDING if sort == "oldest" else DESCENDING
    files_col = db[FILES]
    count = files_col.count_documents(query)
    docs = list(
        files_col.find(query)
        .sort([("created_at", direction), ("_id", direction)])
        .skip((page - 1) * page_size)
        .limit(page_size)
    )

    data = [file_out(d, authorize(viewer_id, Resource.from_doc(d), grants)) for d in docs]
    return {"data": data, "count": count, "page": page, "page_size": page_size}


# ----------------------------
# Create record (POST /files)
# ----------------------------
@router.post("", status_code=201)
def create_file(
    body: FileCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    now = _utcnow()
    doc = body.model_dump()
    doc.update({
        "_id": ObjectId(),
        "uploaded_by": current_user["_id"],
        "created_at": now,
        "updated_at": now,
    })
    db[FILES].insert_one(doc)

    log_activity(current_user["_id"], "create_file", {"file_id": str(doc["_id"]), "is_public": doc["is_public"]})
    return {"data": file_out(doc, authorize(current_user["_id"], Resource.from_doc(doc)))}


# --------------------------------
# Read one (GET /files/{file_id})
# --------------------------------
@router.get("/{file_id}")
def get_file(
    file_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    decision = decide(db, file_id, current_user["_id"]).require(Action.READ)
    return {"data": file_out(decision.doc, decision.level)}


# ------------------------------------
# Edit metadata (PATCH /files/{file_id})
# ------------------------------------
@router.patch("/{file_id}")
def update_file(
    file_id: str,
    body: FileUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    decision = decide(db, file_id, current_user["_id"]).require(Action.EDIT)

    changes = body.model_dump(exclude_unset=True)
    if "file_name" in changes and changes["file_name"] is None:
        raise ValidationError("file_name cannot be null")
    if "is_public" in changes:
        if changes["is_public"] is None:
            changes.pop("is_public")
        elif changes["is_public"] != decision.resource.is_public:
            # making a file public (or private) is a sharing decision
            decision.require(Action.MANAGE_SHARES)

    if changes:
        changes["updated_at"] = _utcnow()
        db[FILES].update_one({"_id": decision.doc["_id"]}, {"$set": changes})
        log_activity(current_user["_id"], "update_file", {"file_id": file_id, "fields": sorted(changes)})

    fresh = decide(db, file_id, current_user["_id"])
    return {"data": file_out(fresh.doc, fresh.level)}


# ----------------------------------
# Delete (DELETE /files/{file_id})
# ----------------------------------
@router.delete("/{file_id}")
def delete_file(
    file_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    decision = decide(db, file_id, current_user["_id"]).require(Action.MANAGE_SHARES)

    db[FILES].delete_one({"_id": decision.doc["_id"]})
    removed_shares = ShareGrantRegistry(db).remove_all_for(decision.resource.id)
    removed_comments = db[FILE_COMMENTS].delete_many({"file_id": decision.resource.id}).deleted_count

    log_activity(
        current_user["_id"],
        "delete_file",
        {"file_id": file_id, "shares_removed": removed_shares, "comments_removed": removed_comments},
    )
    return {"success": True}
