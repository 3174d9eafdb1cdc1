from datetime import datetime, timezone

from bson import ObjectId
from fastapi import APIRouter, Depends
from pymongo import DESCENDING
from pymongo.database import Database

from coachhub.auth import get_current_user
from coachhub.db import FILE_COMMENTS, get_db
from coachhub.db.ids import to_object_id
from coachhub.errors import AuthorizationError, NotFoundError
from coachhub.policy.authorization import can
from coachhub.policy.levels import Action, PermissionLevel
from coachhub.policy.models import Comment
from coachhub.schemas.files import CommentCreate
from coachhub.services.file_access import decide
from coachhub.utils.logger import log_activity

router = APIRouter(tags=["comments"])


@router.get("/files/{file_id}/comments")
def list_comments(
    file_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    decision = decide(db, file_id, current_user["_id"]).require(Action.READ)
    cur = db[FILE_COMMENTS].find({"file_id": decision.resource.id}).sort("created_at", DESCENDING)
    return {"data": [Comment.from_doc(d).to_dict() for d in cur]}


@router.post("/files/{file_id}/comments", status_code=201)
def create_comment(
    file_id: str,
    body: CommentCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    decision = decide(db, file_id, current_user["_id"]).require(Action.COMMENT)

    doc = {
        "_id": ObjectId(),
        "file_id": decision.resource.id,
        "user_id": current_user["_id"],
        "comment": body.comment.strip(),
        "timestamp_position": body.timestamp_position,
        "created_at": datetime.now(timezone.utc),
    }
    db[FILE_COMMENTS].insert_one(doc)

    log_activity(current_user["_id"], "create_comment", {"file_id": decision.resource.id, "comment_id": str(doc["_id"])})
    return {"data": Comment.from_doc(doc).to_dict()}


@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    viewer_id = current_user["_id"]
    oid = to_object_id(comment_id)
    doc = db[FILE_COMMENTS].find_one({"_id": oid}) if oid is not None else None
    if not doc:
        raise NotFoundError("Comment not found")
    comment = Comment.from_doc(doc)

    decision = decide(db, comment.resource_id, viewer_id)
    if decision.level < PermissionLevel.VIEW:
        raise NotFoundError("Comment not found")

    is_author = comment.author_id == viewer_id and can(decision.level, Action.COMMENT)
    if not is_author and decision.level < PermissionLevel.ADMIN:
        raise AuthorizationError("Only the author or the file owner can delete this comment")

    db[FILE_COMMENTS].delete_one({"_id": oid})
    log_activity(viewer_id, "delete_comment", {"file_id": comment.resource_id, "comment_id": comment_id})
    return {"success": True}
