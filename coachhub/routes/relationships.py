from datetime import datetime, timezone

from bson import ObjectId
from fastapi import APIRouter, Depends
from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from coachhub.auth import get_current_user, get_user_by_id
from coachhub.authz import require_role
from coachhub.db import COACH_PLAYERS, get_db
from coachhub.db.ids import to_object_id
from coachhub.errors import ConflictError, NotFoundError, ValidationError
from coachhub.policy.relationships import (
    STATUS_ACCEPTED,
    STATUS_CANCELLED,
    STATUS_DECLINED,
    STATUS_PENDING,
)
from coachhub.schemas.profiles import InviteCreate
from coachhub.utils.logger import log_activity

router = APIRouter(prefix="/relationships", tags=["relationships"])


def _utcnow():
    return datetime.now(timezone.utc)


def _out(doc: dict) -> dict:
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc["_id"])
    return out


def _own_link(db: Database, link_id: str, user_id: str, *, as_player: bool = False) -> dict:
    """Rows the caller is not part of look exactly like missing rows."""
    oid = to_object_id(link_id)
    doc = db[COACH_PLAYERS].find_one({"_id": oid}) if oid is not None else None
    if not doc:
        raise NotFoundError("Relationship not found")
    parties = (doc["player_id"],) if as_player else (doc["player_id"], doc["coach_id"])
    if user_id not in parties:
        raise NotFoundError("Relationship not found")
    return doc


def _transition(db: Database, doc: dict, status: str) -> dict:
    now = _utcnow()
    db[COACH_PLAYERS].update_one({"_id": doc["_id"]}, {"$set": {"status": status, "updated_at": now}})
    return {**doc, "status": status, "updated_at": now}


@router.get("")
def list_relationships(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    me = current_user["_id"]
    cur = db[COACH_PLAYERS].find({"$or": [{"coach_id": me}, {"player_id": me}]}).sort("created_at", DESCENDING)
    return {"data": [_out(d) for d in cur]}


@router.post("", status_code=201)
def invite_player(
    body: InviteCreate,
    coach: dict = Depends(require_role("coach")),
    db: Database = Depends(get_db),
):
    player_id = body.player_id.strip()
    if player_id == coach["_id"]:
        raise ValidationError("Coaches cannot invite themselves")
    player = get_user_by_id(player_id)
    if not player:
        raise NotFoundError("Player not found")
    if player.get("role", "player") != "player":
        raise ValidationError("Only players can be invited")

    links = db[COACH_PLAYERS]
    existing = links.find_one({"coach_id": coach["_id"], "player_id": player_id})
    if existing:
        if existing["status"] in (STATUS_PENDING, STATUS_ACCEPTED):
            raise ConflictError(f"Relationship already {existing['status']}")
        doc = _transition(db, existing, STATUS_PENDING)
    else:
        now = _utcnow()
        doc = {
            "_id": ObjectId(),
            "coach_id": coach["_id"],
            "player_id": player_id,
            "status": STATUS_PENDING,
            "created_at": now,
            "updated_at": now,
        }
        try:
            links.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Relationship already exists")

    log_activity(coach["_id"], "invite_player", {"player_id": player_id})
    return {"data": _out(doc)}


@router.post("/{link_id}/accept")
def accept_invite(link_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    doc = _own_link(db, link_id, current_user["_id"], as_player=True)
    if doc["status"] != STATUS_PENDING:
        raise ConflictError(f"Invitation is {doc['status']}")
    doc = _transition(db, doc, STATUS_ACCEPTED)
    log_activity(current_user["_id"], "accept_coach", {"coach_id": doc["coach_id"]})
    return {"data": _out(doc)}


@router.post("/{link_id}/decline")
def decline_invite(link_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    doc = _own_link(db, link_id, current_user["_id"], as_player=True)
    if doc["status"] != STATUS_PENDING:
        raise ConflictError(f"Invitation is {doc['status']}")
    doc = _transition(db, doc, STATUS_DECLINED)
    log_activity(current_user["_id"], "decline_coach", {"coach_id": doc["coach_id"]})
    return {"data": _out(doc)}


@router.delete("/{link_id}")
def end_relationship(link_id: str, current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    doc = _own_link(db, link_id, current_user["_id"])
    doc = _transition(db, doc, STATUS_CANCELLED)
    log_activity(current_user["_id"], "end_relationship", {"coach_id": doc["coach_id"], "player_id": doc["player_id"]})
    return {"data": _out(doc)}
