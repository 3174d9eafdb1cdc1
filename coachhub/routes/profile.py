from datetime import date, datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pymongo.database import Database

from coachhub.auth import get_current_user, get_user_by_id
from coachhub.db import PROFILES, get_db
from coachhub.errors import NotFoundError
from coachhub.policy.relationships import Relationship, RelationshipResolver
from coachhub.policy.visibility import PrivacyPolicy, profile_from_doc, project
from coachhub.schemas.profiles import ProfileUpdate
from coachhub.utils.logger import log_activity

router = APIRouter(tags=["profile"])


def _utcnow():
    return datetime.now(timezone.utc)


def _load_profile(db: Database, user: dict) -> dict:
    user_id = str(user["_id"])
    doc = dict(db[PROFILES].find_one({"user_id": user_id}) or {"user_id": user_id})
    # role lives on the account; display name falls back to the username
    doc["role"] = user.get("role", "player")
    doc.setdefault("display_name", user.get("username"))
    return profile_from_doc(doc, today=date.today())


# ---------- own profile ----------
@router.get("/profile")
def my_profile(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return {"data": project(_load_profile(db, current_user), Relationship.SELF)}


@router.put("/profile")
def update_profile(
    body: ProfileUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    changes = body.model_dump(exclude_unset=True)
    payload = {**changes, "user_id": current_user["_id"], "updated_at": _utcnow()}
    db[PROFILES].update_one({"user_id": current_user["_id"]}, {"$set": payload}, upsert=True)

    log_activity(current_user["_id"], "update_profile", {"fields": sorted(changes)})
    return {"data": project(_load_profile(db, current_user), Relationship.SELF)}


@router.put("/profile/privacy")
def update_privacy(
    settings_in: Dict[str, Any] = Body(...),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    policy = PrivacyPolicy.parse_update(settings_in)
    db[PROFILES].update_one(
        {"user_id": current_user["_id"]},
        {"$set": {"user_id": current_user["_id"], "privacy_settings": policy.to_settings(), "updated_at": _utcnow()}},
        upsert=True,
    )

    log_activity(current_user["_id"], "update_privacy", {"hidden": sorted(policy.hidden)})
    return {"data": policy.to_settings()}


# ---------- someone else's profile ----------
@router.get("/players/{player_id}")
def player_profile(
    player_id: str,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """
    Always answers 200 for an existing player; what differs by viewer
    is how much of the profile comes back.
    """
    subject = get_user_by_id(player_id)
    if not subject:
        raise NotFoundError("Player not found")

    relationship = RelationshipResolver(db).resolve(
        current_user["_id"], str(subject["_id"]), current_user.get("role")
    )
    return {
        "data": project(_load_profile(db, subject), relationship),
        "relationship": relationship.value,
    }
