# coachhub/policy/grants.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from coachhub.db import FILE_SHARES, FILES, USERS
from coachhub.db.ids import to_object_id
from coachhub.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from coachhub.policy.levels import GRANTABLE_LEVELS, PermissionLevel, parse_level
from coachhub.policy.models import Resource, ShareGrant

logger = logging.getLogger(__name__)


def _utcnow():
    return datetime.now(timezone.utc)


class ShareGrantRegistry:
    """
    The file_shares collection: at most one grant per (file, grantee),
    curated by the file's owner only.

    Uniqueness of the pair is enforced by the index created in
    db_init.ensure_indexes; grant() upserts on it, so two concurrent
    grants for the same pair end with one row (last writer wins).
    """

    def __init__(self, db: Database):
        self.files = db[FILES]
        self.shares = db[FILE_SHARES]
        self.users = db[USERS]

    # ---------- reads ----------
    def load_resource(self, resource_id: str) -> Optional[Resource]:
        oid = to_object_id(resource_id)
        if oid is None:
            return None
        return Resource.from_doc(self.files.find_one({"_id": oid}))

    def get(self, grant_id: str) -> Optional[ShareGrant]:
        oid = to_object_id(grant_id)
        if oid is None:
            return None
        doc = self.shares.find_one({"_id": oid})
        return ShareGrant.from_doc(doc) if doc else None

    def list_for(self, resource_id: str) -> List[ShareGrant]:
        cur = self.shares.find({"file_id": str(resource_id)}).sort("created_at", ASCENDING)
        return [ShareGrant.from_doc(d) for d in cur]

    def grants_for_viewer(self, viewer_id: str, resource_ids: Optional[Iterable[str]] = None) -> List[ShareGrant]:
        q = {"shared_with_user_id": viewer_id}
        if resource_ids is not None:
            q["file_id"] = {"$in": [str(r) for r in resource_ids]}
        grants = (ShareGrant.from_doc(d) for d in self.shares.find(q))
        return [g for g in grants if g.level > PermissionLevel.NONE]

    # ---------- writes ----------
    def grant(
        self,
        resource_id: str,
        grantor_id: str,
        grantee_id: str,
        level: Union[str, PermissionLevel],
    ) -> ShareGrant:
        if not resource_id or not grantor_id or not grantee_id:
            raise ValidationError("resource_id, grantor_id and grantee_id are required")

        if isinstance(level, PermissionLevel):
            if level not in GRANTABLE_LEVELS:
                raise ValidationError(f"Permission level {level.label!r} cannot be granted")
        else:
            level = parse_level(level, grantable_only=True)

        resource = self.load_resource(resource_id)
        if resource is None:
            raise NotFoundError("File not found")
        if grantor_id != resource.owner_id:
            raise AuthorizationError("Only the file owner can share it")
        if grantee_id == resource.owner_id:
            raise ValidationError("The owner already has full access")

        grantee_oid = to_object_id(grantee_id)
        if grantee_oid is None or self.users.find_one({"_id": grantee_oid}, {"_id": 1}) is None:
            raise NotFoundError("User not found")

        key = {"file_id": resource.id, "shared_with_user_id": grantee_id}
        now = _utcnow()
        changes = {
            "$set": {
                "permission_level": level.label,
                "shared_by_user_id": grantor_id,
                "updated_at": now,
            },
            "$setOnInsert": {"created_at": now},
        }
        try:
            doc = self.shares.find_one_and_update(
                key, changes, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # lost an insert race for the same pair; the row exists now, so update it
            logger.info("grant upsert raced for file=%s grantee=%s, retrying", resource.id, grantee_id)
            changes.pop("$setOnInsert")
            doc = self.shares.find_one_and_update(key, changes, return_document=ReturnDocument.AFTER)
            if doc is None:
                raise ConflictError("Share changed concurrently, try again")

        return ShareGrant.from_doc(doc)

    def revoke(self, grant_id: str, requester_id: str) -> ShareGrant:
        grant = self.get(grant_id)
        if grant is None:
            raise NotFoundError("Share not found")

        resource = self.load_resource(grant.resource_id)
        if resource is None:
            raise NotFoundError("File not found")
        if requester_id != resource.owner_id:
            raise AuthorizationError("Only the file owner can revoke shares")

        self.shares.delete_one({"_id": to_object_id(grant.id)})
        return grant

    def remove_all_for(self, resource_id: str) -> int:
        return self.shares.delete_many({"file_id": str(resource_id)}).deleted_count
