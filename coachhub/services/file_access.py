# coachhub/services/file_access.py
"""
Per-request glue between the routes and the policy engine: fetch the file
and the viewer's grant fresh, then ask `authorize` for the level.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pymongo.database import Database

from coachhub.db import FILES
from coachhub.db.ids import to_object_id
from coachhub.policy.authorization import authorize, require
from coachhub.policy.grants import ShareGrantRegistry
from coachhub.policy.levels import Action, PermissionLevel
from coachhub.policy.models import Resource


@dataclass(frozen=True)
class FileDecision:
    doc: Optional[dict]
    resource: Optional[Resource]
    level: PermissionLevel

    def require(self, action: Action, what: str = "File") -> "FileDecision":
        require(self.level, action, what=what)
        return self


def decide(db: Database, file_id: str, viewer_id: str) -> FileDecision:
    oid = to_object_id(file_id)
    doc = db[FILES].find_one({"_id": oid}) if oid is not None else None
    resource = Resource.from_doc(doc)

    grants = []
    if resource is not None and viewer_id != resource.owner_id:
        grants = ShareGrantRegistry(db).grants_for_viewer(viewer_id, [resource.id])

    return FileDecision(doc=doc, resource=resource, level=authorize(viewer_id, resource, grants))


def file_out(doc: dict, level: PermissionLevel) -> dict:
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc["_id"])
    out["is_public"] = doc.get("is_public") is True
    out["permission"] = level.label
    return out
