# coachhub/policy/models.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from coachhub.errors import ValidationError
from coachhub.policy.levels import PermissionLevel, parse_level

logger = logging.getLogger(__name__)


def _id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _stored_level(raw: Any, share_id: Any) -> PermissionLevel:
    # a stored row we cannot read grants nothing
    try:
        return parse_level(raw)
    except ValidationError:
        logger.warning("share %s has unknown permission_level=%r, treating as none", share_id, raw)
        return PermissionLevel.NONE


@dataclass(frozen=True)
class Resource:
    """A shareable file record. Exactly one owner; never reassigned."""
    id: str
    owner_id: str
    is_public: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_doc(doc: Optional[dict]) -> Optional["Resource"]:
        if not doc or doc.get("uploaded_by") is None:
            return None
        meta = {k: v for k, v in doc.items() if k not in ("_id", "uploaded_by", "is_public")}
        return Resource(
            id=_id(doc.get("_id")),
            owner_id=_id(doc.get("uploaded_by")),
            is_public=doc.get("is_public") is True,
            metadata=meta,
        )


@dataclass(frozen=True)
class ShareGrant:
    id: str
    resource_id: str
    grantee_id: str
    grantor_id: str
    level: PermissionLevel
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @staticmethod
    def from_doc(doc: dict) -> "ShareGrant":
        return ShareGrant(
            id=_id(doc.get("_id")),
            resource_id=_id(doc.get("file_id")),
            grantee_id=_id(doc.get("shared_with_user_id")),
            grantor_id=_id(doc.get("shared_by_user_id")),
            level=_stored_level(doc.get("permission_level"), doc.get("_id")),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "file_id": self.resource_id,
            "shared_with_user_id": self.grantee_id,
            "shared_by_user_id": self.grantor_id,
            "permission_level": self.level.label,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class Comment:
    id: str
    resource_id: str
    author_id: str
    body: str
    timestamp_position: Optional[float] = None
    created_at: Optional[datetime] = None

    @staticmethod
    def from_doc(doc: dict) -> "Comment":
        return Comment(
            id=_id(doc.get("_id")),
            resource_id=_id(doc.get("file_id")),
            author_id=_id(doc.get("user_id")),
            body=doc.get("comment") or "",
            timestamp_position=doc.get("timestamp_position"),
            created_at=doc.get("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "file_id": self.resource_id,
            "user_id": self.author_id,
            "comment": self.body,
            "timestamp_position": self.timestamp_position,
            "created_at": self.created_at,
        }
