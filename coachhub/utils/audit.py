# coachhub/utils/audit.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from coachhub.db import AUDIT_EVENTS, get_db

logger = logging.getLogger(__name__)

# first path segment -> resource kind named in the audit record
_TARGET_KINDS = {
    "files": "file",
    "shares": "share",
    "comments": "comment",
    "players": "profile",
    "relationships": "relationship",
}


def target_from_path(path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Best guess at what a request was aimed at, e.g.
    "/files/abc/comments" -> ("file", "abc"), "/profile" -> (None, None).
    """
    parts = [p for p in (path or "").split("/") if p]
    if not parts or parts[0] not in _TARGET_KINDS:
        return None, None
    return _TARGET_KINDS[parts[0]], (parts[1] if len(parts) > 1 else None)


@dataclass(frozen=True)
class AccessEvent:
    """One denied (or failed) request, as stored in `audit_events`."""
    action: str
    status: int
    method: str
    path: str
    request_id: str
    viewer_id: Optional[str] = None
    viewer_role: Optional[str] = None
    target_kind: Optional[str] = None
    target_id: Optional[str] = None
    ip: str = ""
    err: Optional[str] = None

    @classmethod
    def build(cls, *, action, status, method, path, request_id, actor=None, ip="", err=None):
        kind, target_id = target_from_path(path)
        actor = actor or {}
        return cls(
            action=action,
            status=status,
            method=method,
            path=path,
            request_id=request_id,
            viewer_id=actor.get("_id"),
            viewer_role=actor.get("role"),
            target_kind=kind,
            target_id=target_id,
            ip=ip,
            err=err,
        )


def write_audit_event(event: AccessEvent) -> None:
    """Store an access event. Never raises; a failed write is only logged."""
    try:
        doc = asdict(event)
        doc["ts"] = datetime.now(timezone.utc)
        get_db()[AUDIT_EVENTS].insert_one(doc)
    except Exception:
        logger.warning("audit write failed for action=%s path=%s", event.action, event.path, exc_info=True)
