# coachhub/policy/relationships.py
"""
Who is the viewer to the subject: the subject themself, one of the
subject's coaches, or nobody in particular.

Only profile visibility consults this. File access never does: a coach
with no grant on a player's file has no access to it.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pymongo.database import Database

from coachhub.db import COACH_PLAYERS

COACH_ROLE = "coach"

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_DECLINED = "declined"
STATUS_CANCELLED = "cancelled"


class Relationship(str, Enum):
    SELF = "self"
    COACH_OF = "coach_of"
    UNRELATED = "unrelated"

    @property
    def sees_everything(self) -> bool:
        return self in (Relationship.SELF, Relationship.COACH_OF)


def classify(
    viewer_id: Optional[str],
    subject_id: Optional[str],
    *,
    viewer_role: Optional[str] = None,
    link_status: Optional[str] = None,
) -> Relationship:
    """Pure decision over already-fetched state."""
    if not viewer_id or not subject_id:
        return Relationship.UNRELATED
    if viewer_id == subject_id:
        return Relationship.SELF
    if (viewer_role or "").strip().lower() == COACH_ROLE and link_status == STATUS_ACCEPTED:
        return Relationship.COACH_OF
    return Relationship.UNRELATED


class RelationshipResolver:
    """
    Reads coach_players on every call. Do not keep instances around
    between requests: an invitation can be accepted or revoked at any time.
    """

    def __init__(self, db: Database):
        self.links = db[COACH_PLAYERS]

    def resolve(self, viewer_id: Optional[str], subject_id: Optional[str], viewer_role: Optional[str] = None) -> Relationship:
        if not viewer_id or not subject_id:
            return Relationship.UNRELATED
        if viewer_id == subject_id:
            return Relationship.SELF
        if (viewer_role or "").strip().lower() != COACH_ROLE:
            return Relationship.UNRELATED

        link = self.links.find_one(
            {"coach_id": viewer_id, "player_id": subject_id, "status": STATUS_ACCEPTED},
            {"status": 1},
        )
        return classify(
            viewer_id,
            subject_id,
            viewer_role=viewer_role,
            link_status=link.get("status") if link else None,
        )
