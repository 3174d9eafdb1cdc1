# coachhub/policy/levels.py
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional

from coachhub.errors import ValidationError


class PermissionLevel(IntEnum):
    """
    Nested capability tiers. A higher level includes every lower one:
    admin > edit > comment > view > none.
    """
    NONE = 0
    VIEW = 1
    COMMENT = 2
    EDIT = 3
    ADMIN = 4

    @property
    def label(self) -> str:
        return self.name.lower()

    def __str__(self) -> str:
        return self.label


# Levels an owner may hand out. ADMIN stays with the owner.
GRANTABLE_LEVELS = (PermissionLevel.VIEW, PermissionLevel.COMMENT, PermissionLevel.EDIT)


def parse_level(raw: Optional[str], *, grantable_only: bool = False) -> PermissionLevel:
    """
    Parse a wire literal ("view", "comment", "edit", "admin").
    Raises ValidationError for anything else.
    """
    value = raw.strip().lower() if isinstance(raw, str) else ""
    try:
        level = PermissionLevel[value.upper()] if value else None
    except KeyError:
        level = None
    if level is None or level is PermissionLevel.NONE:
        raise ValidationError(f"Invalid permission level: {raw!r}")
    if grantable_only and level not in GRANTABLE_LEVELS:
        raise ValidationError(f"Permission level {level.label!r} cannot be granted")
    return level


class Action(str, Enum):
    READ = "read"
    COMMENT = "comment"
    EDIT = "edit"
    MANAGE_SHARES = "manage_shares"

    @property
    def minimum(self) -> PermissionLevel:
        return ACTION_MINIMUM[self]


ACTION_MINIMUM = {
    Action.READ: PermissionLevel.VIEW,
    Action.COMMENT: PermissionLevel.COMMENT,
    Action.EDIT: PermissionLevel.EDIT,
    Action.MANAGE_SHARES: PermissionLevel.ADMIN,
}
