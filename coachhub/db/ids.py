# coachhub/db/ids.py
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId


def to_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId for a hex string, or None when it cannot be one."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None
