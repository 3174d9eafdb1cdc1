from datetime import datetime, timezone

from coachhub.db import ACTIVITY_LOGS, get_db


def log_activity(user_id: str, action: str, metadata: dict | None = None):
    get_db()[ACTIVITY_LOGS].insert_one({
        "user_id": user_id,
        "action": action,
        "timestamp": datetime.now(timezone.utc),
        "metadata": metadata or {}
    })
