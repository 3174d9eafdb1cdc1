from pymongo.database import Database

from coachhub.db import (
    ACTIVITY_LOGS,
    AUDIT_EVENTS,
    COACH_PLAYERS,
    FILE_COMMENTS,
    FILE_SHARES,
    FILES,
    PROFILES,
    REFRESH_TOKENS,
    REVOKED_TOKENS,
    USERS,
    get_db,
)


def ensure_indexes(db: Database | None = None):
    db = db if db is not None else get_db()

    # users / auth
    db[USERS].create_index("username", unique=True)
    db[USERS].create_index("email", unique=True)
    db[REFRESH_TOKENS].create_index("exp")
    db[REVOKED_TOKENS].create_index("jti", unique=True)

    # profiles
    db[PROFILES].create_index("user_id", unique=True)

    # files / shares / comments
    db[FILES].create_index([("uploaded_by", 1), ("created_at", -1)])
    db[FILES].create_index([("is_public", 1), ("created_at", -1)])
    # one active grant per (file, grantee); the registry upserts on this pair
    db[FILE_SHARES].create_index([("file_id", 1), ("shared_with_user_id", 1)], unique=True)
    db[FILE_SHARES].create_index("shared_with_user_id")
    db[FILE_COMMENTS].create_index([("file_id", 1), ("created_at", -1)])

    # coach <-> player links
    db[COACH_PLAYERS].create_index([("coach_id", 1), ("player_id", 1)], unique=True)
    db[COACH_PLAYERS].create_index([("player_id", 1), ("status", 1)])

    # activity / audit
    db[ACTIVITY_LOGS].create_index([("user_id", 1), ("timestamp", -1)])
    db[AUDIT_EVENTS].create_index([("ts", 1)])
    db[AUDIT_EVENTS].create_index([("action", 1)])
    db[AUDIT_EVENTS].create_index([("actor.user_id", 1)])
