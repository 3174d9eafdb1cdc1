# coachhub/db/__init__.py
from pymongo import MongoClient
from pymongo.database import Database

from coachhub.settings import settings

# MongoClient connects lazily, so importing this module never blocks.
client = MongoClient(settings.MONGO_URI)
db = client[settings.MONGO_DB]

# --- Collection names (one source of truth) ---
USERS = "users"
PROFILES = "profiles"
FILES = "files"
FILE_SHARES = "file_shares"
FILE_COMMENTS = "file_comments"
COACH_PLAYERS = "coach_players"
ACTIVITY_LOGS = "activity_logs"
AUDIT_EVENTS = "audit_events"
REFRESH_TOKENS = "refresh_tokens"
REVOKED_TOKENS = "revoked_tokens"


def get_db() -> Database:
    """
    Current database handle. Looked up on every call so tests can swap
    the module-level `db` for an in-memory one.
    """
    return db
