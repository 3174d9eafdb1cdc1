# coachhub/auth.py
from datetime import datetime, timedelta, timezone
import uuid
from typing import Optional

from bson import ObjectId
from fastapi import Request
from jose import JWTError, jwt
from passlib.context import CryptContext

from coachhub.db import REFRESH_TOKENS, REVOKED_TOKENS, USERS, get_db
from coachhub.db.ids import to_object_id
from coachhub.errors import AuthenticationError
from coachhub.settings import settings

# --- crypto ------------------------------------------------------------------
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# --- password utils ----------------------------------------------------------
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

# --- user lookup -------------------------------------------------------------
def get_user_by_id(user_id: str) -> Optional[dict]:
    oid = to_object_id(user_id)
    if oid is None:
        return None
    return get_db()[USERS].find_one({"_id": oid})

def get_user_by_login(login: str) -> Optional[dict]:
    """Login can be either username or email."""
    login = (login or "").strip()
    return get_db()[USERS].find_one({
        "$or": [
            {"username": login},
            {"email": login.lower()},
        ]
    })

def public_user(user: dict) -> dict:
    """The identity dict handed to routes as `current_user`."""
    return {
        "_id": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "role": user.get("role", "player"),
    }

# --- JWT helpers -------------------------------------------------------------
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)

def _create_jwt(sub: str, token_type: str, expires_delta: timedelta) -> str:
    iat = _now_utc()
    exp = iat + expires_delta
    payload = {
        "sub": sub,
        "type": token_type,
        "jti": str(uuid.uuid4()),
        "iat": int(iat.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALG)

def create_access_token(sub: str) -> str:
    return _create_jwt(sub, "access", timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MIN))

def create_refresh_token(sub: str) -> str:
    token = _create_jwt(sub, "refresh", timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))
    # persist jti for server-side control
    payload = decode_token(token)
    get_db()[REFRESH_TOKENS].insert_one({
        "jti": payload["jti"],
        "sub": payload["sub"],
        "exp": payload["exp"],
        "revoked": False,
        "created_at": _now_utc(),
    })
    return token

def decode_token(raw: str) -> dict:
    try:
        return jwt.decode(raw, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

def is_revoked(jti: str) -> bool:
    return get_db()[REVOKED_TOKENS].find_one({"jti": jti}) is not None

def revoke_token(jti: str, sub: str, exp: int, reason: str = "logout") -> None:
    # upsert so double-logout is harmless
    db = get_db()
    db[REVOKED_TOKENS].update_one(
        {"jti": jti},
        {"$set": {"jti": jti, "sub": sub, "exp": exp, "reason": reason}},
        upsert=True,
    )
    db[REFRESH_TOKENS].update_one({"jti": jti}, {"$set": {"revoked": True}})

# --- dependency used by the routes -------------------------------------------
def token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get("token")

def get_current_user(request: Request) -> dict:
    """
    Pull token from Authorization header (Bearer) OR from 'token' cookie.
    The user is re-read on every request; nothing about identity is cached.
    """
    token = token_from_request(request)
    if not token:
        raise AuthenticationError("Missing authentication token")

    payload = decode_token(token)

    if payload.get("type") != "access":
        raise AuthenticationError("Wrong token type")
    if is_revoked(payload.get("jti", "")):
        raise AuthenticationError("Token has been revoked")

    user = get_user_by_id(payload.get("sub"))
    if not user:
        raise AuthenticationError("User not found")

    current = public_user(user)
    request.state.actor = current
    return current

# --- simple auth helper for router ------------------------------------------
def authenticate_user(login: str, password: str) -> Optional[dict]:
    user = get_user_by_login(login)
    if not user or not user.get("password"):
        return None
    if not verify_password(password, user["password"]):
        return None
    return user

def new_user_doc(username: str, email: str, password: str, role: str) -> dict:
    return {
        "_id": ObjectId(),
        "username": username,
        "email": email.strip().lower(),
        "password": get_password_hash(password),
        "role": role,
        "created_at": _now_utc(),
    }
