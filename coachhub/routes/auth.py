# coachhub/routes/auth.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm

from coachhub.auth import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    new_user_doc,
    revoke_token,
    token_from_request,
)
from coachhub.db import USERS, get_db
from coachhub.errors import AuthenticationError, ConflictError, ValidationError
from coachhub.settings import settings
from coachhub.utils.logger import log_activity

router = APIRouter(prefix="/auth", tags=["auth"])

ROLES = ("coach", "player")

# ---------- Signup ----------
@router.post("/signup", status_code=201)
def signup(
    username: str = Form(...),
    password: str = Form(...),
    email: str = Form(...),
    role: str = Form("player"),
):
    role = role.strip().lower()
    if role not in ROLES:
        raise ValidationError(f"role must be one of {', '.join(ROLES)}")

    users = get_db()[USERS]
    if users.find_one({"username": username}):
        raise ConflictError("Username already exists")
    if users.find_one({"email": email.strip().lower()}):
        raise ConflictError("Email already registered")

    doc = new_user_doc(username, email, password, role)
    users.insert_one(doc)

    log_activity(user_id=str(doc["_id"]), action="signup", metadata={"email": doc["email"], "role": role})
    return {"message": "User created", "id": str(doc["_id"])}

# ---------- Username/Password Login ----------
@router.post("/token")
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    user = authenticate_user(form_data.username, form_data.password)
    if not user:
        raise AuthenticationError("Invalid credentials")

    sub = str(user["_id"])  # must be string for JWT
    access_token = create_access_token(sub)
    refresh_token = create_refresh_token(sub)

    log_activity(user_id=sub, action="login_password", metadata={})

    # Return tokens in JSON for frontend, AND set cookies for auto-login
    resp = JSONResponse({
        "access_token": access_token,
        "token_type": "bearer",
        "refresh_token": refresh_token,
    })
    resp.set_cookie(key="token", value=access_token, httponly=False, samesite="lax")
    resp.set_cookie(key=settings.REFRESH_TOKEN_COOKIE, value=refresh_token, httponly=True, samesite="lax")
    return resp

# ---------- Who am I ----------
@router.get("/me")
def me(current_user: dict = Depends(get_current_user)):
    return current_user

# ---------- Logout ----------
@router.post("/logout")
def logout(request: Request):
    # revoke the presented access token and the refresh cookie, whichever are present
    for raw in (token_from_request(request), request.cookies.get(settings.REFRESH_TOKEN_COOKIE)):
        if not raw:
            continue
        try:
            p = decode_token(raw)
        except AuthenticationError:
            continue
        revoke_token(p["jti"], p["sub"], p["exp"], reason="logout")

    response = JSONResponse({"message": "Logged Out"})
    response.delete_cookie("token")
    response.delete_cookie(settings.REFRESH_TOKEN_COOKIE)
    return response
