from coachhub.auth import decode_token


def test_signup_and_login(client):
    res = client.post("/auth/signup", data={"username": "alice", "password": "wonder", "email": "alice@example.test"})
    assert res.status_code == 201
    assert "User created" in res.json()["message"]

    res = client.post("/auth/token", data={"username": "alice", "password": "wonder"})
    assert res.status_code == 200
    assert "access_token" in res.json()

def test_login_with_email(client):
    client.post("/auth/signup", data={"username": "bea", "password": "pw", "email": "Bea@Example.test"})
    res = client.post("/auth/token", data={"username": "bea@example.test", "password": "pw"})
    assert res.status_code == 200

def test_duplicate_username(client):
    client.post("/auth/signup", data={"username": "alice", "password": "wonder", "email": "a1@example.test"})
    res = client.post("/auth/signup", data={"username": "alice", "password": "other", "email": "a2@example.test"})
    assert res.status_code == 409
    assert res.json()["code"] == "conflict"

def test_bad_role_rejected(client):
    res = client.post("/auth/signup", data={"username": "z", "password": "pw", "email": "z@example.test", "role": "admin"})
    assert res.status_code == 400

def test_wrong_password(client):
    client.post("/auth/signup", data={"username": "alice", "password": "wonder", "email": "alice@example.test"})
    res = client.post("/auth/token", data={"username": "alice", "password": "nope"})
    assert res.status_code == 401

def test_profile(client, auth_headers):
    res = client.get("/auth/me", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["username"] == "testuser"
    assert res.json()["role"] == "player"

def test_missing_and_garbage_tokens(client):
    res = client.get("/auth/me")
    assert res.status_code == 401
    assert res.json()["code"] == "unauthenticated"

    res = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401

def test_denials_are_audited(client, mock_db):
    client.get("/files")
    event = mock_db.audit_events.find_one({"action": "auth_missing_or_invalid"})
    assert event is not None
    assert event["path"] == "/files"
    assert event["method"] == "GET"

def test_logout_revokes_access_token(client, auth_headers, mock_db):
    assert client.get("/auth/me", headers=auth_headers).status_code == 200

    res = client.post("/auth/logout", headers=auth_headers)
    assert res.status_code == 200

    res = client.get("/auth/me", headers=auth_headers)
    assert res.status_code == 401
    assert res.json()["detail"] == "Token has been revoked"
    access = decode_token(auth_headers["Authorization"].split(" ", 1)[1])
    assert mock_db.revoked_tokens.find_one({"jti": access["jti"]})["reason"] == "logout"

def test_logout_without_token(client):
    res = client.post("/auth/logout")
    assert res.status_code == 200
