import pytest
from fastapi.testclient import TestClient
import mongomock

from coachhub import db as real_db
from coachhub.auth import create_access_token, new_user_doc
from coachhub.db_init import ensure_indexes
from coachhub.main import app

@pytest.fixture(autouse=True)
def mock_db(monkeypatch):
    #replace mongodb with mongomock in-memory
    mock_client = mongomock.MongoClient()
    mock_db = mock_client["test_db"]

    monkeypatch.setattr(real_db, "db", mock_db)
    ensure_indexes(mock_db)

    yield mock_db

@pytest.fixture
def client():
    return TestClient(app)

@pytest.fixture
def make_user(mock_db):
    """Insert a user straight into the db and return its id"""
    def _make(username: str, role: str = "player") -> str:
        doc = new_user_doc(username, f"{username}@example.test", "pw", role)
        mock_db.users.insert_one(doc)
        return str(doc["_id"])
    return _make

@pytest.fixture
def headers_for():
    """Bearer header for a user id"""
    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers

@pytest.fixture
def auth_headers(client):
    """Signup + login to return an Authorization header"""
    client.post("/auth/signup", data={"username": "testuser", "password": "testpass", "email": "test@example.test"})
    res = client.post("/auth/token", data={"username": "testuser", "password": "testpass"})
    token = res.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
