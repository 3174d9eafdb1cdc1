import pytest


@pytest.fixture
def shared_file(client, make_user, headers_for):
    ids = {name: make_user(name) for name in ("owner", "commenter", "viewer", "stranger")}
    h = {name: headers_for(uid) for name, uid in ids.items()}

    res = client.post("/files", headers=h["owner"], json={"file_name": "game7.mp4", "is_public": True})
    fid = res.json()["data"]["id"]
    client.post(f"/files/{fid}/shares", headers=h["owner"],
                json={"shared_with_user_id": ids["commenter"], "permission_level": "comment"})
    return fid, ids, h


def test_comment_needs_comment_level(client, shared_file):
    fid, _, h = shared_file

    res = client.post(f"/files/{fid}/comments", headers=h["commenter"],
                      json={"comment": "watch the gap at 1:12", "timestamp_position": 72})
    assert res.status_code == 201
    assert res.json()["data"]["timestamp_position"] == 72

    # public view alone is not enough to comment
    res = client.post(f"/files/{fid}/comments", headers=h["viewer"], json={"comment": "hi"})
    assert res.status_code == 403

    # but it is enough to read them
    res = client.get(f"/files/{fid}/comments", headers=h["viewer"])
    assert res.status_code == 200
    assert [c["comment"] for c in res.json()["data"]] == ["watch the gap at 1:12"]


def test_comments_hidden_on_private_file(client, shared_file):
    fid, _, h = shared_file
    client.patch(f"/files/{fid}", headers=h["owner"], json={"is_public": False})

    assert client.get(f"/files/{fid}/comments", headers=h["stranger"]).status_code == 404
    assert client.post(f"/files/{fid}/comments", headers=h["stranger"], json={"comment": "x"}).status_code == 404


def test_author_and_owner_can_delete(client, shared_file):
    fid, _, h = shared_file
    c1 = client.post(f"/files/{fid}/comments", headers=h["commenter"], json={"comment": "one"}).json()["data"]
    c2 = client.post(f"/files/{fid}/comments", headers=h["commenter"], json={"comment": "two"}).json()["data"]

    # a public viewer can see it but cannot delete someone else's comment
    assert client.delete(f"/comments/{c1['id']}", headers=h["viewer"]).status_code == 403

    assert client.delete(f"/comments/{c1['id']}", headers=h["commenter"]).status_code == 200
    assert client.delete(f"/comments/{c2['id']}", headers=h["owner"]).status_code == 200

    res = client.get(f"/files/{fid}/comments", headers=h["owner"])
    assert res.json()["data"] == []


def test_delete_unknown_comment(client, shared_file):
    _, _, h = shared_file
    assert client.delete("/comments/64b7f0000000000000000000", headers=h["owner"]).status_code == 404
    assert client.delete("/comments/bogus", headers=h["owner"]).status_code == 404


def test_author_loses_delete_after_revoke_on_private_file(client, shared_file, mock_db):
    fid, ids, h = shared_file
    client.patch(f"/files/{fid}", headers=h["owner"], json={"is_public": False})
    c = client.post(f"/files/{fid}/comments", headers=h["commenter"], json={"comment": "mine"}).json()["data"]

    share = mock_db.file_shares.find_one({"shared_with_user_id": ids["commenter"]})
    client.delete(f"/shares/{share['_id']}", headers=h["owner"])

    assert client.delete(f"/comments/{c['id']}", headers=h["commenter"]).status_code == 404
