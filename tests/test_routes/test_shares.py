import pytest


@pytest.fixture
def f1(client, make_user, headers_for):
    ids = {name: make_user(name) for name in ("u1", "u2", "u3")}
    h = {name: headers_for(uid) for name, uid in ids.items()}
    res = client.post("/files", headers=h["u1"], json={"file_name": "scouting.pdf"})
    return res.json()["data"]["id"], ids, h


def _share(client, fid, headers, grantee, level="view"):
    return client.post(f"/files/{fid}/shares", headers=headers,
                       json={"shared_with_user_id": grantee, "permission_level": level})


def test_share_and_revoke_flow(client, f1):
    fid, ids, h = f1

    res = _share(client, fid, h["u1"], ids["u2"])
    assert res.status_code == 200
    share_id = res.json()["data"]["id"]

    res = client.get(f"/files/{fid}", headers=h["u2"])
    assert res.status_code == 200
    assert res.json()["data"]["permission"] == "view"
    assert client.get(f"/files/{fid}", headers=h["u3"]).status_code == 404

    res = client.delete(f"/shares/{share_id}", headers=h["u1"])
    assert res.status_code == 200

    # access is gone on the very next request
    assert client.get(f"/files/{fid}", headers=h["u2"]).status_code == 404
    assert client.get("/files", headers=h["u2"]).json()["data"] == []


def test_regrant_replaces(client, f1):
    fid, ids, h = f1
    _share(client, fid, h["u1"], ids["u2"], "view")
    _share(client, fid, h["u1"], ids["u2"], "edit")

    res = client.get(f"/files/{fid}/shares", headers=h["u1"])
    assert res.status_code == 200
    grants = res.json()["data"]
    assert len(grants) == 1
    assert grants[0]["permission_level"] == "edit"


def test_only_owner_manages_shares(client, f1):
    fid, ids, h = f1
    share_id = _share(client, fid, h["u1"], ids["u2"], "edit").json()["data"]["id"]

    # a grantee with edit can see the file but not its share list
    assert client.get(f"/files/{fid}/shares", headers=h["u2"]).status_code == 403
    assert _share(client, fid, h["u2"], ids["u3"]).status_code == 403
    # nor remove their own access
    assert client.delete(f"/shares/{share_id}", headers=h["u2"]).status_code == 403

    # someone with no access at all just gets not-found
    assert client.get(f"/files/{fid}/shares", headers=h["u3"]).status_code == 404
    assert client.delete(f"/shares/{share_id}", headers=h["u3"]).status_code == 404

    assert client.get(f"/files/{fid}", headers=h["u2"]).status_code == 200


def test_bad_share_requests(client, f1):
    fid, ids, h = f1
    res = _share(client, fid, h["u1"], ids["u2"], "admin")
    assert res.status_code == 400
    assert res.json()["code"] == "bad_request"

    assert _share(client, fid, h["u1"], ids["u2"], "owner").status_code == 400
    assert _share(client, fid, h["u1"], ids["u1"]).status_code == 400
    assert _share(client, fid, h["u1"], "64b7f0000000000000000000").status_code == 404
    assert client.delete("/shares/64b7f0000000000000000000", headers=h["u1"]).status_code == 404


def test_coach_link_does_not_open_files(client, make_user, headers_for, mock_db):
    coach = make_user("coach", role="coach")
    player = make_user("player")
    mock_db.coach_players.insert_one({"coach_id": coach, "player_id": player, "status": "accepted"})

    res = client.post("/files", headers=headers_for(player), json={"file_name": "journal.txt"})
    fid = res.json()["data"]["id"]

    assert client.get(f"/files/{fid}", headers=headers_for(coach)).status_code == 404
