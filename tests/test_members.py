"""Tests for member profiles, search and pictures."""


def test_get_member(client, register):
    alice = register("alice", aboutMe="Lives by the river")
    res = client.get(f"/api/member/{alice['id']}")
    assert res.status_code == 200
    assert res.json()["data"]["aboutMe"] == "Lives by the river"


def test_get_missing_member(client):
    res = client.get("/api/member/9999")
    assert res.status_code == 404
    assert res.json()["success"] is False


def test_search_is_case_insensitive_prefix(client, register):
    register("alice")
    register("alfred")
    register("bob")

    res = client.get("/api/member/reserche/AL")
    assert res.status_code == 200
    assert [m["handle"] for m in res.json()["data"]] == ["alfred", "alice"]


def test_search_treats_wildcards_literally(client, register):
    register("alice")
    assert client.get("/api/member/reserche/%25").status_code == 404
    assert client.get("/api/member/reserche/_lice").status_code == 404


def test_search_no_match(client, register):
    register("alice")
    assert client.get("/api/member/reserche/zed").status_code == 404


def test_update_own_profile(client, register, login):
    alice = register("alice")
    login("alice")

    res = client.put(f"/api/member/update/{alice['id']}", json={"location": "Brooklyn", "hobby": "chess"})
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["location"] == "Brooklyn"
    assert data["hobby"] == "chess"
    assert data["fullName"] == alice["fullName"]


def test_update_handle_must_be_unique(client, register, login):
    alice = register("alice")
    register("bob")
    login("alice")

    res = client.put(f"/api/member/update/{alice['id']}", json={"handle": "bob"})
    assert res.status_code == 400


def test_update_someone_else_forbidden(client, register, login):
    register("alice")
    bob = register("bob")
    login("alice")

    res = client.put(f"/api/member/update/{bob['id']}", json={"hobby": "pranks"})
    assert res.status_code == 403


def test_admin_may_update_anyone(client, register, register_admin, login):
    register_admin("mod")
    bob = register("bob")
    login("mod")

    res = client.put(f"/api/member/update/{bob['id']}", json={"hobby": "gardening"})
    assert res.status_code == 200


def test_avatar_upload(client, register, login):
    alice = register("alice")
    login("alice")

    res = client.put(
        f"/api/member/avatarUpload/{alice['id']}",
        files={"avatar": ("me.webp", b"RIFFfakeWEBP", "image/webp")},
    )
    assert res.status_code == 200, res.text
    avatar = res.json()["data"]["member"]["avatar"]
    assert avatar.startswith("/media/images/avatar-")
    assert client.get(avatar).status_code == 200


def test_cover_image_upload_requires_file(client, register, login):
    alice = register("alice")
    login("alice")

    res = client.put(f"/api/member/coverImageUpload/{alice['id']}")
    assert res.status_code == 400


def test_cover_image_upload(client, register, login):
    alice = register("alice")
    login("alice")

    res = client.put(
        f"/api/member/coverImageUpload/{alice['id']}",
        files={"coverImage": ("street.jpeg", b"\xff\xd8\xff\xe0", "image/jpeg")},
    )
    assert res.status_code == 200
    assert res.json()["data"]["member"]["coverImage"].startswith("/media/images/coverImage-")


def test_restrictions_and_email_hidden_from_others(client, register, login):
    alice = register("alice")
    bob = register("bob")
    login("alice")
    client.post(f"/api/member/restricted/{alice['id']}", json={"restrictedUserId": bob["id"]})

    own = client.get(f"/api/member/{alice['id']}").json()["data"]
    assert own["restrictedUsers"] == [bob["id"]]
    assert own["emailAddress"] == "alice@borohub.io"

    login("bob")
    public = client.get(f"/api/member/{alice['id']}").json()["data"]
    assert "restrictedUsers" not in public
    assert "emailAddress" not in public
    assert public["handle"] == "alice"

    client.cookies.clear()
    found = client.get("/api/member/reserche/alice").json()["data"][0]
    assert "restrictedUsers" not in found
    assert "emailAddress" not in found


def test_admin_sees_private_fields(client, register, register_admin, login):
    alice = register("alice")
    register_admin("mod")
    login("mod")

    data = client.get(f"/api/member/{alice['id']}").json()["data"]
    assert data["emailAddress"] == "alice@borohub.io"
    assert data["restrictedUsers"] == []
