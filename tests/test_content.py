"""Tests for posts and post likes."""

import os

import pytest

from borohub.config import settings


@pytest.fixture()
def author(register, login):
    register("bob")
    member = register("alice")
    login("alice")
    return member


def _create(client, member_id, content="Hello borough", media=None):
    res = client.post("/api/content/create-content", json={
        "memberId": member_id,
        "content": content,
        "media": media or [],
    })
    assert res.status_code == 201, res.text
    return res.json()["data"]


def test_create_post_links_author(client, author):
    data = _create(client, author["id"], media=["https://cdn.borohub.io/a.png"])

    post = data["post"]
    assert post["author"] == author["id"]
    assert post["media"] == ["https://cdn.borohub.io/a.png"]
    assert post["likeCount"] == 0
    assert post["likes"] == []
    assert post["comments"] == []
    assert data["member"]["contentPosts"] == [post["id"]]


def test_create_post_rejects_blank_content(client, author):
    res = client.post("/api/content/create-content", json={"memberId": author["id"], "content": "   "})
    assert res.status_code == 400


def test_create_post_rejects_bad_media_url(client, author):
    res = client.post("/api/content/create-content", json={
        "memberId": author["id"],
        "content": "pics",
        "media": ["not a url"],
    })
    assert res.status_code == 400


def test_create_post_for_another_member_forbidden(client, author):
    bob_id = author["id"] - 1
    res = client.post("/api/content/create-content", json={"memberId": bob_id, "content": "hi"})
    assert res.status_code == 403


def test_get_content_newest_first(client, author):
    first = _create(client, author["id"], "first")["post"]
    second = _create(client, author["id"], "second")["post"]

    res = client.get(f"/api/content/get-content/{author['id']}")
    ids = [p["id"] for p in res.json()["data"]["posts"]]
    assert ids == [second["id"], first["id"]]


def test_get_content_unknown_member(client, author):
    assert client.get("/api/content/get-content/9999").status_code == 404


def test_like_counts_and_duplicates(client, login, author):
    post = _create(client, author["id"])["post"]
    bob = login("bob")

    res = client.put(f"/api/content/like-content/{post['id']}", json={"memberId": bob["id"]})
    assert res.status_code == 200
    assert res.json()["data"]["post"]["likeCount"] == 1
    assert res.json()["data"]["post"]["likes"] == [bob["id"]]

    again = client.put(f"/api/content/like-content/{post['id']}", json={"memberId": bob["id"]})
    assert again.status_code == 400

    posts = client.get(f"/api/content/get-content/{author['id']}").json()["data"]["posts"]
    assert posts[0]["likeCount"] == 1


def test_unlike(client, login, author):
    post = _create(client, author["id"])["post"]
    bob = login("bob")

    never = client.put(f"/api/content/unlike-content/{post['id']}", json={"memberId": bob["id"]})
    assert never.status_code == 400

    client.put(f"/api/content/like-content/{post['id']}", json={"memberId": bob["id"]})
    res = client.put(f"/api/content/unlike-content/{post['id']}", json={"memberId": bob["id"]})
    assert res.status_code == 200
    assert res.json()["data"]["post"]["likeCount"] == 0
    assert res.json()["data"]["post"]["likes"] == []


def test_like_unknown_post(client, author):
    res = client.put("/api/content/like-content/9999", json={"memberId": author["id"]})
    assert res.status_code == 404


def test_update_post_author_only(client, login, author):
    post = _create(client, author["id"])["post"]

    res = client.put(f"/api/content/update-content/{post['id']}", json={"content": "edited"})
    assert res.status_code == 200
    assert res.json()["data"]["post"]["content"] == "edited"

    login("bob")
    res = client.put(f"/api/content/update-content/{post['id']}", json={"content": "hijacked"})
    assert res.status_code == 403


def test_delete_post_removes_comments(client, login, author):
    post = _create(client, author["id"])["post"]
    bob = login("bob")
    comment = client.post("/api/comment/create-comment", json={
        "postId": post["id"],
        "memberId": bob["id"],
        "input": "nice",
    }).json()["data"]["comment"]

    assert client.delete(f"/api/content/delete-content/{post['id']}").status_code == 403

    login("alice")
    res = client.delete(f"/api/content/delete-content/{post['id']}")
    assert res.status_code == 200
    assert res.json()["data"]["post"]["id"] == post["id"]

    assert client.get(f"/api/content/get-content/{author['id']}").json()["data"]["posts"] == []
    member = client.get(f"/api/member/{author['id']}").json()["data"]
    assert member["contentPosts"] == []

    login("bob")
    res = client.put(f"/api/comment/update-comment/{comment['id']}", json={"input": "still here?"})
    assert res.status_code == 404


def test_delete_unknown_post(client, author):
    assert client.delete("/api/content/delete-content/9999").status_code == 404


def test_create_post_with_uploaded_images(client, author):
    res = client.post(
        f"/api/content/create-content-images/{author['id']}",
        data={"content": "holiday"},
        files=[
            ("media", ("beach.png", b"\x89PNG\r\n\x1a\nfake", "image/png")),
            ("media", ("hills.jpg", b"\xff\xd8\xff\xe0fake", "image/jpeg")),
        ],
    )
    assert res.status_code == 201, res.text
    media = res.json()["data"]["post"]["media"]
    assert len(media) == 2
    assert all(url.startswith("/media/images/media-") for url in media)
    assert media[0].endswith(".png")

    served = client.get(media[0])
    assert served.status_code == 200
    assert served.content == b"\x89PNG\r\n\x1a\nfake"


def test_upload_rejects_non_images(client, author):
    res = client.post(
        f"/api/content/create-content-images/{author['id']}",
        data={"content": "script"},
        files=[("media", ("run.sh", b"echo hi", "text/x-sh"))],
    )
    assert res.status_code == 400


def _stored_files():
    return sorted(os.listdir(settings.MEDIA_ROOT))


def test_rejected_upload_writes_nothing(client, author):
    before = _stored_files()
    res = client.post(
        f"/api/content/create-content-images/{author['id']}",
        data={"content": "mixed"},
        files=[
            ("media", ("beach.png", b"\x89PNG\r\n\x1a\nfake", "image/png")),
            ("media", ("run.sh", b"echo hi", "text/x-sh")),
        ],
    )
    assert res.status_code == 400
    assert _stored_files() == before
    assert client.get(f"/api/content/get-content/{author['id']}").json()["data"]["posts"] == []


def test_oversized_upload_rejected(client, author, monkeypatch):
    monkeypatch.setattr("borohub.services.media.MAX_UPLOAD_BYTES", 16)
    monkeypatch.setattr("borohub.services.media.READ_CHUNK_BYTES", 4)
    before = _stored_files()
    res = client.post(
        f"/api/content/create-content-images/{author['id']}",
        data={"content": "too big"},
        files=[
            ("media", ("small.png", b"\x89PNG", "image/png")),
            ("media", ("large.png", b"\x89PNG" + b"x" * 64, "image/png")),
        ],
    )
    assert res.status_code == 400
    assert "too large" in res.json()["message"]
    assert _stored_files() == before
