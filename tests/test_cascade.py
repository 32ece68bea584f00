"""Tests for member deletion and its cascade across the other collections."""

import pytest


@pytest.fixture()
def community(client, register, register_admin, login):
    """
    alice and bob follow each other, carol restricted alice.
    alice liked bob's post and commented on it, carol replied to that
    comment; bob commented on alice's post. bob opened a chat with alice
    and carol where bob replied to a message from alice.
    """
    admin = register_admin("mod")
    alice = register("alice")
    bob = register("bob")
    carol = register("carol")

    login("alice")
    alice_post = client.post("/api/content/create-content", json={
        "memberId": alice["id"], "content": "alice here",
    }).json()["data"]["post"]
    client.put(f"/api/member/follow/{bob['id']}", json={"followerId": alice["id"]})

    login("bob")
    bob_post = client.post("/api/content/create-content", json={
        "memberId": bob["id"], "content": "bob here",
    }).json()["data"]["post"]
    client.put(f"/api/member/follow/{alice['id']}", json={"followerId": bob["id"]})
    client.post("/api/comment/create-comment", json={
        "postId": alice_post["id"], "memberId": bob["id"], "input": "hi alice",
    })
    chat = client.post("/api/chat/create-chat", json={
        "participantsId": [alice["id"], carol["id"]],
    }).json()["data"]["chat"]

    login("alice")
    client.put(f"/api/content/like-content/{bob_post['id']}", json={"memberId": alice["id"]})
    alice_comment = client.post("/api/comment/create-comment", json={
        "postId": bob_post["id"], "memberId": alice["id"], "input": "hi bob",
    }).json()["data"]["comment"]
    alice_entry = client.post(f"/api/chat/create-chat-entry/{chat['id']}", json={
        "content": "hello all",
    }).json()["data"]["chatEntry"]

    login("bob")
    client.post(f"/api/chat/create-chat-entry/{chat['id']}", json={
        "content": "hey", "replyTo": alice_entry["id"],
    })

    login("carol")
    client.post(f"/api/member/restricted/{carol['id']}", json={"restrictedUserId": alice["id"]})
    client.post("/api/comment/comment-reply", json={
        "commentId": alice_comment["id"], "memberId": carol["id"], "input": "hi both",
    })

    return {
        "admin": admin,
        "alice": alice,
        "bob": bob,
        "carol": carol,
        "alice_post": alice_post,
        "bob_post": bob_post,
        "chat": chat,
    }


def _member(client, member_id):
    return client.get(f"/api/member/{member_id}")


def test_admin_delete_cascades(client, login, community):
    alice, bob, carol = community["alice"], community["bob"], community["carol"]
    login("mod")

    res = client.delete(f"/api/member/admin/delete/{alice['id']}")
    assert res.status_code == 200, res.text
    removed = res.json()["data"]["removed"]
    assert removed["posts"] == 1
    assert removed["comments"] == 2

    assert _member(client, alice["id"]).status_code == 404

    bob_data = _member(client, bob["id"]).json()["data"]
    assert bob_data["connections"] == {"followers": [], "following": []}
    assert _member(client, carol["id"]).json()["data"]["restrictedUsers"] == []

    bob_post = client.get(f"/api/content/get-content/{bob['id']}").json()["data"]["posts"][0]
    assert bob_post["likeCount"] == 0
    assert bob_post["likes"] == []
    assert bob_post["comments"] == []

    assert client.get(f"/api/content/get-content/{alice['id']}").status_code == 404


def test_admin_delete_cleans_chats(client, login, community):
    login("mod")
    client.delete(f"/api/member/admin/delete/{community['alice']['id']}")

    login("bob")
    chat = client.get(f"/api/chat/get-chat/{community['chat']['id']}").json()["data"]["chat"]
    assert [p["handle"] for p in chat["participants"]] == ["bob", "carol"]
    assert len(chat["messages"]) == 1
    assert chat["messages"][0]["content"] == "hey"
    assert chat["messages"][0]["replyTo"] is None


def test_deleting_chat_creator_removes_chat(client, login, community):
    login("mod")
    res = client.delete(f"/api/member/admin/delete/{community['bob']['id']}")
    assert res.json()["data"]["removed"]["chats"] == 1

    login("carol")
    assert client.get(f"/api/chat/get-chat/{community['chat']['id']}").status_code == 404


def test_admin_delete_is_audited(client, login, community):
    login("mod")
    client.delete(f"/api/member/admin/delete/{community['alice']['id']}")

    entries = client.get("/api/member/admin/audit").json()["data"]
    assert entries[0]["action"] == "member_deleted"
    assert entries[0]["actor"] == "mod"
    assert '"handle": "alice"' in entries[0]["details"]


def test_admin_routes_require_admin(client, login, community):
    login("bob")
    assert client.delete(f"/api/member/admin/delete/{community['alice']['id']}").status_code == 403
    assert client.get("/api/member/admin/audit").status_code == 403


def test_admin_cannot_delete_self_through_admin_route(client, login, community):
    login("mod")
    res = client.delete(f"/api/member/admin/delete/{community['admin']['id']}")
    assert res.status_code == 400


def test_admin_delete_missing_member(client, login, community):
    login("mod")
    assert client.delete("/api/member/admin/delete/9999").status_code == 404


def test_self_delete(client, login, community):
    alice = community["alice"]
    login("alice")

    res = client.delete(f"/api/member/delete/{alice['id']}")
    assert res.status_code == 200
    assert client.get("/api/auth/getSession").status_code == 404

    bob_data = _member(client, community["bob"]["id"]).json()["data"]
    assert bob_data["connections"] == {"followers": [], "following": []}


def test_cannot_delete_someone_else(client, login, community):
    login("bob")
    res = client.delete(f"/api/member/delete/{community['alice']['id']}")
    assert res.status_code == 403
    assert _member(client, community["alice"]["id"]).status_code == 200


def test_admin_delete_removes_replies_and_likes_on_surviving_comments(client, register, register_admin, login):
    register_admin("mod")
    alice = register("alice")
    bob = register("bob")
    carol = register("carol")

    login("bob")
    bob_post = client.post("/api/content/create-content", json={
        "memberId": bob["id"], "content": "bob here",
    }).json()["data"]["post"]

    login("carol")
    carol_comment = client.post("/api/comment/create-comment", json={
        "postId": bob_post["id"], "memberId": carol["id"], "input": "nice",
    }).json()["data"]["comment"]
    carol_reply = client.post("/api/comment/comment-reply", json={
        "commentId": carol_comment["id"], "memberId": carol["id"], "input": "thanks me",
    }).json()["data"]["reply"]

    login("alice")
    res = client.post("/api/comment/comment-reply", json={
        "commentId": carol_comment["id"], "memberId": alice["id"], "input": "agreed",
    })
    assert res.status_code == 201, res.text
    client.put(f"/api/comment/like-comment/{carol_comment['id']}", json={"memberId": alice["id"]})
    liked = client.put(f"/api/comment/like-comment-reply/{carol_reply['id']}", json={"memberId": alice["id"]})
    assert liked.json()["data"]["reply"]["likes"] == [alice["id"]]

    login("mod")
    assert client.delete(f"/api/member/admin/delete/{alice['id']}").status_code == 200

    login("carol")
    comment = client.put(
        f"/api/comment/update-comment/{carol_comment['id']}", json={"input": "nice!"}
    ).json()["data"]["comment"]
    assert comment["likes"] == []
    assert [r["id"] for r in comment["replies"]] == [carol_reply["id"]]
    assert comment["replies"][0]["likes"] == []
