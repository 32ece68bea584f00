"""
Response Formatting

Turns ORM objects into the JSON shapes the API returns (camelCase keys,
references as ids) and wraps them in the success envelope:

    {"success": true, "data": ...}

Relationships are only serialized when they were eagerly loaded; touching
an unloaded relationship under asyncio would trigger a lazy load, which
SQLAlchemy refuses ("MissingGreenlet").
"""

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy import inspect


def success_response(data, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def _loaded(obj, attr: str) -> bool:
    return attr not in inspect(obj).unloaded


def _ids(obj, attr: str):
    """Sorted ids of a loaded relationship, None if it was not loaded."""
    if not _loaded(obj, attr):
        return None
    return sorted(o.id for o in getattr(obj, attr))


def _iso(value):
    return value.isoformat() if value else None


def serialize_member(member, private: bool = False) -> dict:
    """
    Sanitized member: never contains the password hash.

    connections / restrictedUsers / contentPosts are present when the
    corresponding relationships were loaded. emailAddress and
    restrictedUsers are only included when `private` is set, i.e. the
    viewer is the member themselves or an admin.
    """
    data = {
        "id": member.id,
        "fullName": member.full_name,
        "handle": member.handle,
        "role": member.role,
        "aboutMe": member.about_me,
        "location": member.location,
        "hobby": member.hobby,
        "avatar": member.avatar or "",
        "coverImage": member.cover_image or "",
        "createdAt": _iso(member.created_at),
        "updatedAt": _iso(member.updated_at),
    }

    connections = {}
    followers = _ids(member, "followers")
    if followers is not None:
        connections["followers"] = followers
    following = _ids(member, "following")
    if following is not None:
        connections["following"] = following
    if connections:
        data["connections"] = connections

    if private:
        data["emailAddress"] = member.email_address
        restricted = _ids(member, "restricted_users")
        if restricted is not None:
            data["restrictedUsers"] = restricted

    if _loaded(member, "posts"):
        data["contentPosts"] = [p.id for p in member.posts]

    return data


def serialize_member_brief(member) -> dict:
    return {"id": member.id, "handle": member.handle}


def serialize_post(post) -> dict:
    data = {
        "id": post.id,
        "author": post.author_id,
        "content": post.content,
        "media": list(post.media or []),
        "likeCount": post.like_count,
        "createdAt": _iso(post.created_at),
        "updatedAt": _iso(post.updated_at),
    }
    likes = _ids(post, "likes")
    if likes is not None:
        data["likes"] = likes
    if _loaded(post, "comments"):
        data["comments"] = [c.id for c in post.comments]
    return data


def serialize_reply(reply) -> dict:
    data = {
        "id": reply.id,
        "member": reply.member_id,
        "input": reply.input,
        "createdAt": _iso(reply.created_at),
    }
    likes = _ids(reply, "likes")
    if likes is not None:
        data["likes"] = likes
    return data


def serialize_comment(comment) -> dict:
    data = {
        "id": comment.id,
        "member": comment.member_id,
        "contentPost": comment.post_id,
        "input": comment.input,
        "createdAt": _iso(comment.created_at),
        "updatedAt": _iso(comment.updated_at),
    }
    likes = _ids(comment, "likes")
    if likes is not None:
        data["likes"] = likes
    if _loaded(comment, "replies"):
        data["replies"] = [serialize_reply(r) for r in comment.replies]
    return data


def serialize_chat_entry(entry) -> dict:
    sender = entry.sender_id
    if _loaded(entry, "sender") and entry.sender is not None:
        sender = serialize_member_brief(entry.sender)
    return {
        "id": entry.id,
        "chat": entry.chat_id,
        "sender": sender,
        "content": entry.content,
        "replyTo": entry.reply_to_id,
        "createdAt": _iso(entry.created_at),
    }


def serialize_chat(chat) -> dict:
    data = {
        "id": chat.id,
        "creator": chat.creator_id,
        "createdAt": _iso(chat.created_at),
        "updatedAt": _iso(chat.updated_at),
    }
    if _loaded(chat, "participants"):
        data["participants"] = [
            serialize_member_brief(m) for m in sorted(chat.participants, key=lambda m: m.id)
        ]
    if _loaded(chat, "messages"):
        data["messages"] = [serialize_chat_entry(e) for e in chat.messages]
    return data
