"""
Member Routes

Profiles, search, pictures, the follow/restrict graph, and deletion.

Graph mutations take the acting member in the body (followerId for
follow, the path id for restrict) and require it to be the logged-in
member unless that member is an admin.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from borohub.database import get_db
from borohub.dependencies import (
    ensure_self_or_admin,
    get_current_member,
    get_optional_member,
    is_self_or_admin,
    require_admin,
)
from borohub.errors import BoroHubError
from borohub.models import Member
from borohub.schemas import FollowRequest, RestrictRequest, UpdateMemberRequest
from borohub.services import audit, cascade, members, relationships
from borohub.services.media import save_upload
from borohub.utils.serializers import serialize_member, serialize_member_brief, success_response

router = APIRouter(prefix="/api/member", tags=["member"])


# Admin routes are declared before "/{member_id}" style routes

@router.delete("/admin/delete/{member_id}")
async def admin_delete_member(
    member_id: int,
    admin: Member = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a member and cascade the removal across posts, comments,
    replies, likes, the member graph and chats (admin only).
    """
    if admin.id == member_id:
        raise BoroHubError("Admins cannot delete themselves through this route", 400)
    summary = await cascade.delete_member_cascade(db, member_id, actor=admin)
    return success_response({"message": "Member deleted successfully", "removed": summary})


@router.get("/admin/audit")
async def admin_audit_log(
    limit: int = 50,
    admin: Member = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    entries = await audit.recent_actions(db, min(max(limit, 1), 500))
    return success_response([
        {
            "id": e.id,
            "action": e.action,
            "actor": e.actor_handle,
            "details": e.details,
            "createdAt": e.created_at.isoformat() if e.created_at else None,
        }
        for e in entries
    ])


@router.delete("/delete/{member_id}")
async def delete_member(
    member_id: int,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    """Self-deletion; same cascade as the admin route."""
    ensure_self_or_admin(current, member_id, "delete an account")
    actor = current if current.is_admin and current.id != member_id else None
    summary = await cascade.delete_member_cascade(db, member_id, actor=actor)
    return success_response({"message": "Member deleted successfully", "removed": summary})


@router.get("/reserche/{handle}")
async def search_member(
    handle: str,
    viewer: Member | None = Depends(get_optional_member),
    db: AsyncSession = Depends(get_db)
):
    found = await members.search_members(db, handle)
    return success_response([serialize_member(m, is_self_or_admin(viewer, m.id)) for m in found])


@router.put("/update/{member_id}")
async def update_member(
    member_id: int,
    body: UpdateMemberRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, member_id, "update a profile")
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    member = await members.update_member(db, member_id, changes)
    return success_response(serialize_member(member, private=True))


@router.put("/follow/{member_id}")
async def follow_member(
    member_id: int,
    body: FollowRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.follower_id, "follow")
    member = await relationships.follow(db, member_id, body.follower_id)
    return success_response({
        "message": "You are now connected with this member",
        "memberData": serialize_member(member, is_self_or_admin(current, member_id)),
    })


@router.delete("/unfollow/{member_id}")
async def unfollow_member(
    member_id: int,
    body: FollowRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.follower_id, "unfollow")
    member = await relationships.unfollow(db, member_id, body.follower_id)
    return success_response({
        "message": "You have successfully unfollowed this member",
        "memberData": serialize_member(member, is_self_or_admin(current, member_id)),
    })


@router.get("/followers/{member_id}")
async def get_followers(member_id: int, db: AsyncSession = Depends(get_db)):
    followers = await relationships.list_followers(db, member_id)
    return success_response({"followers": [serialize_member_brief(m) for m in followers]})


@router.get("/following/{member_id}")
async def get_following(member_id: int, db: AsyncSession = Depends(get_db)):
    following = await relationships.list_following(db, member_id)
    return success_response({"following": [serialize_member_brief(m) for m in following]})


@router.post("/restricted/{member_id}")
async def restrict_member(
    member_id: int,
    body: RestrictRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, member_id, "restrict")
    member = await relationships.restrict(db, member_id, body.restricted_user_id)
    return success_response({
        "message": "You have successfully restricted this user",
        "memberData": serialize_member(member, private=True),
    })


@router.delete("/unrestricted/{member_id}")
async def unrestrict_member(
    member_id: int,
    body: RestrictRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, member_id, "unrestrict")
    member = await relationships.unrestrict(db, member_id, body.restricted_user_id)
    return success_response({
        "message": "You have successfully unrestricted this user",
        "memberData": serialize_member(member, private=True),
    })


@router.get("/restricting/{member_id}")
async def get_restricted(
    member_id: int,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, member_id, "view restrictions")
    restricted = await relationships.list_restricted(db, member_id)
    return success_response({"restrictedUsers": [serialize_member_brief(m) for m in restricted]})


@router.put("/avatarUpload/{member_id}")
async def upload_avatar(
    member_id: int,
    avatar: UploadFile | None = File(None),
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, member_id, "change a profile picture")
    await members.get_member(db, member_id)
    if avatar is None:
        raise BoroHubError("Please upload an image", 400)
    url = await save_upload(avatar, "avatar")
    member = await members.set_avatar(db, member_id, url)
    return success_response({"message": "Profile picture updated", "member": serialize_member(member, private=True)})


@router.put("/coverImageUpload/{member_id}")
async def upload_cover_image(
    member_id: int,
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, member_id, "change a cover image")
    await members.get_member(db, member_id)
    if cover_image is None:
        raise BoroHubError("Please upload an image", 400)
    url = await save_upload(cover_image, "coverImage")
    member = await members.set_cover_image(db, member_id, url)
    return success_response({"message": "Cover image updated", "member": serialize_member(member, private=True)})


@router.get("/{member_id}")
async def get_member(
    member_id: int,
    viewer: Member | None = Depends(get_optional_member),
    db: AsyncSession = Depends(get_db)
):
    member = await members.load_member(db, member_id)
    return success_response(serialize_member(member, is_self_or_admin(viewer, member_id)))
