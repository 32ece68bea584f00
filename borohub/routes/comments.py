"""
Comment Routes

Comments, replies, and likes on both. Like/dislike bodies carry the
acting memberId, which must match the session unless the caller is admin.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from borohub.database import get_db
from borohub.dependencies import ensure_self_or_admin, get_current_member
from borohub.models import Member
from borohub.schemas import (
    CreateCommentRequest,
    CreateReplyRequest,
    MemberActionRequest,
    UpdateCommentRequest,
)
from borohub.services import comments
from borohub.utils.serializers import serialize_comment, serialize_reply, success_response

router = APIRouter(prefix="/api/comment", tags=["comment"])


@router.post("/create-comment")
async def create_comment(
    body: CreateCommentRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "comment")
    comment = await comments.create_comment(db, body.post_id, body.member_id, body.input)
    return success_response(
        {"message": "Comment created successfully!", "comment": serialize_comment(comment)},
        201,
    )


@router.put("/update-comment/{comment_id}")
async def update_comment(
    comment_id: int,
    body: UpdateCommentRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    comment = await comments.update_comment(db, comment_id, body.input, current)
    return success_response({"message": "Comment updated successfully!", "comment": serialize_comment(comment)})


@router.post("/comment-reply")
async def create_comment_reply(
    body: CreateReplyRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "reply")
    reply = await comments.create_reply(db, body.comment_id, body.member_id, body.input)
    comment = await comments.load_comment(db, reply.comment_id)
    return success_response(
        {
            "message": "Reply created successfully!",
            "reply": serialize_reply(reply),
            "comment": serialize_comment(comment),
        },
        201,
    )


@router.put("/like-comment-reply/{reply_id}")
async def like_comment_reply(
    reply_id: int,
    body: MemberActionRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "like a reply")
    reply = await comments.like_reply(db, reply_id, body.member_id)
    return success_response({"message": "Reply liked successfully!", "reply": serialize_reply(reply)})


@router.put("/dislike-comment-reply/{reply_id}")
async def dislike_comment_reply(
    reply_id: int,
    body: MemberActionRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "dislike a reply")
    reply = await comments.dislike_reply(db, reply_id, body.member_id)
    return success_response({"message": "Reply disliked successfully!", "reply": serialize_reply(reply)})


@router.put("/like-comment/{comment_id}")
async def like_comment(
    comment_id: int,
    body: MemberActionRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "like a comment")
    comment = await comments.like_comment(db, comment_id, body.member_id)
    return success_response({"message": "Comment liked successfully!", "comment": serialize_comment(comment)})


@router.put("/dislike-comment/{comment_id}")
async def dislike_comment(
    comment_id: int,
    body: MemberActionRequest,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(current, body.member_id, "dislike a comment")
    comment = await comments.dislike_comment(db, comment_id, body.member_id)
    return success_response({"message": "Comment disliked successfully!", "comment": serialize_comment(comment)})


@router.delete("/delete-comment/{comment_id}")
async def delete_comment(
    comment_id: int,
    current: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_db)
):
    comment = await comments.delete_comment(db, comment_id, current)
    return success_response({"message": "Comment deleted successfully!", "memberId": comment.member_id})
