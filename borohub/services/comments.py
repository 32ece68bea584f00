"""
Comment Service

Comments on posts, their replies, and likes on both.

Replies are addressed by their own id: like_reply/dislike_reply locate the
reply and load its parent comment, so a reply id is enough for the client.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from borohub.errors import BoroHubError
from borohub.models import Comment, CommentReply, Member, Post, comment_likes, reply_likes
from borohub.services.content import load_post
from borohub.services.members import get_member

logger = logging.getLogger(__name__)


def comment_options():
    return (
        selectinload(Comment.likes),
        selectinload(Comment.replies).selectinload(CommentReply.likes),
    )


def _require_input(value: str | None, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise BoroHubError(message, 400)
    return value


async def load_comment(db: AsyncSession, comment_id: int) -> Comment:
    result = await db.execute(
        select(Comment)
        .options(*comment_options())
        .filter(Comment.id == comment_id)
    )
    comment = result.scalars().first()
    if not comment:
        raise BoroHubError("Comment not found", 404)
    return comment


async def load_reply(db: AsyncSession, reply_id: int) -> CommentReply:
    """
    Find a reply by id with its parent comment loaded.

    Raises:
        BoroHubError: 404 "Reply not found"
    """
    result = await db.execute(
        select(CommentReply)
        .options(
            selectinload(CommentReply.likes),
            selectinload(CommentReply.comment).options(*comment_options()),
        )
        .filter(CommentReply.id == reply_id)
    )
    reply = result.scalars().first()
    if not reply:
        raise BoroHubError("Reply not found", 404)
    return reply


async def create_comment(db: AsyncSession, post_id: int, member_id: int, input: str) -> Comment:
    """
    Comment on a post.

    Raises:
        BoroHubError: 400 blank input, 404 unknown post or member
    """
    text = _require_input(input, "Comment input is required")
    post = await load_post(db, post_id)
    await get_member(db, member_id)

    comment = Comment(member_id=member_id, post_id=post.id, input=text)
    post.comments.append(comment)
    await db.commit()

    logger.info(f"Member {member_id} commented on post {post_id}")
    return await load_comment(db, comment.id)


async def update_comment(db: AsyncSession, comment_id: int, input: str, actor: Member) -> Comment:
    text = _require_input(input, "Comment input cannot be empty")
    comment = await load_comment(db, comment_id)

    if comment.member_id != actor.id and not actor.is_admin:
        raise BoroHubError("You are not authorized to update this comment", 403)

    comment.input = text
    await db.commit()
    return await load_comment(db, comment_id)


async def create_reply(db: AsyncSession, comment_id: int, member_id: int, input: str) -> CommentReply:
    """
    Reply to a comment.

    Raises:
        BoroHubError: 400 blank input, 404 unknown comment or member
    """
    text = _require_input(input, "Reply input is required")
    comment = await load_comment(db, comment_id)
    await get_member(db, member_id)

    reply = CommentReply(member_id=member_id, input=text)
    comment.replies.append(reply)
    await db.commit()

    return await load_reply(db, reply.id)


async def like_comment(db: AsyncSession, comment_id: int, member_id: int) -> Comment:
    comment = await load_comment(db, comment_id)
    member = await get_member(db, member_id)

    if member in comment.likes:
        raise BoroHubError("You have already liked this comment.", 400)

    comment.likes.append(member)
    await db.commit()
    return comment


async def dislike_comment(db: AsyncSession, comment_id: int, member_id: int) -> Comment:
    comment = await load_comment(db, comment_id)
    member = await get_member(db, member_id)

    if member not in comment.likes:
        raise BoroHubError("You have not liked this comment.", 400)

    comment.likes.remove(member)
    await db.commit()
    return comment


async def like_reply(db: AsyncSession, reply_id: int, member_id: int) -> CommentReply:
    reply = await load_reply(db, reply_id)
    member = await get_member(db, member_id)

    if member in reply.likes:
        raise BoroHubError("You have already liked this reply.", 400)

    reply.likes.append(member)
    await db.commit()
    return reply


async def dislike_reply(db: AsyncSession, reply_id: int, member_id: int) -> CommentReply:
    reply = await load_reply(db, reply_id)
    member = await get_member(db, member_id)

    if member not in reply.likes:
        raise BoroHubError("You have not liked this reply.", 400)

    reply.likes.remove(member)
    await db.commit()
    return reply


async def delete_comment(db: AsyncSession, comment_id: int, actor: Member) -> Comment:
    """
    Delete a comment with its replies and likes.

    The comment author, the author of the post, or an admin may delete it.
    Removing the row also removes it from the post's comments.

    Raises:
        BoroHubError: 404 unknown comment, 403 not allowed
    """
    comment = await load_comment(db, comment_id)
    post = await db.get(Post, comment.post_id)

    allowed = (
        actor.is_admin
        or comment.member_id == actor.id
        or (post is not None and post.author_id == actor.id)
    )
    if not allowed:
        raise BoroHubError("You are not authorized to delete this comment", 403)

    reply_ids = [r.id for r in comment.replies]
    if reply_ids:
        await db.execute(delete(reply_likes).where(reply_likes.c.reply_id.in_(reply_ids)))
        await db.execute(
            delete(CommentReply)
            .where(CommentReply.id.in_(reply_ids))
            .execution_options(synchronize_session=False)
        )
    await db.execute(delete(comment_likes).where(comment_likes.c.comment_id == comment_id))
    await db.execute(
        delete(Comment).where(Comment.id == comment_id).execution_options(synchronize_session=False)
    )
    db.expunge(comment)
    await db.commit()

    logger.info(f"Comment {comment_id} deleted by member {actor.id}")
    return comment
