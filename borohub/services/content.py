"""
Content Post Service

Create, update, list, like and delete posts. like_count is kept equal to
the number of likes on every change:
- like: rejects a second like by the same member, otherwise +1
- unlike: rejects if the member never liked the post, otherwise -1,
  never going below zero

Deleting a post also deletes its comments (with their replies and likes).
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from borohub.errors import BoroHubError
from borohub.models import Comment, CommentReply, Member, Post, comment_likes, post_likes, reply_likes
from borohub.services.members import get_member

logger = logging.getLogger(__name__)


def post_options():
    return (selectinload(Post.likes), selectinload(Post.comments))


async def load_post(db: AsyncSession, post_id: int, message: str = "Post not found") -> Post:
    result = await db.execute(
        select(Post)
        .options(*post_options())
        .filter(Post.id == post_id)
    )
    post = result.scalars().first()
    if not post:
        raise BoroHubError(message, 404)
    return post


async def create_post(
    db: AsyncSession,
    member_id: int,
    content: str,
    media: list[str] | None = None
) -> Post:
    """
    Create a post authored by member_id.

    Raises:
        BoroHubError: 404 unknown member, 400 empty content
    """
    await get_member(db, member_id)

    content = (content or "").strip()
    if not content:
        raise BoroHubError("Post content is required", 400)

    post = Post(author_id=member_id, content=content, media=list(media or []), like_count=0)
    db.add(post)
    await db.commit()

    logger.info(f"Member {member_id} created post {post.id}")
    return await load_post(db, post.id)


async def update_post(
    db: AsyncSession,
    post_id: int,
    actor: Member,
    content: str | None = None,
    media: list[str] | None = None
) -> Post:
    """
    Replace content and/or media. Fields left as None keep their value.

    Raises:
        BoroHubError: 404 unknown post, 403 not the author (admins allowed),
                      400 content given but blank
    """
    post = await load_post(db, post_id, "Content not found")

    if post.author_id != actor.id and not actor.is_admin:
        raise BoroHubError("You are not authorized to update this content", 403)

    if content is not None:
        content = content.strip()
        if not content:
            raise BoroHubError("Post content cannot be empty", 400)
        post.content = content
    if media is not None:
        post.media = list(media)

    await db.commit()
    return await load_post(db, post_id)


async def list_member_posts(db: AsyncSession, member_id: int) -> list[Post]:
    """Posts authored by a member, newest first."""
    await get_member(db, member_id)
    result = await db.execute(
        select(Post)
        .options(*post_options())
        .filter(Post.author_id == member_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    return list(result.scalars().all())


async def like_post(db: AsyncSession, post_id: int, member_id: int) -> Post:
    """
    Add member_id to the post's likes and increment like_count.

    Raises:
        BoroHubError: 404 unknown member or post, 400 already liked
    """
    member = await get_member(db, member_id)
    post = await load_post(db, post_id)

    if member in post.likes:
        raise BoroHubError("You have already liked this post.", 400)

    post.likes.append(member)
    post.like_count = post.like_count + 1
    await db.commit()

    return post


async def unlike_post(db: AsyncSession, post_id: int, member_id: int) -> Post:
    """
    Remove member_id from the post's likes and decrement like_count.

    Raises:
        BoroHubError: 404 unknown member or post, 400 not liked
    """
    member = await get_member(db, member_id)
    post = await load_post(db, post_id)

    if member not in post.likes:
        raise BoroHubError("You have not liked this post yet.", 400)

    post.likes.remove(member)
    post.like_count = max(post.like_count - 1, 0)
    await db.commit()

    return post


async def delete_post(db: AsyncSession, post_id: int, actor: Member) -> Post:
    """
    Delete a post with its comments, replies and likes.

    Args:
        actor: Member asking for the deletion; must be the author or an admin

    Returns:
        The deleted post as it was before deletion

    Raises:
        BoroHubError: 404 unknown post, 403 not the author
    """
    post = await load_post(db, post_id, "Post content not found")

    if post.author_id != actor.id and not actor.is_admin:
        raise BoroHubError("You are not authorized to delete this content", 403)

    await delete_post_rows(db, [post_id])
    db.expunge(post)
    await db.commit()

    logger.info(f"Post {post_id} deleted by member {actor.id}")
    return post


async def delete_post_rows(db: AsyncSession, post_ids: list[int]):
    """
    Bulk-delete posts and everything hanging off them, without committing.
    """
    if not post_ids:
        return
    comment_ids = select(Comment.id).where(Comment.post_id.in_(post_ids))
    reply_ids = select(CommentReply.id).where(CommentReply.comment_id.in_(comment_ids))

    await db.execute(delete(reply_likes).where(reply_likes.c.reply_id.in_(reply_ids)))
    await db.execute(
        delete(CommentReply)
        .where(CommentReply.comment_id.in_(comment_ids))
        .execution_options(synchronize_session=False)
    )
    await db.execute(delete(comment_likes).where(comment_likes.c.comment_id.in_(comment_ids)))
    await db.execute(
        delete(Comment).where(Comment.post_id.in_(post_ids)).execution_options(synchronize_session=False)
    )
    await db.execute(delete(post_likes).where(post_likes.c.post_id.in_(post_ids)))
    await db.execute(
        delete(Post).where(Post.id.in_(post_ids)).execution_options(synchronize_session=False)
    )
