"""
Member Cascade Deletion

Removing a member means removing every trace of them from the other
collections first. delete_member_cascade runs all steps as bulk statements
inside one transaction and commits once at the end; if any step fails the
whole deletion is rolled back and the member is left untouched.

Steps:
1. Posts the member liked get like_count decremented (floored at zero),
   then the member's likes on posts, comments and replies are removed
2. Replies written by the member are deleted
3. Comments written by the member, and all comments on the member's posts,
   are deleted with their replies and likes
4. The member's posts are deleted with their likes
5. Follow edges and restrictions in either direction are removed
6. Chats created by the member are deleted with their entries; the member
   leaves other chats and the entries they sent are deleted
7. The member row is deleted

The same routine serves the admin deletion and the self-deletion routes.
"""

import logging

from sqlalchemy import case, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from borohub.models import (
    Chat,
    ChatEntry,
    Comment,
    CommentReply,
    Member,
    Post,
    chat_participants,
    comment_likes,
    member_follows,
    member_restrictions,
    post_likes,
    reply_likes,
)
from borohub.services.audit import log_action
from borohub.services.members import get_member

logger = logging.getLogger(__name__)


# Bulk statements skip identity-map synchronisation; the session is not
# reused for reads after the cascade commits.
BULK = {"synchronize_session": False}


async def delete_member_cascade(
    db: AsyncSession,
    member_id: int,
    actor: Member | None = None,
) -> dict:
    """
    Delete a member and everything that references them.

    Args:
        db: Database session, committed by this function
        member_id: Member to delete
        actor: Admin performing the deletion; when given, an audit log entry
               is written in the same transaction

    Returns:
        Dict with the number of posts, comments, replies and chats removed

    Raises:
        BoroHubError: 404 if the member does not exist
    """
    member = await get_member(db, member_id)
    handle = member.handle

    # 1. Likes given by the member
    liked_posts = select(post_likes.c.post_id).where(post_likes.c.member_id == member_id)
    await db.execute(
        update(Post)
        .where(Post.id.in_(liked_posts))
        .values(like_count=case((Post.like_count > 0, Post.like_count - 1), else_=0))
        .execution_options(**BULK)
    )
    await db.execute(delete(post_likes).where(post_likes.c.member_id == member_id))
    await db.execute(delete(comment_likes).where(comment_likes.c.member_id == member_id))
    await db.execute(delete(reply_likes).where(reply_likes.c.member_id == member_id))

    # 2. Replies written by the member, on anyone's comment
    own_replies = select(CommentReply.id).where(CommentReply.member_id == member_id)
    await db.execute(delete(reply_likes).where(reply_likes.c.reply_id.in_(own_replies)))
    replies_result = await db.execute(
        delete(CommentReply).where(CommentReply.member_id == member_id).execution_options(**BULK)
    )

    # 3. Comments written by the member and comments on the member's posts
    own_posts = select(Post.id).where(Post.author_id == member_id)
    doomed_comment_filter = or_(Comment.member_id == member_id, Comment.post_id.in_(own_posts))
    doomed_comments = select(Comment.id).where(doomed_comment_filter)
    doomed_replies = select(CommentReply.id).where(CommentReply.comment_id.in_(doomed_comments))

    await db.execute(delete(reply_likes).where(reply_likes.c.reply_id.in_(doomed_replies)))
    await db.execute(
        delete(CommentReply).where(CommentReply.comment_id.in_(doomed_comments)).execution_options(**BULK)
    )
    await db.execute(delete(comment_likes).where(comment_likes.c.comment_id.in_(doomed_comments)))
    comments_result = await db.execute(
        delete(Comment).where(doomed_comment_filter).execution_options(**BULK)
    )

    # 4. The member's posts
    await db.execute(delete(post_likes).where(post_likes.c.post_id.in_(own_posts)))
    posts_result = await db.execute(
        delete(Post).where(Post.author_id == member_id).execution_options(**BULK)
    )

    # 5. Graph edges in both directions
    await db.execute(
        delete(member_follows).where(
            or_(member_follows.c.member_id == member_id, member_follows.c.follower_id == member_id)
        )
    )
    await db.execute(
        delete(member_restrictions).where(
            or_(
                member_restrictions.c.member_id == member_id,
                member_restrictions.c.restricted_id == member_id,
            )
        )
    )

    # 6. Chats
    own_chats = select(Chat.id).where(Chat.creator_id == member_id)
    doomed_entry_filter = or_(ChatEntry.chat_id.in_(own_chats), ChatEntry.sender_id == member_id)
    # Aliased so the subquery is not correlated with the UPDATE target
    doomed = aliased(ChatEntry)
    doomed_entries = select(doomed.id).where(
        or_(doomed.chat_id.in_(own_chats), doomed.sender_id == member_id)
    )
    await db.execute(
        update(ChatEntry)
        .where(ChatEntry.reply_to_id.in_(doomed_entries))
        .values(reply_to_id=None)
        .execution_options(**BULK)
    )
    await db.execute(delete(ChatEntry).where(doomed_entry_filter).execution_options(**BULK))
    await db.execute(
        delete(chat_participants).where(
            or_(chat_participants.c.chat_id.in_(own_chats), chat_participants.c.member_id == member_id)
        )
    )
    chats_result = await db.execute(
        delete(Chat).where(Chat.creator_id == member_id).execution_options(**BULK)
    )

    # 7. The member
    await db.execute(delete(Member).where(Member.id == member_id).execution_options(**BULK))
    db.expunge(member)

    summary = {
        "posts": posts_result.rowcount,
        "comments": comments_result.rowcount,
        "replies": replies_result.rowcount,
        "chats": chats_result.rowcount,
    }

    if actor is not None:
        await log_action(db, "member_deleted", actor.handle, {"member_id": member_id, "handle": handle, **summary})

    await db.commit()

    logger.info(f"Deleted member {member_id} ({handle}): {summary}")
    return summary
