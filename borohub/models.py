"""
Database Models for BoroHub Media

This module defines the SQLAlchemy ORM models for the application:
- Member: Registered accounts with their follow/restrict graph
- Post: Content posts with media URLs, likes and comments
- Comment / CommentReply: Feedback on posts, one level of replies
- Chat / ChatEntry: Direct conversations between members
- AuditLog: Record of administrative actions

Reference sets (followers, likes, participants...) are association tables
with composite primary keys, so a member can appear at most once in each set.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table, JSON
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime


# Base class for all ORM models
Base = declarative_base()


ROLE_MEMBER = "member"
ROLE_ADMIN = "admin"


# One row per follow edge: follower_id follows member_id.
# Member.followers and Member.following are the two ends of the same row.
member_follows = Table(
    "member_follows",
    Base.metadata,
    Column("member_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
    Column("follower_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)

# member_id has restricted restricted_id
member_restrictions = Table(
    "member_restrictions",
    Base.metadata,
    Column("member_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
    Column("restricted_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)

post_likes = Table(
    "post_likes",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("member_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)

comment_likes = Table(
    "comment_likes",
    Base.metadata,
    Column("comment_id", Integer, ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True),
    Column("member_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)

reply_likes = Table(
    "reply_likes",
    Base.metadata,
    Column("reply_id", Integer, ForeignKey("comment_replies.id", ondelete="CASCADE"), primary_key=True),
    Column("member_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)

chat_participants = Table(
    "chat_participants",
    Base.metadata,
    Column("chat_id", Integer, ForeignKey("chats.id", ondelete="CASCADE"), primary_key=True),
    Column("member_id", Integer, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)


class Member(Base):
    """
    A registered account.

    Authentication is handle/email + bcrypt password. The role decides
    whether the member may use the admin routes.
    """
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    handle = Column(String, unique=True, index=True, nullable=False)
    email_address = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default=ROLE_MEMBER, nullable=False)

    # Profile fields
    about_me = Column(String(500), nullable=True)
    location = Column(String, nullable=True)
    hobby = Column(String, nullable=True)
    avatar = Column(String, default="")
    cover_image = Column(String, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Self-referential many-to-many through member_follows
    # - followers: members with a row (member_id=self, follower_id=them)
    # - following: members with a row (member_id=them, follower_id=self)
    followers = relationship(
        "Member",
        secondary=member_follows,
        primaryjoin=id == member_follows.c.member_id,
        secondaryjoin=id == member_follows.c.follower_id,
        back_populates="following",
    )
    following = relationship(
        "Member",
        secondary=member_follows,
        primaryjoin=id == member_follows.c.follower_id,
        secondaryjoin=id == member_follows.c.member_id,
        back_populates="followers",
    )

    restricted_users = relationship(
        "Member",
        secondary=member_restrictions,
        primaryjoin=id == member_restrictions.c.member_id,
        secondaryjoin=id == member_restrictions.c.restricted_id,
        back_populates="restricted_by",
    )
    restricted_by = relationship(
        "Member",
        secondary=member_restrictions,
        primaryjoin=id == member_restrictions.c.restricted_id,
        secondaryjoin=id == member_restrictions.c.member_id,
        back_populates="restricted_users",
    )

    # Posts in creation order (exposed as contentPosts)
    posts = relationship("Post", back_populates="author", order_by="Post.id")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class Post(Base):
    """
    A content post. like_count mirrors len(likes) and is maintained by the
    content service on every like/unlike and by the member cascade.
    """
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False)
    content = Column(String, nullable=False)

    # Ordered list of media URLs
    media = Column(JSON, default=list, nullable=False)

    like_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Many-to-one with Member
    author = relationship("Member", back_populates="posts")

    # Comments in creation order
    comments = relationship("Comment", back_populates="post", order_by="Comment.id")

    likes = relationship("Member", secondary=post_likes)


class Comment(Base):
    """A comment on a post. Replies are stored in comment_replies."""
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    input = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    member = relationship("Member")

    post = relationship("Post", back_populates="comments")

    likes = relationship("Member", secondary=comment_likes)

    # Replies belong to their comment and go away with it
    replies = relationship(
        "CommentReply",
        back_populates="comment",
        order_by="CommentReply.id",
        cascade="all, delete-orphan",
    )


class CommentReply(Base):
    """A reply embedded in a comment, addressed by its own id."""
    __tablename__ = "comment_replies"

    id = Column(Integer, primary_key=True, index=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), index=True, nullable=False)
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False)
    input = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    comment = relationship("Comment", back_populates="replies")
    member = relationship("Member")
    likes = relationship("Member", secondary=reply_likes)


class Chat(Base):
    """A conversation. The creator is always one of the participants."""
    __tablename__ = "chats"

    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = relationship("Member")
    participants = relationship("Member", secondary=chat_participants)

    # Messages in the order they were sent
    messages = relationship(
        "ChatEntry",
        back_populates="chat",
        order_by="ChatEntry.id",
        cascade="all, delete-orphan",
        foreign_keys="ChatEntry.chat_id",
    )


class ChatEntry(Base):
    """
    A message inside a chat.

    reply_to_id is a self-referential foreign key for quoting an earlier
    message of the same chat.
    """
    __tablename__ = "chat_entries"

    id = Column(Integer, primary_key=True, index=True)
    chat_id = Column(Integer, ForeignKey("chats.id", ondelete="CASCADE"), index=True, nullable=False)
    sender_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False)
    content = Column(String, nullable=False)
    reply_to_id = Column(Integer, ForeignKey("chat_entries.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    chat = relationship("Chat", back_populates="messages", foreign_keys=[chat_id])
    sender = relationship("Member")


class AuditLog(Base):
    """
    Record of administrative actions (member deletions, role changes).

    Written in the same transaction as the action it describes.
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String, index=True)  # e.g. "member_deleted"
    actor_handle = Column(String, index=True)
    details = Column(String, nullable=True)  # JSON text
    created_at = Column(DateTime, default=datetime.utcnow)
