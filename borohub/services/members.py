"""
Member Service

Lookups and profile maintenance for members:
- get_member / load_member: fetch a member or raise 404
- create_member: account creation with a unique email and handle
- update_member: partial profile update
- search_members: prefix search on handle and full name
- set_avatar / set_cover_image: store an uploaded picture URL
- promote_to_admin: grant the admin role (operator script only)

Relationship changes live in services/relationships.py and deletion in
services/cascade.py.
"""

from sqlalchemy import or_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from borohub.errors import BoroHubError
from borohub.models import Member, ROLE_ADMIN, ROLE_MEMBER
from borohub.services.audit import log_action
from borohub.services.auth import hash_password


def member_graph_options():
    """Eager-load everything serialize_member prints."""
    return (
        selectinload(Member.followers),
        selectinload(Member.following),
        selectinload(Member.restricted_users),
        selectinload(Member.posts),
    )


async def load_member(db: AsyncSession, member_id: int, message: str = "Member not found") -> Member:
    """
    Fetch a member with its follow/restrict graph and posts loaded.

    A member already in the session (e.g. the authenticated member) keeps
    the collections it has loaded and gets the missing ones loaded here.
    Collections are only changed through the ORM inside a request, so the
    loaded ones are current. Refreshing them instead would reset the
    collections of every related member loaded alongside.

    Raises:
        BoroHubError: 404 with `message` if there is no such member
    """
    result = await db.execute(
        select(Member)
        .options(*member_graph_options())
        .filter(Member.id == member_id)
    )
    member = result.scalars().first()
    if not member:
        raise BoroHubError(message, 404)
    return member


async def get_member(db: AsyncSession, member_id: int, message: str = "Member not found") -> Member:
    """Plain fetch without relationships, 404 if missing."""
    member = await db.get(Member, member_id)
    if not member:
        raise BoroHubError(message, 404)
    return member


async def create_member(
    db: AsyncSession,
    full_name: str,
    handle: str,
    email_address: str,
    plain_password: str,
    about_me: str | None = None,
    location: str | None = None,
    hobby: str | None = None,
    avatar: str = "",
    cover_image: str = "",
) -> Member:
    email_address = email_address.strip().lower()
    handle = handle.strip()

    existing = await db.execute(
        select(Member).filter(
            or_(Member.email_address == email_address, Member.handle == handle)
        )
    )
    if existing.scalars().first():
        raise BoroHubError("Email or handle is already taken", 400)

    member = Member(
        full_name=full_name.strip(),
        handle=handle,
        email_address=email_address,
        hashed_password=hash_password(plain_password),
        role=ROLE_MEMBER,
        about_me=about_me,
        location=location,
        hobby=hobby,
        avatar=avatar or "",
        cover_image=cover_image or "",
    )
    db.add(member)
    await db.commit()
    return await load_member(db, member.id)


async def update_member(db: AsyncSession, member_id: int, changes: dict) -> Member:
    """
    Apply a partial profile update.

    Args:
        changes: Column name -> new value, only for fields the client sent
    """
    member = await get_member(db, member_id)

    new_handle = changes.get("handle")
    if new_handle and new_handle != member.handle:
        taken = await db.execute(select(Member.id).filter(Member.handle == new_handle))
        if taken.first():
            raise BoroHubError("Handle is already taken", 400)

    for field, value in changes.items():
        setattr(member, field, value)

    await db.commit()
    return await load_member(db, member_id)


async def search_members(db: AsyncSession, term: str) -> list[Member]:
    """
    Case-insensitive prefix match on handle or full name.

    Raises:
        BoroHubError: 400 for a blank term, 404 when nothing matches
    """
    term = (term or "").strip()
    if not term:
        raise BoroHubError("Please provide a valid handle", 400)

    # Escape LIKE wildcards so the term is matched literally
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"{escaped}%"
    result = await db.execute(
        select(Member)
        .options(*member_graph_options())
        .filter(
            or_(
                func.lower(Member.handle).like(pattern, escape="\\"),
                func.lower(Member.full_name).like(pattern, escape="\\"),
            )
        )
        .order_by(Member.handle)
    )
    members = result.scalars().all()
    if not members:
        raise BoroHubError("No members found", 404)
    return list(members)


async def set_avatar(db: AsyncSession, member_id: int, url: str) -> Member:
    member = await get_member(db, member_id)
    member.avatar = url
    await db.commit()
    return await load_member(db, member_id)


async def set_cover_image(db: AsyncSession, member_id: int, url: str) -> Member:
    member = await get_member(db, member_id)
    member.cover_image = url
    await db.commit()
    return await load_member(db, member_id)


async def promote_to_admin(db: AsyncSession, handle: str, actor_handle: str = "cli") -> Member | None:
    """
    Grant the admin role to the member with this handle.

    Accounts are always created as plain members; this is the only way to
    get an admin. The promotion is written to the audit log.

    Returns:
        The member, or None if no member has this handle
    """
    result = await db.execute(select(Member).filter(Member.handle == handle))
    member = result.scalars().first()
    if not member:
        return None

    if member.role != ROLE_ADMIN:
        member.role = ROLE_ADMIN
        await log_action(db, "member_promoted", actor_handle, {"member_id": member.id, "handle": handle})
        await db.commit()
    return member
