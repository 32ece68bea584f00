"""
Relationship Service - Follow and Restrict

Mutations of the member graph. Each call touches two members and commits
once, so both ends of an edge change together or not at all.

- follow(member_id, follower_id): follower starts following member
- unfollow(member_id, follower_id): removes that edge
- restrict(member_id, restricted_user_id): member restricts the other one
  and every follow edge between the two is removed, in both directions
- unrestrict(member_id, restricted_user_id): lifts the restriction only;
  follows removed by restrict are not restored

Common checks, in order: self reference (400), both members exist (404),
state transition is valid (400).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from borohub.errors import BoroHubError
from borohub.models import Member
from borohub.services.members import load_member

logger = logging.getLogger(__name__)


async def _load_pair(
    db: AsyncSession,
    member_id: int,
    other_id: int,
    self_message: str,
    member_missing: str,
    other_missing: str,
) -> tuple[Member, Member]:
    if member_id == other_id:
        raise BoroHubError(self_message, 400)
    member = await load_member(db, member_id, member_missing)
    other = await load_member(db, other_id, other_missing)
    return member, other


async def follow(db: AsyncSession, member_id: int, follower_id: int) -> Member:
    """
    Make follower_id follow member_id.

    Returns:
        The followed member, with updated connections

    Raises:
        BoroHubError: 400 self-follow or already following,
                      403 if member_id has restricted the follower,
                      404 if either member does not exist
    """
    member, follower = await _load_pair(
        db,
        member_id,
        follower_id,
        "Member cannot follow oneself",
        "The member you are trying to follow does not exist",
        "The follower ID does not exist",
    )

    if follower in member.followers:
        raise BoroHubError("You are already connected with this member", 400)

    if follower in member.restricted_users:
        raise BoroHubError("This member has restricted you", 403)

    # One edge row; back_populates updates follower.following in memory too
    member.followers.append(follower)
    await db.commit()

    logger.info(f"Member {follower_id} now follows member {member_id}")
    return member


async def unfollow(db: AsyncSession, member_id: int, follower_id: int) -> Member:
    """
    Remove the edge follower_id -> member_id.

    Raises:
        BoroHubError: 400 self-unfollow or not following, 404 missing member
    """
    member, follower = await _load_pair(
        db,
        member_id,
        follower_id,
        "Member cannot unfollow oneself",
        "The member you are trying to unfollow does not exist",
        "The follower ID does not exist",
    )

    if follower not in member.followers:
        raise BoroHubError("You are not connected with this member", 400)

    member.followers.remove(follower)
    await db.commit()

    logger.info(f"Member {follower_id} unfollowed member {member_id}")
    return member


async def restrict(db: AsyncSession, member_id: int, restricted_user_id: int) -> Member:
    """
    member_id restricts restricted_user_id.

    Side effect: any follow edge between the two members is removed, in
    both directions, in the same transaction.

    Returns:
        The restricting member

    Raises:
        BoroHubError: 400 self-restrict or already restricted, 404 missing member
    """
    member, restricted = await _load_pair(
        db,
        member_id,
        restricted_user_id,
        "Member cannot restrict oneself",
        "The member you are trying to restrict does not exist",
        "The restricted user ID does not exist",
    )

    if restricted in member.restricted_users:
        raise BoroHubError("This user is already restricted", 400)

    member.restricted_users.append(restricted)

    # Sever the social edge both ways
    if restricted in member.following:
        member.following.remove(restricted)
    if restricted in member.followers:
        member.followers.remove(restricted)

    await db.commit()

    logger.info(f"Member {member_id} restricted member {restricted_user_id}")
    return member


async def unrestrict(db: AsyncSession, member_id: int, restricted_user_id: int) -> Member:
    """
    Lift a restriction. Follow edges are not restored.

    Raises:
        BoroHubError: 400 self-unrestrict or not restricted, 404 missing member
    """
    member, restricted = await _load_pair(
        db,
        member_id,
        restricted_user_id,
        "Member cannot unrestrict oneself",
        "The member you are trying to unrestrict does not exist",
        "The restricted user ID does not exist",
    )

    if restricted not in member.restricted_users:
        raise BoroHubError("This user is not restricted", 400)

    member.restricted_users.remove(restricted)
    await db.commit()

    logger.info(f"Member {member_id} unrestricted member {restricted_user_id}")
    return member


async def list_followers(db: AsyncSession, member_id: int) -> list[Member]:
    member = await load_member(db, member_id, "The member does not exist")
    return sorted(member.followers, key=lambda m: m.id)


async def list_following(db: AsyncSession, member_id: int) -> list[Member]:
    member = await load_member(db, member_id, "The member does not exist")
    return sorted(member.following, key=lambda m: m.id)


async def list_restricted(db: AsyncSession, member_id: int) -> list[Member]:
    member = await load_member(db, member_id, "The member does not exist")
    return sorted(member.restricted_users, key=lambda m: m.id)
