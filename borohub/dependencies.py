"""
Authentication Dependencies for FastAPI Routes

This module provides dependency injection functions for authentication.
These can be used in route handlers to require an authenticated member,
an admin, or to check that the caller acts on their own behalf.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from borohub.database import get_db
from borohub.errors import BoroHubError
from borohub.models import Member
from borohub.services.auth import ACCESS_COOKIE, verify_token, member_id_from_payload


async def get_current_member(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Member:
    """
    Dependency that requires an authenticated member.

    This function:
    1. Extracts the JWT from the accessToken cookie
    2. Verifies the token signature and expiration
    3. Looks up the member in the database

    Raises:
        BoroHubError: 401 if the cookie is missing or invalid,
                      404 if the member has been deleted since
    """
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise BoroHubError("Authentication token missing", 401)

    payload = verify_token(token)
    if not payload:
        raise BoroHubError("Invalid or expired token", 401)

    member_id = member_id_from_payload(payload)
    if member_id is None:
        raise BoroHubError("Invalid token payload", 401)

    member = await db.get(Member, member_id)
    if not member:
        raise BoroHubError("Member not found", 404)

    return member


async def get_optional_member(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Member | None:
    """
    Like get_current_member, but returns None for anonymous requests
    instead of raising. Used by public routes that show more to the
    member themselves.
    """
    try:
        return await get_current_member(request, db)
    except BoroHubError:
        return None


async def require_admin(member: Member = Depends(get_current_member)) -> Member:
    """Dependency that requires an authenticated admin (403 otherwise)."""
    if not member.is_admin:
        raise BoroHubError("Admin privileges required", 403)
    return member


def is_self_or_admin(current: Member | None, member_id: int) -> bool:
    return current is not None and (current.id == member_id or current.is_admin)


def ensure_self_or_admin(current: Member, member_id: int, action: str = "perform this action"):
    """
    Reject a request that names another member unless the caller is an admin.

    Routes take the acting member's id in the path or body; this ties that id
    to the session.
    """
    if not is_self_or_admin(current, member_id):
        raise BoroHubError(f"You are not authorized to {action} for another member", 403)
