"""
Authentication Routes

Password-based sessions kept in two HttpOnly cookies:
1. POST /api/auth/initializeAccount creates a member
2. POST /api/auth/accessAccount checks the password and sets
   accessToken (short lived) and refreshToken (long lived)
3. POST /api/auth/refreshSession trades a refresh token for a new access token
4. GET /api/auth/getSession returns the member behind the access token
5. GET /api/auth/endSession clears both cookies
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from borohub.database import get_db
from borohub.errors import BoroHubError
from borohub.limiter import limiter, ACCESS_LIMIT
from borohub.models import Member
from borohub.schemas import AccessAccountRequest, InitializeAccountRequest
from borohub.services.auth import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    check_password,
    clear_session_cookies,
    create_access_token,
    create_refresh_token,
    member_id_from_payload,
    set_session_cookies,
    verify_refresh_token,
    verify_token,
)
from borohub.services.members import create_member, load_member
from borohub.utils.serializers import serialize_member, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/initializeAccount")
async def initialize_account(
    body: InitializeAccountRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a member account.

    Raises:
        BoroHubError: 400 if the email or handle is already taken
    """
    member = await create_member(
        db,
        full_name=body.full_name,
        handle=body.handle,
        email_address=body.email_address,
        plain_password=body.plain_password,
        about_me=body.about_me,
        location=body.location,
        hobby=body.hobby,
        avatar=body.avatar,
        cover_image=body.cover_image,
    )
    logger.info(f"Account created for {member.handle}")
    return success_response(
        {"message": "Member account initialized successfully!", "member": serialize_member(member, private=True)},
        201,
    )


@router.post("/accessAccount")
@limiter.limit(ACCESS_LIMIT)
async def access_account(
    request: Request,
    body: AccessAccountRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Log in with email or handle plus password.

    Unknown member and wrong password produce the same 401 so the response
    does not reveal which accounts exist.
    """
    if not body.email_address and not body.handle:
        raise BoroHubError("Email or handle is required to access account", 400)

    conditions = []
    if body.email_address:
        conditions.append(Member.email_address == body.email_address.strip().lower())
    if body.handle:
        conditions.append(Member.handle == body.handle.strip())
    result = await db.execute(select(Member).filter(or_(*conditions)))
    member = result.scalars().first()

    if not member:
        raise BoroHubError("Input details incorrect", 401)

    if not body.plain_password:
        raise BoroHubError("Password is required to access account", 400)

    if not check_password(body.plain_password, member.hashed_password):
        raise BoroHubError("Input details incorrect", 401)

    member = await load_member(db, member.id)
    response = success_response(
        {"message": "Member account accessed successfully!", "member": serialize_member(member, private=True)}
    )
    set_session_cookies(response, create_access_token(member), create_refresh_token(member))
    return response


@router.post("/refreshSession")
async def refresh_session(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Issue a new access token from the refreshToken cookie."""
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise BoroHubError("Refresh token missing", 401)

    payload = verify_refresh_token(token)
    member_id = member_id_from_payload(payload) if payload else None
    if member_id is None:
        raise BoroHubError("Invalid or expired refresh token", 401)

    member = await db.get(Member, member_id)
    if not member:
        raise BoroHubError("Member not found", 404)

    response = success_response({"message": "Access token refreshed successfully!"})
    set_session_cookies(response, create_access_token(member))
    return response


@router.get("/endSession")
async def end_session(request: Request):
    if not request.cookies.get(ACCESS_COOKIE):
        raise BoroHubError("No session to end", 400)

    response = success_response({"message": "Member session ended successfully!"})
    clear_session_cookies(response)
    return response


@router.get("/getSession")
async def get_session(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Return the member behind the accessToken cookie.

    Raises:
        BoroHubError: 404 no cookie or member gone, 401 invalid token
    """
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise BoroHubError("No session/token found, please log in", 404)

    payload = verify_token(token)
    member_id = member_id_from_payload(payload) if payload else None
    if member_id is None:
        raise BoroHubError("Invalid token, please you must be logged in", 401)

    member = await load_member(db, member_id)
    return success_response(
        {"message": "Current member session retrieved successfully!", "member": serialize_member(member, private=True)}
    )
