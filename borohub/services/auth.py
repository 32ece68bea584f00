"""
JWT Token and Password Service

This module handles:
- bcrypt hashing and checking of member passwords
- Creation and verification of the two session tokens:
  * access token: short lived, carries the member id ("sub") and handle
  * refresh token: long lived, carries the member id and type="refresh"

Both are HS256 JWTs, signed with different secrets.
"""

from datetime import datetime, timedelta

import bcrypt
from jose import jwt, JWTError

from borohub.config import settings


ALGORITHM = "HS256"

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def hash_password(plain_password: str) -> str:
    """Hash a password with a fresh bcrypt salt (10 rounds)."""
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt(rounds=10))
    return hashed.decode("utf-8")


def check_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def _encode(data: dict, secret: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.utcnow() + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def create_access_token(member, expires_delta: timedelta | None = None) -> str:
    """
    Create the access token for a member.

    Args:
        member: Member whose id and handle go into the payload
        expires_delta: Optional lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT string for the accessToken cookie
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode({"sub": str(member.id), "handle": member.handle}, settings.SECRET_KEY, expires_delta)


def create_refresh_token(member, expires_delta: timedelta | None = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode({"sub": str(member.id), "type": "refresh"}, settings.REFRESH_SECRET_KEY, expires_delta)


def verify_token(token: str) -> dict | None:
    """
    Verify and decode an access token.

    Returns:
        Decoded payload dictionary if valid, None if invalid/expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def verify_refresh_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.REFRESH_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "refresh":
        return None
    return payload


def member_id_from_payload(payload: dict) -> int | None:
    """Read the member id out of the "sub" claim."""
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def set_session_cookies(response, access_token: str, refresh_token: str | None = None):
    """
    Store the tokens in HttpOnly cookies on the response.

    In production the cookies are Secure and SameSite=None so a frontend on
    another origin can send them; elsewhere they are Lax over plain http.
    """
    secure = settings.is_production
    samesite = "none" if secure else "lax"
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=secure,
        samesite=samesite,
    )
    if refresh_token is not None:
        response.set_cookie(
            REFRESH_COOKIE,
            refresh_token,
            max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
            httponly=True,
            secure=secure,
            samesite=samesite,
        )


def clear_session_cookies(response):
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)
