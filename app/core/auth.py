import uuid
from datetime import timedelta

import bcrypt
from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from sqlmodel import Session

from app.core.config import get_settings
from app.core.signing import InvalidTokenError, decode_token, encode_token
from app.database import get_session
from app.models.admin_user import AdminUser

settings = get_settings()

# Session cookie scheme:
# - auto_error=False => missing cookie does NOT raise immediately,
#   so storefront routes stay anonymous and admin routes decide.
session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Salted bcrypt hash of `password`."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


# Compared against when the username does not exist, so both failure
# paths cost one bcrypt check.
DUMMY_PASSWORD_HASH = hash_password("not-a-real-password")


def start_session(response: Response, user: AdminUser) -> None:
    """
    Issue the signed session cookie for `user`.

    Claims: sub (admin id), role, exp.
    """
    ttl = timedelta(minutes=settings.SESSION_TTL_MINUTES)
    token = encode_token({"sub": str(user.id), "role": user.role}, ttl)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def end_session(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)


def get_current_admin(
    token: str | None = Depends(session_cookie),
    session: Session = Depends(get_session),
) -> AdminUser | None:
    """
    Resolve the admin behind the session cookie.

    Flow:
      1. No cookie => anonymous => None.
      2. Bad signature / expired => None (treated as logged out).
      3. Load the admin row; deleted accounts resolve to None.
    """
    if token is None:
        return None

    try:
        claims = decode_token(token)
        admin_id = uuid.UUID(claims["sub"])
    except (InvalidTokenError, KeyError, ValueError):
        return None

    return session.get(AdminUser, admin_id)


def require_admin(user: AdminUser | None = Depends(get_current_admin)) -> AdminUser:
    """
    Enforce a logged-in back-office user (admin or superadmin).

    Raises:
        HTTPException(401): if there is no valid session.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def require_superadmin(user: AdminUser = Depends(require_admin)) -> AdminUser:
    """
    Enforce the superadmin role (admin account management).

    Raises:
        HTTPException(403): if role is not superadmin.
    """
    if user.role != "superadmin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Superadmin access required",
        )
    return user
