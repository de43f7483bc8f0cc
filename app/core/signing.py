from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError

from app.core.config import get_settings

settings = get_settings()


class InvalidTokenError(Exception):
    """Signed cookie value is missing, tampered with or expired."""


def encode_token(claims: dict[str, Any], ttl: timedelta) -> str:
    """
    Sign `claims` as a JWT (SESSION_SECRET / SESSION_ALG) that expires after `ttl`.
    """
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + ttl
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALG)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiration, return the claims.

    Raises:
        InvalidTokenError: if the token cannot be trusted.
    """
    try:
        return jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALG],
        )
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
