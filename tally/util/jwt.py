"""JWT token utilities."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from tally.config import AuthSettings


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


class ExpiredTokenError(JWTError):
    """Token signature is valid but the token has expired."""

    pass


def create_token(
    user_id: str, settings: AuthSettings, expires_in: timedelta | None = None
) -> str:
    """Create a JWT token for the user.

    Args:
        user_id: User ID (stored as the ``sub`` claim)
        settings: Authentication settings
        expires_in: Lifetime override (defaults to ``jwt_expiry_days``)

    Returns:
        Encoded JWT token
    """
    lifetime = expires_in or timedelta(days=settings.jwt_expiry_days)
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        ExpiredTokenError: If the token has expired
        JWTError: If the token is otherwise invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
