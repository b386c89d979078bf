"""
Access token handling.

Tokens are issued by the site's account service; this backend only needs to
verify them and read the caller's id and role. `create_access_token` exists
for that service's counterpart in scripts and tests.
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import JWTError, jwt
from pydantic import ValidationError

from charity_cms.configs import settings
from charity_cms.schemas.auth import CurrentUser, Role


def create_access_token(
    user_id: int,
    role: Role,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a new access token with standard security claims.

    Args:
        user_id: Author id
        role: Author role
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "user_id": user_id,
        "role": role,
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": "access",
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> CurrentUser | None:
    """
    Decode and validate an access token.

    Args:
        token: JWT token string

    Returns:
        CurrentUser | None: Caller identity, or None if the token is invalid,
        expired, of the wrong type or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None

    try:
        return CurrentUser(id=payload.get("user_id"), role=payload.get("role"))
    except ValidationError:
        return None
