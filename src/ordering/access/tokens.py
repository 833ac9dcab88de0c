"""Bearer credential handling.

The identity provider issues HS256 JWTs carrying ``email``, ``role`` and, for
chefs, ``chef_id``. Role is taken from the signed claim; there is no per-request
directory lookup.
"""

from datetime import UTC, datetime, timedelta

import jwt
import structlog

from ordering.access.principal import Principal, Role
from ordering.exceptions import AuthenticationError
from ordering.utils import settings

logger = structlog.get_logger(__name__)


def encode_token(email: str, role: str = Role.USER.value, chef_id: str | None = None, ttl_minutes: int = 60) -> str:
    """Issue a signed credential. Used by dev tooling and tests."""
    now = datetime.now(UTC)
    claims = {
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
    }
    if chef_id:
        claims["chef_id"] = chef_id
    return jwt.encode(claims, settings.AUTH_TOKEN_SECRET, algorithm=settings.AUTH_TOKEN_ALGORITHM)


def decode_token(token: str) -> Principal:
    """Verify a bearer credential and return the caller."""
    try:
        claims = jwt.decode(
            token,
            settings.AUTH_TOKEN_SECRET,
            algorithms=[settings.AUTH_TOKEN_ALGORITHM],
            options={"require": ["email", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError({"token": ["Credential has expired"]}) from exc
    except jwt.InvalidTokenError as exc:
        logger.info("token_rejected", reason=str(exc))
        raise AuthenticationError({"token": ["Invalid credential"]}) from exc

    try:
        role = Role(claims.get("role", Role.USER.value))
    except ValueError as exc:
        raise AuthenticationError({"role": [f"Unknown role {claims.get('role')!r}"]}) from exc

    if role == Role.CHEF and not claims.get("chef_id"):
        raise AuthenticationError({"chef_id": ["Chef credentials must carry a chef_id"]})

    return Principal(email=claims["email"], role=role, chef_id=claims.get("chef_id"))
