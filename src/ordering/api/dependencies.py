"""Request-scoped dependencies for the Ordering API."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ordering.access.principal import Principal
from ordering.access.tokens import decode_token
from ordering.exceptions import AuthenticationError
from ordering.utils.logging import add_context

bearer_scheme = HTTPBearer(auto_error=False)


async def current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the caller from the ``Authorization: Bearer`` header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError({"token": ["Authentication credentials were not provided"]})

    principal = decode_token(credentials.credentials)
    add_context(actor_email=principal.email, actor_role=principal.role.value)
    return principal
