"""Session guard for protected routes."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import MissingTokenError
from app.core.security import SessionIdentity, SessionTokenManager

# auto_error=False so a missing header becomes our 401 instead of FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_manager(request: Request) -> SessionTokenManager:
    return request.app.state.token_manager


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_manager: SessionTokenManager = Depends(get_token_manager),
) -> SessionIdentity:
    """Validate the bearer token and expose the identity it carries.

    Trusts the signature and expiry alone; there is no database lookup, so
    fields baked into the token may lag behind the parent record until the
    token expires.
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    identity = token_manager.load(credentials.credentials)
    request.state.identity = identity
    return identity


__all__ = ["bearer_scheme", "get_current_identity", "get_token_manager"]
