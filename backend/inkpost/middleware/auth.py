"""
InkPost Backend: Bearer Token Authentication
=============================================

What:  FastAPI dependency guarding every protected route.
How:   Reads `Authorization: Bearer <token>`, verifies it with the token
       service, and binds the user id to `request.state.user_id` before the
       handler runs.
Who:   Attached to the blog router and to GET /api/v1/user/auth.

Per-request outcomes:
    no header / not a Bearer header      → AuthenticationError (401)
    token fails verification             → AuthenticationError (401)
    `id` claim is not a UUID             → AuthenticationError (401)
    token verifies                       → user id bound, handler invoked

The dependency raises before the handler body executes, so a rejected
request never reaches a service.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from inkpost.config import settings
from inkpost.exceptions import AuthenticationError
from inkpost.services.token_service import verify_token

logger = logging.getLogger(__name__)

# auto_error=False: a missing header comes back as None so the response is
# our 401 envelope instead of FastAPI's default.
bearer_scheme = HTTPBearer(auto_error=False, description="JWT from signup or signin")


async def require_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UUID:
    """Resolve the caller's user id or reject the request with 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(context={"reason": "missing_token", "path": request.url.path})

    claims = verify_token(credentials.credentials, settings.jwt_secret)
    if claims is None:
        raise AuthenticationError(context={"reason": "invalid_token", "path": request.url.path})

    try:
        user_id = UUID(str(claims["id"]))
    except (KeyError, ValueError):
        raise AuthenticationError(context={"reason": "bad_subject", "path": request.url.path})

    request.state.user_id = user_id
    return user_id
