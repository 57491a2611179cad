"""
InkPost Backend: Token Service
===============================

What:  Issues and verifies the bearer tokens handed out on signup/signin.
How:   PyJWT with a shared HMAC secret. The claim set is the caller's payload
       (here `{"id": "<user uuid>"}`) plus `iat`, and `exp` when an expiry is
       configured.
Who:   UserService issues tokens; the auth dependency verifies them.

Both functions are pure: the result depends only on the arguments and the
clock. Nothing is stored, so rotating JWT_SECRET invalidates every token.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from inkpost.config import settings

logger = logging.getLogger(__name__)


def issue_token(
    payload: Dict[str, Any],
    secret: str,
    expires_minutes: Optional[int] = None,
    algorithm: Optional[str] = None,
) -> str:
    """
    Sign a claim set and return the compact, URL-safe token.

    Args:
        payload: Claims to sign; values must be JSON-serializable.
        secret: Shared signing secret.
        expires_minutes: Lifetime in minutes; None or 0 leaves out `exp`.
        algorithm: HMAC algorithm, defaults to settings.jwt_algorithm.
    """
    now = datetime.now(timezone.utc)
    claims = dict(payload)
    claims["iat"] = now
    if expires_minutes:
        claims["exp"] = now + timedelta(minutes=expires_minutes)
    return jwt.encode(claims, secret, algorithm=algorithm or settings.jwt_algorithm)


def verify_token(
    token: str,
    secret: str,
    algorithm: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Check a token's signature (and expiry, if it carries one).

    Returns:
        The decoded claims, or None when the token is malformed, signed with
        another secret or algorithm, expired, or has no `id` claim.
    """
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm or settings.jwt_algorithm],
            options={"require": ["id"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("Rejected invalid token: %s", type(e).__name__)
        return None
    return claims
