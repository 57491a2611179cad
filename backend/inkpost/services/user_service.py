"""
InkPost Backend: User Service
==============================

What:  Signup, signin and token-owner lookup.
How:   Passwords are hashed with passlib before they reach the database and
       verified against the stored hash on signin. Successful calls end with
       a token from the token service.
Who:   Called by the /api/v1/user routes.

Error mapping:
    insert rejected (duplicate email)  → DatabaseError(status_code=403)
    unknown email or wrong password    → NotFoundError ("User not found")
    unexpected lookup failure          → DatabaseError (500)

Unknown email and wrong password are indistinguishable to the caller.
"""

import logging
from typing import Optional
from uuid import UUID

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from inkpost.config import settings
from inkpost.exceptions import DatabaseError, NotFoundError
from inkpost.models import User
from inkpost.schemas.user import CurrentUserResponse, SigninInput, SignupInput
from inkpost.services.token_service import issue_token

logger = logging.getLogger(__name__)

# Salted PBKDF2-SHA256; passlib stores algorithm, rounds and salt in the hash.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# Hashing is CPU-bound for tens of milliseconds, so it runs in Starlette's
# worker thread pool instead of on the event loop.
async def hash_password(password: str) -> str:
    return await run_in_threadpool(pwd_context.hash, password)


async def verify_password(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(pwd_context.verify, password, password_hash)


async def dummy_verify() -> None:
    """Spend the cost of one verify, for lookups that found no user."""
    await run_in_threadpool(pwd_context.dummy_verify)


class UserService:
    """Stateless; receives the request's session on every call."""

    def _token_for(self, user: User) -> str:
        return issue_token(
            {"id": str(user.id)},
            settings.jwt_secret,
            expires_minutes=settings.jwt_expire_minutes,
        )

    async def signup(self, db: AsyncSession, data: SignupInput) -> str:
        """
        Create a user and return a bearer token for it.

        Raises:
            DatabaseError(403): The insert was rejected (duplicate email).
        """
        user = User(
            email=data.email,
            name=data.name,
            password_hash=await hash_password(data.password),
        )
        db.add(user)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.warning("Signup insert rejected: %s", e.__class__.__name__)
            raise DatabaseError(
                message="Error while signing up",
                context={"error_type": type(e).__name__, "detail": str(e)},
                status_code=403,
            )

        logger.info("User created: %s", user.id)
        return self._token_for(user)

    async def signin(self, db: AsyncSession, data: SigninInput) -> str:
        """
        Check credentials and return a bearer token.

        Raises:
            NotFoundError: No user with this email, or the password is wrong.
        """
        try:
            result = await db.execute(select(User).where(User.email == data.email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during signin: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None:
            # Same hashing cost as a real check, so timing does not reveal
            # which emails are registered.
            await dummy_verify()
            raise NotFoundError(resource="user", message="User not found")

        if not await verify_password(data.password, user.password_hash):
            logger.info("Signin failed for user %s: wrong password", user.id)
            raise NotFoundError(resource="user", message="User not found")

        return self._token_for(user)

    async def get_user(self, db: AsyncSession, user_id: UUID) -> Optional[CurrentUserResponse]:
        """Profile of the token owner, or None if the account is gone."""
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

        if user is None:
            return None
        return CurrentUserResponse(id=user.id, email=user.email, name=user.name)


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
