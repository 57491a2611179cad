"""
InkPost Backend: User Route Handlers
=====================================

What:  POST /api/v1/user/signup, POST /api/v1/user/signin,
       GET /api/v1/user/auth.
How:   Validate the body (411 on a bad shape, before anything is written),
       delegate to UserService, return the token.
"""

import logging
from typing import Any, Dict, Union
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.middleware.auth import require_user
from inkpost.routes.validation import parse_body
from inkpost.schemas.common import ErrorResponse
from inkpost.schemas.user import (
    CurrentUserResponse,
    SigninInput,
    SigninResponse,
    SignupInput,
    SignupResponse,
)
from inkpost.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/user", tags=["User"])

SHAPE_ERROR_STATUS = 411


@router.post(
    "/signup",
    response_model=SignupResponse,
    responses={
        403: {"description": "Signup rejected (e.g. email taken)", "model": ErrorResponse},
        411: {"description": "Malformed body", "model": ErrorResponse},
    },
    summary="Create an account and receive a token",
)
async def signup(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> SignupResponse:
    data = await parse_body(request, SignupInput, status_code=SHAPE_ERROR_STATUS)
    token = await user_service.signup(db, data)
    return SignupResponse(jwt=token)


@router.post(
    "/signin",
    response_model=SigninResponse,
    responses={
        404: {"description": "Unknown email or wrong password", "model": ErrorResponse},
        411: {"description": "Malformed body", "model": ErrorResponse},
    },
    summary="Exchange email and password for a token",
)
async def signin(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> SigninResponse:
    data = await parse_body(request, SigninInput, status_code=SHAPE_ERROR_STATUS)
    token = await user_service.signin(db, data)
    return SigninResponse(success=True, token=token)


@router.get(
    "/auth",
    response_model=None,
    responses={
        200: {"description": "Token owner, or an error object if the account is gone"},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
    summary="Check a token and return its owner",
)
async def auth_check(
    user_id: UUID = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> Union[CurrentUserResponse, Dict[str, Any]]:
    """
    Valid token for a deleted account answers 200 with {"error": ...};
    clients treat that body as "signed out".
    """
    user = await user_service.get_user(db, user_id)
    if user is None:
        logger.info("Auth check for missing user %s", user_id)
        return {"error": "User not found"}
    return user
