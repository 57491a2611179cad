"""
InkPost Backend: User Request/Response Schemas
===============================================

What:  Input shapes for signup/signin and the token responses.
How:   Routes validate the raw JSON body against these models themselves so a
       shape failure maps to the 411 status clients expect, not FastAPI's 422.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SignupInput(BaseModel):
    """Body of POST /api/v1/user/signup."""
    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)
    name: Optional[str] = Field(default=None, max_length=255)


class SigninInput(BaseModel):
    """Body of POST /api/v1/user/signin."""
    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)


class SignupResponse(BaseModel):
    jwt: str = Field(description="Bearer token for the new user")


class SigninResponse(BaseModel):
    success: bool = True
    token: str = Field(description="Bearer token for the authenticated user")


class CurrentUserResponse(BaseModel):
    """Returned by GET /api/v1/user/auth for a valid token."""
    id: uuid.UUID
    email: str
    name: Optional[str] = None
