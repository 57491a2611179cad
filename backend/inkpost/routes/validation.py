"""
Request body parsing for routes whose shape errors use custom status codes.

FastAPI's automatic body validation always answers 422. The user and blog
routes instead read the JSON themselves and validate it here, so signup,
signin and create can answer 411 and update can answer 400 with details.
"""

import json
from typing import Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from inkpost.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

INCORRECT_INPUT = "Incorrect input formatting"


async def parse_body(
    request: Request,
    schema: Type[ModelT],
    status_code: int = 400,
    message: str = INCORRECT_INPUT,
) -> ModelT:
    """
    Parse the request body as JSON and validate it against `schema`.

    Raises:
        ValidationError: Body is not JSON, not an object, or does not match.
            `details.errors` holds pydantic's error list when available.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(
            message=message,
            context={"errors": [{"loc": ["body"], "msg": "Body must be valid JSON"}]},
            status_code=status_code,
        )

    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            message=message,
            context={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            status_code=status_code,
        )
