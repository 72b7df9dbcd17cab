"""Credential and subscription rules applied before any store or hash call.

Rule violations are raised as ``PydanticCustomError`` so that they surface
through FastAPI's ``RequestValidationError`` with the message untouched;
``first_error_message`` turns the error list into the single message the
client gets back.
"""
from __future__ import annotations

import re
from typing import Any, Sequence

from email_validator import EmailNotValidError, validate_email
from pydantic_core import PydanticCustomError

from accounts.utils.base import Subscription
from accounts.utils.config import settings


PASSWORD_PATTERN = re.compile(r"^[a-zA-Z0-9]{3,30}$")
PASSWORD_MIN_LENGTH = 7

# Error types whose messages are already client-ready.
RULE_ERROR_TYPES = {"string.empty", "string.email", "string.pattern.base", "string.min"}

# pydantic type errors, reworded to match the rule messages.
EXPECTED_TYPES = {
    "string_type": "a string",
    "int_type": "an integer",
    "bool_type": "a boolean",
    "dict_type": "an object",
    "model_type": "an object",
    "model_attributes_type": "an object",
}


def _empty(field: str) -> PydanticCustomError:
    return PydanticCustomError("string.empty", f'"{field}" is not allowed to be empty')


def check_email(value: str) -> str:
    if value == "":
        raise _empty("email")

    invalid = PydanticCustomError("string.email", '"email" must be a valid email')
    try:
        # the store's EmailField rejects non-ascii local parts
        result = validate_email(value, check_deliverability=False, allow_smtputf8=False)
    except EmailNotValidError:
        raise invalid from None

    segments = result.ascii_domain.split(".")
    if len(segments) < 2 or segments[-1].lower() not in settings.allowed_email_tlds:
        raise invalid
    return value


def check_password(value: str) -> str:
    if value == "":
        raise _empty("password")
    if not PASSWORD_PATTERN.match(value):
        raise PydanticCustomError(
            "string.pattern.base",
            f'"password" fails to match the required pattern: /{PASSWORD_PATTERN.pattern}/',
        )
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "string.min",
            f'"password" length must be at least {PASSWORD_MIN_LENGTH} characters long',
        )
    return value


def is_valid_subscription(value: Any) -> bool:
    return value in Subscription.values()


def first_error_message(errors: Sequence[dict[str, Any]]) -> str:
    """Render the first of pydantic's errors as a single client message."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    loc = [part for part in error.get("loc", ()) if part != "body"]
    field = str(loc[-1]) if loc else "body"

    if error.get("type") in RULE_ERROR_TYPES:
        return error["msg"]
    if error.get("type") == "missing":
        return f'"{field}" is required'
    expected = EXPECTED_TYPES.get(error.get("type"))
    if expected:
        return f'"{field}" must be {expected}'
    return f'"{field}" is invalid'
