"""
Credential validation.

Each mode owns a fixed schema; ``validate`` picks it from SCHEMAS and turns
pydantic's error list into one human-readable message per field. Nothing here
keeps state between calls, so switching mode can never leak errors from the
previous rule set.
"""

from typing import Any, Dict, Mapping, Type, Union

from pydantic import BaseModel, ValidationError

from .exceptions import FieldValidationError
from .models import LoginCredentials, Mode, RegisterCredentials

SCHEMAS: Dict[Mode, Type[BaseModel]] = {
    Mode.LOGIN: LoginCredentials,
    Mode.REGISTER: RegisterCredentials,
}

FIELD_MESSAGES = {
    "username": "Username required",
    "email": "Invalid email",
    "password": "Minimum 6 characters",
}

Credentials = Union[LoginCredentials, RegisterCredentials]


def validate(mode: Mode, raw: Mapping[str, Any]) -> Credentials:
    schema = SCHEMAS[Mode(mode)]
    try:
        return schema.model_validate(dict(raw))
    except ValidationError as e:
        raise FieldValidationError(_collect_errors(e)) from None


def field_errors(mode: Mode, raw: Mapping[str, Any]) -> Dict[str, str]:
    """Same rules as ``validate`` but returns the errors instead of raising."""
    try:
        validate(mode, raw)
    except FieldValidationError as e:
        return e.errors
    return {}


def _collect_errors(exc: ValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__all__"
        # first failure per field wins
        errors.setdefault(field, FIELD_MESSAGES.get(field, err["msg"]))
    return errors
