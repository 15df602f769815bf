"""Shared pieces of the input schemas.

Every operation input is checked once, at the resolver boundary, by
``validate``. Field aliases are camelCase so that error paths line up with the
GraphQL argument names the client sent.
"""
import json
import re
from datetime import datetime
from typing import Any, Dict, Type, TypeVar
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from meeting_scheduler.core import messages
from meeting_scheduler.core.errors import ValidationError
from meeting_scheduler.core.timeutils import is_valid_id, parse_timestamp

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_REGEX = re.compile(r"^[a-zA-Z\s'-]+$")
PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]")
IMAGE_SIZE_KEYS = ("thumb", "small", "medium")
# String(255) columns
MAX_COLUMN_LENGTH = 255

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class InputSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def invalid(message: str) -> PydanticCustomError:
    return PydanticCustomError("value_error", message)


def check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise invalid(messages.NAME_REQUIRED)
    if len(value) < 2:
        raise invalid(messages.NAME_MIN)
    if len(value) > 50:
        raise invalid(messages.NAME_MAX)
    if not NAME_REGEX.match(value):
        raise invalid(messages.NAME_PATTERN)
    return value


def check_email(value: str) -> str:
    value = value.strip().lower()
    check_max_length(value, "Email")
    if not EMAIL_REGEX.match(value):
        raise invalid(messages.EMAIL_INVALID)
    return value


def check_max_length(value: str, field: str, max_length: int = MAX_COLUMN_LENGTH) -> str:
    if len(value) > max_length:
        raise invalid(messages.TOO_LONG.format(field=field, max=max_length))
    return value


def check_title(value: str, max_length: int = MAX_COLUMN_LENGTH) -> str:
    value = value.strip()
    if not value:
        raise invalid(messages.TITLE_REQUIRED)
    if len(value) > max_length:
        raise invalid(messages.TITLE_MAX.format(max=max_length))
    return value


def check_timestamp(value: Any, message: str) -> datetime:
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        raise invalid(message)


def check_id(value: Any, message: str = messages.INVALID_ID) -> str:
    if not is_valid_id(value):
        raise invalid(message)
    return str(value)


def is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def check_image_reference(value: str) -> str:
    """A URL, an empty string, or a JSON-serialized {thumb, small, medium} set."""
    if value == "" or is_http_url(value):
        return value
    if value.startswith("{"):
        try:
            sizes = json.loads(value)
        except ValueError:
            raise invalid(messages.INVALID_IMAGE)
        if isinstance(sizes, dict) and all(isinstance(sizes.get(key), str) for key in IMAGE_SIZE_KEYS):
            return value
    raise invalid(messages.INVALID_IMAGE)


def issue_field(loc) -> str:
    return ".".join(str(part) for part in loc)


def validate(schema: Type[SchemaT], data: Dict[str, Any]) -> SchemaT:
    """Validate ``data`` against ``schema`` or raise ValidationError with per-field details."""
    payload = {to_camel(key): value for key, value in data.items()}
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        details = [
            {"field": issue_field(issue["loc"]), "message": issue["msg"]}
            for issue in exc.errors()
        ]
        raise ValidationError(details=details) from exc
