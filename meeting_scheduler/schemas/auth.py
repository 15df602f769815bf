from pydantic import field_validator

from meeting_scheduler.auth.utils import is_password_too_long
from meeting_scheduler.core import messages
from meeting_scheduler.schemas.common import InputSchema, PASSWORD_REGEX, check_email, check_name, invalid


class RegisterInput(InputSchema):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def valid_name(cls, value):
        return check_name(value)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value):
        return check_email(value)

    @field_validator("password")
    @classmethod
    def strong_password(cls, value):
        if len(value) < 8:
            raise invalid(messages.PASSWORD_MIN)
        if is_password_too_long(value):
            raise invalid(messages.PASSWORD_TOO_LONG)
        if not PASSWORD_REGEX.match(value):
            raise invalid(messages.PASSWORD_COMPLEXITY)
        return value


class LoginInput(InputSchema):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def valid_email(cls, value):
        return check_email(value)

    @field_validator("password")
    @classmethod
    def long_enough(cls, value):
        if len(value) < 8:
            raise invalid(messages.PASSWORD_MIN)
        return value
