from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from meeting_scheduler.core import messages
from meeting_scheduler.core.timeutils import parse_timestamp
from meeting_scheduler.models.user import Role
from meeting_scheduler.schemas.common import (
    InputSchema,
    check_email,
    check_image_reference,
    check_max_length,
    check_name,
    invalid,
    is_http_url,
)


class UpdateProfileInput(InputSchema):
    name: Optional[str] = None
    address: Optional[str] = None
    dob: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def long_enough(cls, value):
        if value is None:
            return None
        if len(value.strip()) < 2:
            raise invalid(messages.NAME_MIN)
        return check_max_length(value.strip(), "Name")

    @field_validator("address")
    @classmethod
    def short_address(cls, value):
        return None if value is None else check_max_length(value, "Address")

    @field_validator("dob")
    @classmethod
    def valid_dob(cls, value):
        if value:
            try:
                parse_timestamp(value)
            except ValueError:
                raise invalid(messages.INVALID_DOB)
        return value

    @field_validator("image_url")
    @classmethod
    def valid_url(cls, value):
        if value is not None and not is_http_url(value):
            raise invalid(messages.INVALID_URL)
        return value

    def changes(self) -> dict:
        """Fields to write; an empty dob string clears the stored date."""
        update = self.model_dump(exclude_unset=True, exclude_none=True)
        if "dob" in update:
            update["dob"] = parse_dob(update["dob"])
        return update


def parse_dob(value: str) -> Optional[date]:
    return parse_timestamp(value).date() if value else None


class CreateUserInput(InputSchema):
    name: str
    email: str
    image_url: Optional[str] = None
    role: Role = Role.USER

    @field_validator("name")
    @classmethod
    def valid_name(cls, value):
        return check_name(value)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value):
        return check_email(value)

    @field_validator("image_url")
    @classmethod
    def valid_image(cls, value):
        return None if value is None else check_image_reference(value)


class UpdateUserInput(InputSchema):
    name: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None
    role: Optional[Role] = None

    @field_validator("name")
    @classmethod
    def valid_name(cls, value):
        return None if value is None else check_name(value)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value):
        return None if value is None else check_email(value)

    @field_validator("image_url")
    @classmethod
    def valid_image(cls, value):
        return None if value is None else check_image_reference(value)

    def changes(self) -> dict:
        update = self.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in update:
            update["role"] = Role(update["role"]).value
        return update


class UserOrderField(str, Enum):
    NAME = "NAME"
    CREATED_AT = "CREATED_AT"
    UPDATED_AT = "UPDATED_AT"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class UsersWhere(InputSchema):
    search: Optional[str] = None
    role: Optional[Role] = None


class UsersOrderBy(InputSchema):
    field: UserOrderField = UserOrderField.NAME
    direction: SortOrder = SortOrder.ASC


class Pagination(InputSchema):
    limit: int = Field(10, ge=1, le=100)
    offset: int = Field(0, ge=0)


class UsersQuery(InputSchema):
    where: UsersWhere = UsersWhere()
    order_by: UsersOrderBy = UsersOrderBy()
    pagination: Pagination = Pagination()

    @field_validator("where", "order_by", "pagination", mode="before")
    @classmethod
    def default_when_null(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value
