from datetime import datetime
from typing import Optional

from pydantic import ValidationInfo, field_validator

from meeting_scheduler.core import messages
from meeting_scheduler.schemas.common import InputSchema, check_id, check_timestamp, check_title, invalid


class EventInput(InputSchema):
    title: str
    description: str = ""
    date: datetime
    price: float

    @field_validator("title")
    @classmethod
    def valid_title(cls, value):
        return check_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value):
        return "" if value is None else value

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return check_timestamp(value, messages.INVALID_DATE)

    @field_validator("price")
    @classmethod
    def non_negative(cls, value):
        if value < 0:
            raise invalid(messages.PRICE_NON_NEGATIVE)
        return value


class EventFilterInput(InputSchema):
    created_by_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    @field_validator("created_by_id")
    @classmethod
    def valid_creator(cls, value):
        return None if value is None else check_id(value)

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def parse_dates(cls, value):
        return None if value is None else check_timestamp(value, messages.INVALID_DATE)

    @field_validator("date_to")
    @classmethod
    def ordered(cls, value, info: ValidationInfo):
        start = info.data.get("date_from")
        if value is not None and start is not None and start > value:
            raise invalid(messages.INVALID_DATE_RANGE)
        return value
