from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import ValidationInfo, field_validator

from meeting_scheduler.core import config, messages
from meeting_scheduler.schemas.common import (
    InputSchema,
    check_id,
    check_timestamp,
    check_title,
    invalid,
)

TITLE_MAX_LENGTH = 100


def duration_message() -> str:
    return messages.MEETING_DURATION.format(
        min=config.MEETING_MIN_MINUTES, max_hours=config.MEETING_MAX_MINUTES // 60
    )


def check_meeting_window(start: datetime, end: datetime):
    """Raise the matching validation issue if start/end break the meeting invariants."""
    if start >= end:
        raise invalid(messages.START_BEFORE_END)
    duration = end - start
    if not (
        timedelta(minutes=config.MEETING_MIN_MINUTES)
        <= duration
        <= timedelta(minutes=config.MEETING_MAX_MINUTES)
    ):
        raise invalid(duration_message())


def check_attendee_ids(values: List[str]) -> List[str]:
    ids = [check_id(value, messages.INVALID_ATTENDEE_ID) for value in values]
    # keep first occurrence order
    return list(dict.fromkeys(ids))


class CreateMeetingInput(InputSchema):
    title: str
    description: str = ""
    start_time: datetime
    end_time: datetime
    attendee_ids: List[str] = []

    @field_validator("title")
    @classmethod
    def valid_title(cls, value):
        return check_title(value, TITLE_MAX_LENGTH)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value):
        return "" if value is None else value

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_start(cls, value):
        return check_timestamp(value, messages.INVALID_START_TIME)

    @field_validator("end_time", mode="before")
    @classmethod
    def parse_end(cls, value):
        return check_timestamp(value, messages.INVALID_END_TIME)

    @field_validator("end_time")
    @classmethod
    def within_bounds(cls, value, info: ValidationInfo):
        start = info.data.get("start_time")
        if start is not None:
            check_meeting_window(start, value)
        return value

    @field_validator("attendee_ids", mode="before")
    @classmethod
    def default_attendees(cls, value):
        return [] if value is None else value

    @field_validator("attendee_ids")
    @classmethod
    def valid_attendees(cls, value):
        return check_attendee_ids(value)


class UpdateMeetingInput(InputSchema):
    """Partial update; the stored start/end are re-checked by the service."""

    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    attendee_ids: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def valid_title(cls, value):
        return None if value is None else check_title(value, TITLE_MAX_LENGTH)

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_start(cls, value):
        return None if value is None else check_timestamp(value, messages.INVALID_START_TIME)

    @field_validator("end_time", mode="before")
    @classmethod
    def parse_end(cls, value):
        return None if value is None else check_timestamp(value, messages.INVALID_END_TIME)

    @field_validator("end_time")
    @classmethod
    def ordered(cls, value, info: ValidationInfo):
        start = info.data.get("start_time")
        if value is not None and start is not None and start >= value:
            raise invalid(messages.START_BEFORE_END)
        return value

    @field_validator("attendee_ids")
    @classmethod
    def valid_attendees(cls, value):
        return None if value is None else check_attendee_ids(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class DateRangeInput(InputSchema):
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, value):
        return check_timestamp(value, messages.INVALID_DATE)

    @field_validator("end_date")
    @classmethod
    def ordered(cls, value, info: ValidationInfo):
        start = info.data.get("start_date")
        if start is not None and start > value:
            raise invalid(messages.INVALID_DATE_RANGE)
        return value


class ConflictCheckInput(InputSchema):
    start_time: datetime
    end_time: datetime
    attendee_ids: List[str] = []
    exclude_meeting_id: Optional[str] = None

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_start(cls, value):
        return check_timestamp(value, messages.INVALID_START_TIME)

    @field_validator("end_time", mode="before")
    @classmethod
    def parse_end(cls, value):
        return check_timestamp(value, messages.INVALID_END_TIME)

    @field_validator("end_time")
    @classmethod
    def ordered(cls, value, info: ValidationInfo):
        start = info.data.get("start_time")
        if start is not None and start >= value:
            raise invalid(messages.START_BEFORE_END)
        return value

    @field_validator("attendee_ids")
    @classmethod
    def valid_attendees(cls, value):
        return check_attendee_ids(value)
