from typing import List, Optional

import strawberry

from meeting_scheduler.api.types import Role, SortOrder, UserOrderField


# Auth
@strawberry.input
class RegisterInput:
    name: str
    email: str
    password: str


@strawberry.input
class LoginInput:
    email: str
    password: str


# Users
@strawberry.input
class UpdateProfileInput:
    name: Optional[str] = strawberry.UNSET
    address: Optional[str] = strawberry.UNSET
    dob: Optional[str] = strawberry.UNSET
    image_url: Optional[str] = strawberry.UNSET


@strawberry.input
class CreateUserInput:
    name: str
    email: str
    image_url: Optional[str] = strawberry.UNSET
    role: Role = Role.USER


@strawberry.input
class UpdateUserInput:
    name: Optional[str] = strawberry.UNSET
    email: Optional[str] = strawberry.UNSET
    image_url: Optional[str] = strawberry.UNSET
    role: Optional[Role] = strawberry.UNSET


@strawberry.input
class UsersWhere:
    search: Optional[str] = strawberry.UNSET
    role: Optional[Role] = strawberry.UNSET


@strawberry.input
class UsersOrderBy:
    field: UserOrderField = UserOrderField.NAME
    direction: SortOrder = SortOrder.ASC


@strawberry.input
class Pagination:
    limit: int = 10
    offset: int = 0


# Meetings
@strawberry.input
class CreateMeetingInput:
    title: str
    start_time: str
    end_time: str
    description: Optional[str] = strawberry.UNSET
    attendee_ids: List[strawberry.ID] = strawberry.field(default_factory=list)


@strawberry.input
class UpdateMeetingInput:
    title: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    start_time: Optional[str] = strawberry.UNSET
    end_time: Optional[str] = strawberry.UNSET
    attendee_ids: Optional[List[strawberry.ID]] = strawberry.UNSET


@strawberry.input
class DateRangeInput:
    start_date: str
    end_date: str


@strawberry.input
class ConflictCheckInput:
    start_time: str
    end_time: str
    attendee_ids: List[strawberry.ID] = strawberry.field(default_factory=list)
    exclude_meeting_id: Optional[strawberry.ID] = strawberry.UNSET


# Events
@strawberry.input
class EventInput:
    title: str
    date: str
    price: float
    description: Optional[str] = strawberry.UNSET


@strawberry.input
class EventFilterInput:
    created_by_id: Optional[strawberry.ID] = strawberry.UNSET
    date_from: Optional[str] = strawberry.UNSET
    date_to: Optional[str] = strawberry.UNSET
