"""GraphQL output types and how they are shaped from the ORM rows."""
import json
from typing import List, Optional

import strawberry
from strawberry.types import Info

from meeting_scheduler.api.context import call_service
from meeting_scheduler.core.timeutils import to_iso
from meeting_scheduler.models.user import Role as RoleModel
from meeting_scheduler.schemas.common import IMAGE_SIZE_KEYS
from meeting_scheduler.schemas.user import SortOrder as SortOrderModel
from meeting_scheduler.schemas.user import UserOrderField as UserOrderFieldModel
from meeting_scheduler.services import event_service

Role = strawberry.enum(RoleModel, name="Role")
UserOrderField = strawberry.enum(UserOrderFieldModel, name="UserOrderField")
SortOrder = strawberry.enum(SortOrderModel, name="SortOrder")


@strawberry.type
class ImageSizes:
    thumb: str
    small: str
    medium: str


def parse_image_sizes(image_url: Optional[str]) -> Optional[ImageSizes]:
    """The {thumb, small, medium} set when ``image_url`` holds one, else None."""
    if not image_url or not image_url.startswith("{"):
        return None
    try:
        sizes = json.loads(image_url)
    except ValueError:
        return None
    if not isinstance(sizes, dict) or not all(isinstance(sizes.get(key), str) for key in IMAGE_SIZE_KEYS):
        return None
    return ImageSizes(thumb=sizes["thumb"], small=sizes["small"], medium=sizes["medium"])


@strawberry.type(name="AuthUser")
class AuthUserType:
    id: strawberry.ID
    name: str
    email: str
    image_url: Optional[str] = None

    @classmethod
    def from_model(cls, user) -> "AuthUserType":
        return cls(id=strawberry.ID(user.id), name=user.name, email=user.email, image_url=user.image_url)


@strawberry.type
class AuthPayload:
    token: str
    user: AuthUserType
    token_expiration: Optional[int] = None

    @classmethod
    def from_result(cls, result: dict) -> "AuthPayload":
        return cls(
            token=result["token"],
            user=AuthUserType.from_model(result["user"]),
            token_expiration=result["token_expiration"],
        )


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    name: str
    email: str
    role: Role
    created_event_ids: List[strawberry.ID]
    created_at: str
    updated_at: str
    image_url: Optional[str] = None
    image_sizes: Optional[ImageSizes] = None
    address: Optional[str] = None
    dob: Optional[str] = None

    @strawberry.field
    async def created_events(self, info: Info) -> List["EventType"]:
        return await call_service(
            info,
            event_service.get_events_by_ids,
            [str(event_id) for event_id in self.created_event_ids],
            shape=lambda events: [EventType.from_model(event) for event in events],
        )

    @classmethod
    def from_model(cls, user) -> "UserType":
        return cls(
            id=strawberry.ID(user.id),
            name=user.name,
            email=user.email,
            role=RoleModel(user.role),
            created_event_ids=[strawberry.ID(event_id) for event_id in (user.created_events or [])],
            created_at=to_iso(user.created_at),
            updated_at=to_iso(user.updated_at),
            image_url=user.image_url,
            image_sizes=parse_image_sizes(user.image_url),
            address=user.address or "",
            dob=to_iso(user.dob),
        )


@strawberry.type(name="Meeting")
class MeetingType:
    id: strawberry.ID
    title: str
    start_time: str
    end_time: str
    attendees: List[UserType]
    created_by: UserType
    created_at: str
    updated_at: str
    description: Optional[str] = None
    meeting_url: Optional[str] = None

    @classmethod
    def from_model(cls, meeting) -> "MeetingType":
        return cls(
            id=strawberry.ID(meeting.id),
            title=meeting.title,
            start_time=to_iso(meeting.start_time),
            end_time=to_iso(meeting.end_time),
            attendees=[UserType.from_model(attendee) for attendee in meeting.attendees],
            created_by=UserType.from_model(meeting.owner),
            created_at=to_iso(meeting.created_at),
            updated_at=to_iso(meeting.updated_at),
            description=meeting.description or "",
            meeting_url=meeting.meeting_url,
        )


@strawberry.type(name="Event")
class EventType:
    id: strawberry.ID
    title: str
    date: str
    price: float
    created_by: UserType
    created_at: str
    updated_at: str
    description: Optional[str] = None

    @classmethod
    def from_model(cls, event) -> "EventType":
        return cls(
            id=strawberry.ID(event.id),
            title=event.title,
            date=to_iso(event.date),
            price=event.price,
            created_by=UserType.from_model(event.creator),
            created_at=to_iso(event.created_at),
            updated_at=to_iso(event.updated_at),
            description=event.description or "",
        )


@strawberry.type(name="Booking")
class BookingType:
    id: strawberry.ID
    event: EventType
    user: UserType
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, booking) -> "BookingType":
        return cls(
            id=strawberry.ID(booking.id),
            event=EventType.from_model(booking.event),
            user=UserType.from_model(booking.user),
            created_at=to_iso(booking.created_at),
            updated_at=to_iso(booking.updated_at),
        )


@strawberry.type
class MeetingConflict:
    meeting: MeetingType
    conflict_type: str
    severity: str
    message: str


@strawberry.type
class ConflictCheckResult:
    has_conflicts: bool
    conflicts: List[MeetingConflict]
    warnings: List[str]

    @classmethod
    def from_result(cls, result: dict) -> "ConflictCheckResult":
        return cls(
            has_conflicts=result["has_conflicts"],
            conflicts=[
                MeetingConflict(
                    meeting=MeetingType.from_model(conflict["meeting"]),
                    conflict_type=conflict["conflict_type"],
                    severity=conflict["severity"],
                    message=conflict["message"],
                )
                for conflict in result["conflicts"]
            ],
            warnings=list(result["warnings"]),
        )
