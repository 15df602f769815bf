from typing import List

import strawberry
from strawberry.types import Info

from meeting_scheduler.api.context import call_service, require_auth
from meeting_scheduler.api.types import BookingType, EventType
from meeting_scheduler.services import booking_service


@strawberry.type
class BookingQuery:
    @strawberry.field
    async def bookings(self, info: Info) -> List[BookingType]:
        require_auth(info)
        return await call_service(
            info,
            booking_service.list_all_bookings,
            shape=lambda bookings: [BookingType.from_model(booking) for booking in bookings],
        )


@strawberry.type
class BookingMutation:
    @strawberry.mutation
    async def book_event(self, info: Info, event_id: strawberry.ID) -> BookingType:
        user_id = require_auth(info)
        return await call_service(
            info, booking_service.create_booking, event_id, user_id, shape=BookingType.from_model
        )

    @strawberry.mutation
    async def cancel_booking(self, info: Info, booking_id: strawberry.ID) -> EventType:
        user_id = require_auth(info)
        return await call_service(
            info, booking_service.cancel_booking, booking_id, user_id, shape=EventType.from_model
        )
