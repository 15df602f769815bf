from typing import List, Optional

import strawberry
from strawberry.types import Info

from meeting_scheduler.api.context import call_service, input_data, require_auth
from meeting_scheduler.api.inputs import EventFilterInput, EventInput
from meeting_scheduler.api.types import EventType
from meeting_scheduler.schemas import event as event_schemas
from meeting_scheduler.schemas.common import validate
from meeting_scheduler.services import event_service


def _event_list(events) -> List[EventType]:
    return [EventType.from_model(event) for event in events]


@strawberry.type
class EventQuery:
    @strawberry.field
    async def events(self, info: Info, filter: Optional[EventFilterInput] = None) -> List[EventType]:
        require_auth(info)
        if filter is None:
            return await call_service(info, event_service.list_all_events, shape=_event_list)
        filters = validate(event_schemas.EventFilterInput, input_data(filter))
        return await call_service(info, event_service.list_events_filtered, filters, shape=_event_list)

    @strawberry.field
    async def event(self, info: Info, id: strawberry.ID) -> Optional[EventType]:
        require_auth(info)
        return await call_service(
            info,
            event_service.get_event,
            id,
            shape=lambda event: EventType.from_model(event) if event is not None else None,
        )


@strawberry.type
class EventMutation:
    @strawberry.mutation
    async def create_event(self, info: Info, event_input: EventInput) -> EventType:
        user_id = require_auth(info)
        data = validate(event_schemas.EventInput, input_data(event_input))
        return await call_service(info, event_service.create_event, user_id, data, shape=EventType.from_model)

    @strawberry.mutation
    async def update_event(self, info: Info, id: strawberry.ID, event_input: EventInput) -> EventType:
        user_id = require_auth(info)
        data = validate(event_schemas.EventInput, input_data(event_input))
        return await call_service(
            info, event_service.update_event_if_owner, id, user_id, data, shape=EventType.from_model
        )

    @strawberry.mutation
    async def delete_event(self, info: Info, id: strawberry.ID) -> bool:
        user_id = require_auth(info)
        return await call_service(info, event_service.delete_event_if_owner, id, user_id)
