from typing import List, Optional

import strawberry
from strawberry.types import Info

from meeting_scheduler.api.context import call_service, input_data, require_auth
from meeting_scheduler.api.inputs import (
    ConflictCheckInput,
    CreateMeetingInput,
    DateRangeInput,
    UpdateMeetingInput,
)
from meeting_scheduler.api.types import ConflictCheckResult, MeetingType
from meeting_scheduler.schemas import meeting as meeting_schemas
from meeting_scheduler.schemas.common import validate
from meeting_scheduler.services import meeting_service


def _meeting_list(meetings) -> List[MeetingType]:
    return [MeetingType.from_model(meeting) for meeting in meetings]


@strawberry.type
class MeetingQuery:
    @strawberry.field
    async def meetings(self, info: Info) -> List[MeetingType]:
        require_auth(info)
        return await call_service(info, meeting_service.list_all_meetings, shape=_meeting_list)

    @strawberry.field
    async def meeting(self, info: Info, id: strawberry.ID) -> Optional[MeetingType]:
        require_auth(info)
        return await call_service(
            info,
            meeting_service.get_meeting,
            id,
            shape=lambda meeting: MeetingType.from_model(meeting) if meeting is not None else None,
        )

    @strawberry.field
    async def my_meetings(self, info: Info) -> List[MeetingType]:
        user_id = require_auth(info)
        return await call_service(info, meeting_service.list_meetings_for_user, user_id, shape=_meeting_list)

    @strawberry.field
    async def meetings_by_date_range(self, info: Info, date_range: DateRangeInput) -> List[MeetingType]:
        user_id = require_auth(info)
        data = validate(meeting_schemas.DateRangeInput, input_data(date_range))
        return await call_service(
            info,
            meeting_service.list_meetings_in_range,
            user_id,
            data.start_date,
            data.end_date,
            shape=_meeting_list,
        )

    @strawberry.field
    async def upcoming_meetings(self, info: Info, limit: int = 10) -> List[MeetingType]:
        user_id = require_auth(info)
        return await call_service(
            info, meeting_service.list_upcoming_meetings, user_id, limit, shape=_meeting_list
        )

    @strawberry.field
    async def count_meetings(self, info: Info) -> int:
        require_auth(info)
        return await call_service(info, meeting_service.count_meetings)

    @strawberry.field
    async def check_meeting_conflicts(self, info: Info, input: ConflictCheckInput) -> ConflictCheckResult:
        user_id = require_auth(info)
        data = validate(meeting_schemas.ConflictCheckInput, input_data(input))
        return await call_service(
            info,
            meeting_service.check_meeting_conflicts,
            user_id,
            data,
            shape=ConflictCheckResult.from_result,
        )


@strawberry.type
class MeetingMutation:
    @strawberry.mutation
    async def create_meeting(self, info: Info, input: CreateMeetingInput) -> MeetingType:
        user_id = require_auth(info)
        data = validate(meeting_schemas.CreateMeetingInput, input_data(input))
        return await call_service(
            info, meeting_service.create_meeting, user_id, data, shape=MeetingType.from_model
        )

    @strawberry.mutation
    async def update_meeting(self, info: Info, id: strawberry.ID, input: UpdateMeetingInput) -> MeetingType:
        user_id = require_auth(info)
        data = validate(meeting_schemas.UpdateMeetingInput, input_data(input))
        return await call_service(
            info, meeting_service.update_meeting_if_owner, id, user_id, data, shape=MeetingType.from_model
        )

    @strawberry.mutation
    async def delete_meeting(self, info: Info, id: strawberry.ID) -> bool:
        user_id = require_auth(info)
        return await call_service(info, meeting_service.delete_meeting_if_owner, id, user_id)
