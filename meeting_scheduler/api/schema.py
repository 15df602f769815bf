import logging
from typing import List, Optional

import strawberry
from fastapi import Request
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.http import GraphQLHTTPResponse
from strawberry.tools import merge_types
from strawberry.types import ExecutionContext, ExecutionResult

from meeting_scheduler.api.context import get_context
from meeting_scheduler.api.errors import normalize_error
from meeting_scheduler.auth.resolvers import AuthMutation
from meeting_scheduler.bookings.resolvers import BookingMutation, BookingQuery
from meeting_scheduler.core import config
from meeting_scheduler.events.resolvers import EventMutation, EventQuery
from meeting_scheduler.meetings.resolvers import MeetingMutation, MeetingQuery
from meeting_scheduler.users.resolvers import UserMutation, UserQuery

logger = logging.getLogger(__name__)

Query = merge_types("Query", (UserQuery, MeetingQuery, EventQuery, BookingQuery))
Mutation = merge_types("Mutation", (AuthMutation, UserMutation, MeetingMutation, EventMutation, BookingMutation))


class SchedulerSchema(strawberry.Schema):
    def process_errors(
        self, errors: List[GraphQLError], execution_context: Optional[ExecutionContext] = None
    ) -> None:
        # logged by normalize_error, where the request id is known
        for error in errors:
            logger.debug(f"GraphQL error: {error.message}")


schema = SchedulerSchema(query=Query, mutation=Mutation)


class SchedulerGraphQLRouter(GraphQLRouter):
    async def process_result(self, request: Request, result: ExecutionResult) -> GraphQLHTTPResponse:
        request_id = getattr(request.state, "request_id", None)
        data: GraphQLHTTPResponse = {"data": result.data}
        if result.errors:
            data["errors"] = [normalize_error(error, request_id) for error in result.errors]
        if result.extensions:
            data["extensions"] = result.extensions
        return data


def create_graphql_router() -> GraphQLRouter:
    return SchedulerGraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=None if config.IS_PRODUCTION else "graphiql",
    )
