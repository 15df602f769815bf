from typing import List, Optional

import strawberry
from strawberry.types import Info

from meeting_scheduler.api.context import call_service, input_data, require_auth
from meeting_scheduler.api.inputs import (
    CreateUserInput,
    Pagination,
    UpdateProfileInput,
    UpdateUserInput,
    UsersOrderBy,
    UsersWhere,
)
from meeting_scheduler.api.types import AuthUserType, UserType
from meeting_scheduler.schemas import user as user_schemas
from meeting_scheduler.schemas.common import validate
from meeting_scheduler.services import user_service


def _optional_user(user) -> Optional[UserType]:
    return UserType.from_model(user) if user is not None else None


def _users_query(where, order_by, pagination) -> user_schemas.UsersQuery:
    return validate(
        user_schemas.UsersQuery,
        {
            "where": input_data(where),
            "order_by": input_data(order_by),
            "pagination": input_data(pagination),
        },
    )


@strawberry.type
class UserQuery:
    @strawberry.field
    async def me(self, info: Info) -> Optional[AuthUserType]:
        user_id = require_auth(info)
        return await call_service(
            info,
            user_service.get_user,
            user_id,
            shape=lambda user: AuthUserType.from_model(user) if user is not None else None,
        )

    @strawberry.field
    async def my_profile(self, info: Info) -> Optional[UserType]:
        user_id = require_auth(info)
        return await call_service(info, user_service.get_user, user_id, shape=_optional_user)

    @strawberry.field
    async def user(self, info: Info, id: strawberry.ID) -> Optional[UserType]:
        require_auth(info)
        return await call_service(info, user_service.get_user, id, shape=_optional_user)

    @strawberry.field
    async def users(
        self,
        info: Info,
        where: Optional[UsersWhere] = None,
        order_by: Optional[UsersOrderBy] = None,
        pagination: Optional[Pagination] = None,
    ) -> List[UserType]:
        require_auth(info)
        params = _users_query(where, order_by, pagination)
        return await call_service(
            info,
            user_service.list_users,
            params,
            shape=lambda users: [UserType.from_model(user) for user in users],
        )

    @strawberry.field
    async def count_users(self, info: Info, where: Optional[UsersWhere] = None) -> int:
        require_auth(info)
        params = _users_query(where, None, None)
        return await call_service(info, user_service.count_users, params.where)


@strawberry.type
class UserMutation:
    @strawberry.mutation
    async def update_my_profile(self, info: Info, input: UpdateProfileInput) -> UserType:
        user_id = require_auth(info)
        data = validate(user_schemas.UpdateProfileInput, input_data(input))
        return await call_service(info, user_service.update_profile, user_id, data, shape=UserType.from_model)

    # Admin only
    @strawberry.mutation
    async def create_user(self, info: Info, input: CreateUserInput) -> UserType:
        caller_id = require_auth(info)
        data = validate(user_schemas.CreateUserInput, input_data(input))
        return await call_service(
            info, user_service.admin_create_user, caller_id, data, shape=UserType.from_model
        )

    @strawberry.mutation
    async def update_user(self, info: Info, id: strawberry.ID, input: UpdateUserInput) -> UserType:
        caller_id = require_auth(info)
        data = validate(user_schemas.UpdateUserInput, input_data(input))
        return await call_service(
            info, user_service.admin_update_user, caller_id, id, data, shape=UserType.from_model
        )

    @strawberry.mutation
    async def delete_user(self, info: Info, id: strawberry.ID) -> bool:
        caller_id = require_auth(info)
        return await call_service(info, user_service.admin_delete_user, caller_id, id)
