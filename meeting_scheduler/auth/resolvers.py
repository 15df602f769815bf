import strawberry
from strawberry.types import Info

from meeting_scheduler.api.context import call_service, input_data
from meeting_scheduler.api.inputs import LoginInput, RegisterInput
from meeting_scheduler.api.types import AuthPayload, AuthUserType
from meeting_scheduler.auth import service
from meeting_scheduler.schemas import auth as auth_schemas
from meeting_scheduler.schemas.common import validate


# -----------------------------
# Public mutations
# -----------------------------
@strawberry.type
class AuthMutation:
    @strawberry.mutation
    async def register(self, info: Info, input: RegisterInput) -> AuthUserType:
        data = validate(auth_schemas.RegisterInput, input_data(input))
        return await call_service(info, service.register, data, shape=AuthUserType.from_model)

    @strawberry.mutation
    async def login(self, info: Info, input: LoginInput) -> AuthPayload:
        data = validate(auth_schemas.LoginInput, input_data(input))
        return await call_service(info, service.login, data, shape=AuthPayload.from_result)
