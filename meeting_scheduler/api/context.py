import asyncio
import dataclasses
from enum import Enum
from typing import Any, Callable, Optional

import strawberry
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from strawberry.fastapi import BaseContext
from strawberry.types import Info

from meeting_scheduler.auth.utils import authenticate, bearer_token
from meeting_scheduler.core.db import get_db
from meeting_scheduler.core.errors import UnauthenticatedError
from meeting_scheduler.core.timeutils import new_id
from meeting_scheduler.services import user_service


class Context(BaseContext):
    def __init__(self, db: Session, user_id: Optional[str], request_id: str):
        super().__init__()
        self.db = db
        self.user_id = user_id
        self.request_id = request_id
        # one Session per request; sibling fields resolve concurrently
        self.db_lock = asyncio.Lock()


async def get_context(request: Request, db: Session = Depends(get_db)) -> Context:
    token = bearer_token(request.headers.get("Authorization"))
    request_id = getattr(request.state, "request_id", None) or new_id()
    user_id = authenticate(token)
    # a token outlives a deleted account; only existing users are callers
    if user_id is not None and await run_in_threadpool(user_service.get_user, db, user_id) is None:
        user_id = None
    return Context(db=db, user_id=user_id, request_id=request_id)


def require_auth(info: Info) -> str:
    """The caller's user id; fails fast when the request carried no valid token."""
    user_id = info.context.user_id
    if not user_id:
        raise UnauthenticatedError()
    return user_id


async def call_service(info: Info, fn: Callable, *args, shape: Callable = None):
    """Run ``fn(db, *args)`` and the response shaping off the event loop.

    Shaping reads ORM attributes, so it has to happen before the session is
    released by the request.
    """
    db = info.context.db

    def work():
        result = fn(db, *args)
        return shape(result) if shape is not None else result

    async with info.context.db_lock:
        return await run_in_threadpool(work)


def input_data(value: Any) -> Any:
    """Strawberry input -> plain data for the pydantic schemas.

    Unset fields are left out so partial updates stay partial.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {}
        for field in dataclasses.fields(value):
            field_value = getattr(value, field.name)
            if field_value is strawberry.UNSET:
                continue
            data[field.name] = input_data(field_value)
        return data
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [input_data(item) for item in value]
    if value is strawberry.UNSET:
        return None
    return value
