"""Maps every fault onto the public error envelope.

Each error carries a stable ``code`` and the request id. Only validation
faults carry ``details``. Unexpected faults are logged here, with their stack
trace, and reach the client as a generic message.
"""
import logging
from typing import Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from graphql import GraphQLError

from meeting_scheduler.core import messages
from meeting_scheduler.core.errors import AppError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)


def classify(exc: Optional[Exception], request_id: Optional[str]) -> Tuple[str, Optional[str], Optional[list]]:
    """(code, message, details) for a raised fault; message None keeps the caller's own."""
    if exc is None:
        # parse and schema validation errors from graphql-core
        return messages.BAD_USER_INPUT, None, None
    if isinstance(exc, PersistenceError):
        return exc.code, exc.public_message, None
    if isinstance(exc, ValidationError):
        return exc.code, exc.message, list(exc.details)
    if isinstance(exc, AppError):
        return exc.code, exc.message, None

    logger.error(f"💥 Unexpected error [{request_id}]: {exc.__class__.__name__}", exc_info=exc)
    return messages.INTERNAL_SERVER_ERROR, messages.INTERNAL_ERROR, None


def normalize_error(error: GraphQLError, request_id: Optional[str]) -> dict:
    code, message, details = classify(error.original_error, request_id)

    formatted = {"message": message or error.message}
    if error.locations:
        formatted["locations"] = [{"line": loc.line, "column": loc.column} for loc in error.locations]
    if error.path:
        formatted["path"] = list(error.path)

    extensions = {"code": code, "requestId": request_id}
    if details is not None:
        extensions["details"] = details
    formatted["extensions"] = extensions
    return formatted


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Same envelope for faults raised outside the GraphQL executor."""
    request_id = getattr(request.state, "request_id", None)
    code, message, details = classify(exc, request_id)
    extensions = {"code": code, "requestId": request_id}
    if details is not None:
        extensions["details"] = details
    return JSONResponse(
        status_code=messages.HTTP_STATUS[code],
        content={"errors": [{"message": message, "extensions": extensions}]},
    )
