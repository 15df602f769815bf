from typing import Dict, List, Optional

from meeting_scheduler.core import messages


class AppError(Exception):
    """Base class for faults that map onto a stable external error code."""

    code = messages.INTERNAL_SERVER_ERROR
    default_message = messages.INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None, details: Optional[List[Dict[str, str]]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    code = messages.BAD_USER_INPUT
    default_message = messages.VALIDATION_FAILED

    def __init__(self, message: Optional[str] = None, details: Optional[List[Dict[str, str]]] = None):
        super().__init__(message, details or [])

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(details=[{"field": field, "message": message}])


class InvalidCredentialsError(AppError):
    code = messages.BAD_USER_INPUT
    default_message = messages.INVALID_CREDENTIALS


class UnauthenticatedError(AppError):
    code = messages.UNAUTHENTICATED
    default_message = messages.NOT_AUTHENTICATED


class ForbiddenError(AppError):
    code = messages.FORBIDDEN
    default_message = messages.FORBIDDEN_MESSAGE


class NotFoundError(AppError):
    code = messages.NOT_FOUND
    default_message = messages.RESOURCE_NOT_FOUND


class ConflictError(AppError):
    code = messages.CONFLICT
    default_message = messages.DUPLICATE_KEY


class DuplicateEmailError(ConflictError):
    default_message = messages.EMAIL_IN_USE


class ServerMisconfiguredError(AppError):
    default_message = messages.JWT_MISSING


class PersistenceError(AppError):
    """A store-level failure, re-signaled with a normalized message.

    ``duplicate_key`` survives from the underlying driver error so the
    uniqueness violation can still be reported as a conflict.
    """

    default_message = messages.DATABASE_ERROR

    def __init__(self, message: Optional[str] = None, duplicate_key: bool = False):
        self.duplicate_key = duplicate_key
        super().__init__(message)

    @property
    def code(self):
        return messages.CONFLICT if self.duplicate_key else messages.INTERNAL_SERVER_ERROR

    @property
    def public_message(self) -> str:
        return messages.DUPLICATE_KEY if self.duplicate_key else messages.INTERNAL_ERROR
