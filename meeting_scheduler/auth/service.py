import logging

from sqlalchemy.orm import Session

from meeting_scheduler.auth.utils import create_access_token, get_password_hash, token_lifetime, verify_password
from meeting_scheduler.core import config
from meeting_scheduler.core.errors import DuplicateEmailError, InvalidCredentialsError, ServerMisconfiguredError
from meeting_scheduler.models.user import User
from meeting_scheduler.schemas.auth import LoginInput, RegisterInput
from meeting_scheduler.services import user_service

logger = logging.getLogger(__name__)


def register(db: Session, data: RegisterInput) -> User:
    # Check if user exists
    if user_service.get_user_by_email(db, data.email) is not None:
        raise DuplicateEmailError()

    # Hash password and save user
    user = user_service.create_user(
        db, name=data.name, email=data.email, hashed_password=get_password_hash(data.password)
    )
    logger.info(f"👤 Registered user {user.id}")
    return user


def login(db: Session, data: LoginInput) -> dict:
    user = user_service.get_user_by_email(db, data.email)
    if user is None or not verify_password(data.password, user.hashed_password):
        logger.info(f"Failed login for {data.email}")
        raise InvalidCredentialsError()

    if not config.JWT_SECRET:
        logger.error("JWT_SECRET is not configured; refusing to issue tokens")
        raise ServerMisconfiguredError()

    token = create_access_token(user.id)
    logger.info(f"🔑 User {user.id} logged in")
    return {
        "token": token,
        "user": user,
        "token_expiration": int(token_lifetime().total_seconds()),
    }
