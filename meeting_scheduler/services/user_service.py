import logging
import secrets
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from meeting_scheduler.auth.utils import get_password_hash
from meeting_scheduler.core import messages
from meeting_scheduler.core.db import write_guard
from meeting_scheduler.core.errors import DuplicateEmailError, ForbiddenError, NotFoundError
from meeting_scheduler.models.user import Role, User
from meeting_scheduler.schemas.user import (
    CreateUserInput,
    SortOrder,
    UpdateProfileInput,
    UpdateUserInput,
    UserOrderField,
    UsersQuery,
    UsersWhere,
)

logger = logging.getLogger(__name__)

ORDER_COLUMNS = {
    UserOrderField.NAME: User.name,
    UserOrderField.CREATED_AT: User.created_at,
    UserOrderField.UPDATED_AT: User.updated_at,
}


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == str(user_id)).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(db: Session, name: str, email: str, hashed_password: str, **fields) -> User:
    user = User(name=name, email=email.strip().lower(), hashed_password=hashed_password, **fields)
    with write_guard(db, "user"):
        db.add(user)
    db.refresh(user)
    return user


def update_user_by_id(db: Session, user_id: str, update: dict) -> Optional[User]:
    user = get_user(db, user_id)
    if user is None:
        return None
    if "email" in update and update["email"] != user.email:
        ensure_email_available(db, update["email"], exclude_id=user.id)
    with write_guard(db, "user"):
        for key, value in update.items():
            setattr(user, key, value)
    db.refresh(user)
    return user


def ensure_email_available(db: Session, email: str, exclude_id: str = None):
    query = db.query(User.id).filter(User.email == email.strip().lower())
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise DuplicateEmailError()


def _filtered(db: Session, where: UsersWhere):
    query = db.query(User)
    if where.search:
        pattern = f"%{where.search.strip().lower()}%"
        query = query.filter(or_(func.lower(User.name).like(pattern), User.email.like(pattern)))
    if where.role:
        query = query.filter(User.role == where.role.value)
    return query


def list_users(db: Session, params: UsersQuery = None) -> List[User]:
    """Users matching ``params.where``, ordered and paginated (name ascending by default)."""
    params = params or UsersQuery()
    column = ORDER_COLUMNS[params.order_by.field]
    ordering = column.desc() if params.order_by.direction == SortOrder.DESC else column.asc()
    return (
        _filtered(db, params.where)
        .order_by(ordering, User.id)
        .offset(params.pagination.offset)
        .limit(params.pagination.limit)
        .all()
    )


def count_users(db: Session, where: UsersWhere = None) -> int:
    return _filtered(db, where or UsersWhere()).count()


def update_profile(db: Session, user_id: str, data: UpdateProfileInput) -> User:
    user = update_user_by_id(db, user_id, data.changes())
    if user is None:
        raise NotFoundError(messages.USER_NOT_FOUND)
    logger.info(f"👤 User {user_id} updated their profile")
    return user


# -------------------------
# Admin user management
# -------------------------
def require_admin(db: Session, caller_id: str) -> User:
    caller = get_user(db, caller_id)
    if caller is None or caller.role != Role.ADMIN.value:
        raise ForbiddenError(messages.ADMIN_REQUIRED)
    return caller


def admin_create_user(db: Session, caller_id: str, data: CreateUserInput) -> User:
    require_admin(db, caller_id)
    ensure_email_available(db, data.email)
    # managed accounts start with an unusable random password
    user = create_user(
        db,
        name=data.name,
        email=data.email,
        hashed_password=get_password_hash(secrets.token_urlsafe(32)),
        image_url=data.image_url or None,
        role=data.role.value,
    )
    logger.info(f"👤 Admin {caller_id} created user {user.id}")
    return user


def admin_update_user(db: Session, caller_id: str, user_id: str, data: UpdateUserInput) -> User:
    require_admin(db, caller_id)
    user = update_user_by_id(db, user_id, data.changes())
    if user is None:
        raise NotFoundError(messages.USER_NOT_FOUND)
    return user


def admin_delete_user(db: Session, caller_id: str, user_id: str) -> bool:
    require_admin(db, caller_id)
    user = get_user(db, user_id)
    if user is None:
        return False
    with write_guard(db, "user"):
        db.delete(user)
    logger.info(f"🧹 Admin {caller_id} deleted user {user_id}")
    return True
