import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from meeting_scheduler.core import messages
from meeting_scheduler.core.db import write_guard
from meeting_scheduler.core.errors import ForbiddenError, NotFoundError
from meeting_scheduler.models.booking import Booking
from meeting_scheduler.models.event import Event
from meeting_scheduler.models.user import CreatedEventLink, User
from meeting_scheduler.schemas.event import EventFilterInput, EventInput
from meeting_scheduler.services.ownership import OwnerCheck, authorize_owner_action

logger = logging.getLogger(__name__)


def _populated(db: Session):
    return db.query(Event).options(joinedload(Event.creator))


# -------------------------
# Reads
# -------------------------
def get_event(db: Session, event_id: str) -> Optional[Event]:
    return _populated(db).filter(Event.id == str(event_id)).first()


def get_events_by_ids(db: Session, event_ids: List[str]) -> List[Event]:
    if not event_ids:
        return []
    return _populated(db).filter(Event.id.in_(event_ids)).order_by(Event.date.asc()).all()


def list_all_events(db: Session) -> List[Event]:
    return _populated(db).order_by(Event.date.asc()).all()


def list_events_filtered(db: Session, filters: EventFilterInput) -> List[Event]:
    """Events matching only the filters that were supplied; date bounds are inclusive."""
    query = _populated(db)
    if filters.created_by_id:
        query = query.filter(Event.created_by_id == filters.created_by_id)
    if filters.date_from is not None:
        query = query.filter(Event.date >= filters.date_from)
    if filters.date_to is not None:
        query = query.filter(Event.date <= filters.date_to)
    return query.order_by(Event.date.asc()).all()


# -------------------------
# Creator back-reference (best-effort)
# -------------------------
def link_created_event(db: Session, user_id: str, event_id: str):
    """Record ``event_id`` in the creator's created_events.

    Not transactional with the event write: a failure is logged and the
    event stays created. Each link is its own row, so two events created
    concurrently by the same user both stay linked.
    """
    try:
        if db.query(User.id).filter(User.id == user_id).first() is None:
            return
        linked = (
            db.query(CreatedEventLink)
            .filter(CreatedEventLink.user_id == user_id, CreatedEventLink.event_id == event_id)
            .first()
        )
        if linked is None:
            db.add(CreatedEventLink(user_id=user_id, event_id=event_id))
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(f"⚠️ Could not link event {event_id} to user {user_id}: {exc.__class__.__name__}")


def unlink_created_event(db: Session, user_id: str, event_id: str):
    try:
        removed = (
            db.query(CreatedEventLink)
            .filter(CreatedEventLink.user_id == user_id, CreatedEventLink.event_id == event_id)
            .delete(synchronize_session=False)
        )
        if removed:
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(f"⚠️ Could not unlink event {event_id} from user {user_id}: {exc.__class__.__name__}")


# -------------------------
# Writes
# -------------------------
def create_event(db: Session, creator_id: str, data: EventInput) -> Event:
    event = Event(
        title=data.title,
        description=data.description,
        date=data.date,
        price=data.price,
        created_by_id=creator_id,
    )
    with write_guard(db, "event"):
        db.add(event)

    event_id = event.id
    link_created_event(db, creator_id, event_id)
    logger.info(f"🎟️ Event {event_id} created by {creator_id}")
    return get_event(db, event_id)


def update_event_if_owner(db: Session, event_id: str, user_id: str, data: EventInput) -> Event:
    event = db.query(Event).filter(Event.id == str(event_id)).first()
    check = authorize_owner_action(event, user_id)
    if check is OwnerCheck.NOT_FOUND:
        raise NotFoundError(messages.EVENT_NOT_FOUND)
    if check is OwnerCheck.FORBIDDEN:
        raise ForbiddenError()

    with write_guard(db, "event"):
        event.title = data.title
        event.description = data.description
        event.date = data.date
        event.price = data.price

    logger.info(f"🎟️ Event {event_id} updated by {user_id}")
    return get_event(db, event_id)


def delete_event_if_owner(db: Session, event_id: str, user_id: str) -> bool:
    """True if deleted, False if there was nothing to delete."""
    event = db.query(Event).filter(Event.id == str(event_id)).first()
    check = authorize_owner_action(event, user_id)
    if check is OwnerCheck.NOT_FOUND:
        return False
    if check is OwnerCheck.FORBIDDEN:
        raise ForbiddenError()

    event_id = event.id
    with write_guard(db, "event"):
        # bookings of the event go with it
        db.query(Booking).filter(Booking.event_id == event_id).delete(synchronize_session=False)
        deleted = (
            db.query(Event)
            .filter(Event.id == event_id, Event.created_by_id == str(user_id))
            .delete(synchronize_session=False)
        )
    if not deleted:
        return False

    unlink_created_event(db, user_id, event_id)
    logger.info(f"🧹 Event {event_id} deleted by {user_id}")
    return True
