import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from meeting_scheduler.core import messages
from meeting_scheduler.core.db import write_guard
from meeting_scheduler.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from meeting_scheduler.models.booking import Booking
from meeting_scheduler.models.event import Event
from meeting_scheduler.services import event_service
from meeting_scheduler.services.ownership import OwnerCheck, authorize_owner_action

logger = logging.getLogger(__name__)


def _populated(db: Session):
    return db.query(Booking).options(
        joinedload(Booking.event).joinedload(Event.creator),
        joinedload(Booking.user),
    )


def get_booking(db: Session, booking_id: str) -> Optional[Booking]:
    return _populated(db).filter(Booking.id == str(booking_id)).first()


def list_all_bookings(db: Session) -> List[Booking]:
    return _populated(db).order_by(Booking.created_at.desc()).all()


def create_booking(db: Session, event_id: str, user_id: str) -> Booking:
    # Ensure event exists
    event = db.query(Event).filter(Event.id == str(event_id)).first()
    if event is None:
        raise ValidationError(
            messages.EVENT_NOT_FOUND,
            details=[{"field": "eventId", "message": messages.EVENT_NOT_FOUND}],
        )

    already_booked = (
        db.query(Booking.id).filter(Booking.event_id == event.id, Booking.user_id == str(user_id)).first()
    )
    if already_booked is not None:
        raise ConflictError(messages.EVENT_ALREADY_BOOKED)

    booking = Booking(event_id=event.id, user_id=str(user_id))
    with write_guard(db, "booking"):
        db.add(booking)

    logger.info(f"🎫 User {user_id} booked event {event.id}")
    return get_booking(db, booking.id)


def cancel_booking(db: Session, booking_id: str, user_id: str) -> Event:
    """Delete the caller's booking and return the event it freed."""
    booking = db.query(Booking).filter(Booking.id == str(booking_id)).first()
    check = authorize_owner_action(booking, user_id, owner_attr="user_id")
    if check is OwnerCheck.NOT_FOUND:
        raise NotFoundError(messages.BOOKING_NOT_FOUND)
    if check is OwnerCheck.FORBIDDEN:
        raise ForbiddenError()

    event_id = booking.event_id
    with write_guard(db, "booking"):
        deleted = (
            db.query(Booking)
            .filter(Booking.id == booking.id, Booking.user_id == str(user_id))
            .delete(synchronize_session=False)
        )
    if not deleted:
        raise NotFoundError(messages.BOOKING_NOT_FOUND)

    logger.info(f"🎫 User {user_id} cancelled booking {booking_id}")
    return event_service.get_event(db, event_id)
