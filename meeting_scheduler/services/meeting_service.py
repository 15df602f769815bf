import logging
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic_core import PydanticCustomError
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from meeting_scheduler.core import config, messages
from meeting_scheduler.core.db import write_guard
from meeting_scheduler.core.errors import ForbiddenError, NotFoundError, ValidationError
from meeting_scheduler.core.timeutils import utcnow
from meeting_scheduler.models.meeting import Meeting, meeting_attendees
from meeting_scheduler.models.user import User
from meeting_scheduler.schemas.meeting import (
    ConflictCheckInput,
    CreateMeetingInput,
    UpdateMeetingInput,
    check_meeting_window,
)
from meeting_scheduler.services.ownership import OwnerCheck, authorize_owner_action

logger = logging.getLogger(__name__)


def _populated(db: Session):
    return db.query(Meeting).options(selectinload(Meeting.attendees), joinedload(Meeting.owner))


def _involving(query, user_ids: List[str]):
    """Meetings created by or attended by any of ``user_ids``."""
    attended = select(meeting_attendees.c.meeting_id).where(meeting_attendees.c.user_id.in_(user_ids))
    return query.filter(or_(Meeting.created_by_id.in_(user_ids), Meeting.id.in_(attended)))


def make_join_link(room_id: str) -> str:
    return f"{config.MY_DOMAIN}/meeting?room={room_id}"


def load_attendees(db: Session, attendee_ids: List[str]) -> List[User]:
    """Resolve attendee ids to users, rejecting ids that do not exist."""
    if not attendee_ids:
        return []
    users = {user.id: user for user in db.query(User).filter(User.id.in_(attendee_ids)).all()}
    missing = [
        {"field": f"attendeeIds.{index}", "message": messages.ATTENDEE_NOT_FOUND}
        for index, attendee_id in enumerate(attendee_ids)
        if attendee_id not in users
    ]
    if missing:
        raise ValidationError(details=missing)
    return [users[attendee_id] for attendee_id in attendee_ids]


# -------------------------
# Reads
# -------------------------
def get_meeting(db: Session, meeting_id: str) -> Optional[Meeting]:
    return _populated(db).filter(Meeting.id == str(meeting_id)).first()


def list_all_meetings(db: Session) -> List[Meeting]:
    return _populated(db).order_by(Meeting.start_time.asc()).all()


def list_meetings_for_user(db: Session, user_id: str) -> List[Meeting]:
    return _involving(_populated(db), [user_id]).order_by(Meeting.start_time.asc()).all()


def list_meetings_in_range(db: Session, user_id: str, start: datetime, end: datetime) -> List[Meeting]:
    return (
        _involving(_populated(db), [user_id])
        .filter(Meeting.start_time >= start, Meeting.start_time <= end)
        .order_by(Meeting.start_time.asc())
        .all()
    )


def list_upcoming_meetings(db: Session, user_id: str, limit: int = 10) -> List[Meeting]:
    return (
        _involving(_populated(db), [user_id])
        .filter(Meeting.start_time >= utcnow())
        .order_by(Meeting.start_time.asc())
        .limit(max(1, min(limit, 100)))
        .all()
    )


def count_meetings(db: Session) -> int:
    return db.query(Meeting).count()


# -------------------------
# Writes
# -------------------------
def create_meeting(db: Session, creator_id: str, data: CreateMeetingInput) -> Meeting:
    attendees = load_attendees(db, data.attendee_ids)
    room_id = uuid.uuid4().hex[:12]

    meeting = Meeting(
        title=data.title,
        description=data.description,
        start_time=data.start_time,
        end_time=data.end_time,
        room_id=room_id,
        meeting_url=make_join_link(room_id),
        created_by_id=creator_id,
        attendees=attendees,
    )
    with write_guard(db, "meeting"):
        db.add(meeting)

    logger.info(f"📅 Meeting {meeting.id} created by {creator_id} with {len(attendees)} attendees")
    return get_meeting(db, meeting.id)


def update_meeting_if_owner(db: Session, meeting_id: str, user_id: str, data: UpdateMeetingInput) -> Meeting:
    meeting = db.query(Meeting).filter(Meeting.id == str(meeting_id)).first()
    check = authorize_owner_action(meeting, user_id)
    if check is OwnerCheck.NOT_FOUND:
        raise NotFoundError(messages.MEETING_NOT_FOUND)
    if check is OwnerCheck.FORBIDDEN:
        raise ForbiddenError()

    changes = data.changes()
    start = changes.get("start_time", meeting.start_time)
    end = changes.get("end_time", meeting.end_time)
    if "start_time" in changes or "end_time" in changes:
        try:
            check_meeting_window(start, end)
        except PydanticCustomError as exc:
            raise ValidationError.for_field("endTime", exc.message()) from exc

    attendee_ids = changes.pop("attendee_ids", None)
    attendees = load_attendees(db, attendee_ids) if attendee_ids is not None else None

    with write_guard(db, "meeting"):
        for key, value in changes.items():
            setattr(meeting, key, value)
        if attendees is not None:
            meeting.attendees = attendees

    logger.info(f"📅 Meeting {meeting_id} updated by {user_id}")
    return get_meeting(db, meeting_id)


def delete_meeting_if_owner(db: Session, meeting_id: str, user_id: str) -> bool:
    """True if deleted, False if there was nothing to delete."""
    meeting = db.query(Meeting).filter(Meeting.id == str(meeting_id)).first()
    check = authorize_owner_action(meeting, user_id)
    if check is OwnerCheck.NOT_FOUND:
        return False
    if check is OwnerCheck.FORBIDDEN:
        raise ForbiddenError()

    with write_guard(db, "meeting"):
        db.execute(meeting_attendees.delete().where(meeting_attendees.c.meeting_id == meeting.id))
        deleted = (
            db.query(Meeting)
            .filter(Meeting.id == meeting.id, Meeting.created_by_id == str(user_id))
            .delete(synchronize_session=False)
        )

    if deleted:
        logger.info(f"🧹 Meeting {meeting_id} deleted by {user_id}")
    return bool(deleted)


# -------------------------
# Conflicts
# -------------------------
def check_meeting_conflicts(db: Session, caller_id: str, data: ConflictCheckInput) -> dict:
    participants = list(dict.fromkeys([caller_id, *data.attendee_ids]))
    query = _involving(_populated(db), participants).filter(
        Meeting.start_time < data.end_time, Meeting.end_time > data.start_time
    )
    if data.exclude_meeting_id:
        query = query.filter(Meeting.id != data.exclude_meeting_id)

    conflicts = []
    for meeting in query.order_by(Meeting.start_time.asc()).all():
        involved = {meeting.created_by_id, *(attendee.id for attendee in meeting.attendees)}
        conflicts.append(
            {
                "meeting": meeting,
                "conflict_type": "TIME_OVERLAP",
                "severity": "HIGH" if caller_id in involved else "MEDIUM",
                "message": f"Overlaps with '{meeting.title}'",
            }
        )

    warnings = []
    known = {row.id for row in db.query(User.id).filter(User.id.in_(data.attendee_ids)).all()}
    warnings.extend(
        f"Attendee {attendee_id} not found" for attendee_id in data.attendee_ids if attendee_id not in known
    )
    try:
        check_meeting_window(data.start_time, data.end_time)
    except PydanticCustomError as exc:
        warnings.append(exc.message())

    return {"has_conflicts": bool(conflicts), "conflicts": conflicts, "warnings": warnings}
