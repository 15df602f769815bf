import enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import declarative_base, relationship

from meeting_scheduler.core.timeutils import new_id, utcnow

Base = declarative_base()


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = 'users'
    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    image_url = Column(Text, nullable=True)
    address = Column(String(255), nullable=False, default="")
    dob = Column(Date, nullable=True)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    meetings = relationship('Meeting', back_populates='owner', cascade="all, delete-orphan")
    events = relationship('Event', back_populates='creator', cascade="all, delete-orphan")
    bookings = relationship('Booking', back_populates='user', cascade="all, delete-orphan")
    attending = relationship('Meeting', secondary='meeting_attendees', back_populates='attendees')
    created_event_links = relationship(
        'CreatedEventLink', order_by='CreatedEventLink.linked_at', cascade="all, delete-orphan"
    )

    @property
    def created_events(self):
        """Ids of the events this user created, oldest first."""
        return [link.event_id for link in self.created_event_links]


class CreatedEventLink(Base):
    """One row per (creator, event): the back-reference maintained by the event service.

    Rows are only ever inserted or deleted, so concurrent event creation by the
    same user cannot overwrite each other's links.
    """
    __tablename__ = 'user_created_events'
    user_id = Column(String(36), ForeignKey('users.id', ondelete="CASCADE"), primary_key=True)
    # no foreign key: a link may outlive its event until the unlink runs
    event_id = Column(String(36), primary_key=True)
    linked_at = Column(DateTime, default=utcnow, nullable=False)
