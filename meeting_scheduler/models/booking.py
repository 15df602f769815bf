from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from meeting_scheduler.core.timeutils import new_id, utcnow
from meeting_scheduler.models.user import Base


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    event = relationship("Event", back_populates="bookings")
    user = relationship("User", back_populates="bookings")

    # one booking per (user, event)
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_bookings_user_event"),)
