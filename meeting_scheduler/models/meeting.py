from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Table, Text
from sqlalchemy.orm import relationship

from meeting_scheduler.core.timeutils import new_id, utcnow
from meeting_scheduler.models.user import Base


meeting_attendees = Table(
    "meeting_attendees",
    Base.metadata,
    Column("meeting_id", String(36), ForeignKey("meetings.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Meeting(Base):
    __tablename__ = "meetings"
    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    room_id = Column(String(255), nullable=False, unique=True, index=True)
    meeting_url = Column(String(255), nullable=True)
    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="meetings")
    attendees = relationship("User", secondary=meeting_attendees, back_populates="attending")

    # date range queries
    __table_args__ = (Index("ix_meetings_time_range", "start_time", "end_time"),)
