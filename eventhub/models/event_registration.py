from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from eventhub.db.base_class import Base
from eventhub.utils.dates import utcnow


class EventRegistration(Base):
    """
    A user's self-registration for an event.

    This single row is both the user's `registeredEvents` entry and the
    event's `attendees` entry; the composite primary key makes a second
    registration for the same pair impossible.
    """

    __tablename__ = "event_registrations"

    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    event_id = Column(
        String,
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    registered_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")
