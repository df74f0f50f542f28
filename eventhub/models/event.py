# eventhub/models/event.py
import uuid
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from eventhub.db.base_class import Base
from eventhub.utils.dates import utcnow


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("capacity >= 0", name="check_event_capacity_positive"),
        CheckConstraint("price >= 0", name="check_event_price_positive"),
        CheckConstraint(
            "current_attendees >= 0", name="check_event_attendees_positive"
        ),
        CheckConstraint(
            "current_attendees <= capacity", name="check_event_attendees_lte_capacity"
        ),
    )

    id = Column(
        String, primary_key=True, default=lambda: f"evt_{uuid.uuid4().hex[:12]}"
    )
    # The admin who created the event
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    price = Column(Float, nullable=False, default=0)
    capacity = Column(Integer, nullable=False)

    status = Column(
        Enum(
            "draft",
            "published",
            "ongoing",
            "completed",
            "cancelled",
            name="event_status_enum",
        ),
        nullable=False,
        default="draft",
        index=True,
    )
    # Denormalized size of `registrations`; only written together with it.
    current_attendees = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="owned_events")
    registrations = relationship(
        "EventRegistration",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    attendee_records = relationship(
        "Attendee",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def attendees(self) -> list[str]:
        return [registration.user_id for registration in self.registrations]

    @property
    def organizer(self):
        return self.owner
