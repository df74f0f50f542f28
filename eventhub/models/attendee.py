import uuid
from sqlalchemy import Column, String, ForeignKey, Enum, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from eventhub.db.base_class import Base
from eventhub.utils.dates import utcnow


class Attendee(Base):
    __tablename__ = "attendees"
    # No duplicate roster entry per event by email
    __table_args__ = (
        UniqueConstraint("event_id", "email", name="uq_attendee_event_email"),
    )

    id = Column(
        String, primary_key=True, default=lambda: f"att_{uuid.uuid4().hex[:12]}"
    )
    event_id = Column(
        String,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Set when the attendee also has an account
    user_id = Column(
        String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    company = Column(String, nullable=True)
    job_title = Column(String, nullable=True)

    ticket_type = Column(
        Enum("VIP", "Regular", "Student", "Staff", name="ticket_type_enum"),
        nullable=False,
    )
    status = Column(
        Enum(
            "confirmed",
            "pending",
            "cancelled",
            "checked-in",
            name="attendee_status_enum",
        ),
        nullable=False,
        default="pending",
    )
    registration_date = Column(DateTime, nullable=False, default=utcnow, index=True)

    dietary = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    event = relationship("Event", back_populates="attendee_records")

    @property
    def event_title(self) -> str | None:
        return self.event.title if self.event else None
