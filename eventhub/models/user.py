# eventhub/models/user.py
import uuid
from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship
from eventhub.db.base_class import Base
from eventhub.utils.dates import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(
        String, primary_key=True, default=lambda: f"usr_{uuid.uuid4().hex[:12]}"
    )
    email = Column(String, nullable=False, unique=True, index=True)
    hashed_password = Column(String, nullable=False)
    role = Column(
        Enum("user", "admin", name="user_role_enum"),
        nullable=False,
        default="user",
    )

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    bio = Column(String, nullable=True)

    # sha256 of the emailed reset token, never the token itself
    reset_password_token = Column(String, nullable=True, index=True)
    reset_password_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    registrations = relationship(
        "EventRegistration",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="EventRegistration.registered_at.desc()",
    )
    owned_events = relationship(
        "Event", back_populates="owner", order_by="Event.created_at.desc()"
    )

    @property
    def registered_events(self) -> list[str]:
        return [registration.event_id for registration in self.registrations]

    @property
    def organized_events(self) -> list[str]:
        return [event.id for event in self.owned_events]
