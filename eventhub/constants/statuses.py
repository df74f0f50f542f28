# eventhub/constants/statuses.py
"""
Constants for roles, event lifecycle and attendee status values.

Provides type-safe constants to replace hardcoded strings throughout the codebase.
"""


class UserRole:
    """Account roles."""
    USER = "user"
    ADMIN = "admin"


class EventStatus:
    """Event lifecycle states."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    # Allowed forward moves; completed and cancelled are terminal.
    TRANSITIONS = {
        DRAFT: {PUBLISHED, CANCELLED},
        PUBLISHED: {ONGOING, CANCELLED},
        ONGOING: {COMPLETED, CANCELLED},
        COMPLETED: set(),
        CANCELLED: set(),
    }

    @classmethod
    def can_transition(cls, current: str, new: str) -> bool:
        """Re-applying the current status is always allowed."""
        if current == new:
            return True
        return new in cls.TRANSITIONS.get(current, set())


class AttendeeStatus:
    """Roster entry status values."""
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    CHECKED_IN = "checked-in"

    # Statuses that count towards revenue
    PAYING = (CONFIRMED, CHECKED_IN)


class TicketType:
    VIP = "VIP"
    REGULAR = "Regular"
    STUDENT = "Student"
    STAFF = "Staff"
