# eventhub/crud/crud_dashboard.py
"""
Read-only rollups for the admin dashboard and the per-user profile page.
Every method tolerates empty tables and never writes.
"""
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventhub.constants.statuses import AttendeeStatus
from eventhub.models.attendee import Attendee
from eventhub.models.event import Event
from eventhub.models.event_registration import EventRegistration
from eventhub.utils.dates import utcnow


class CRUDDashboard:
    def get_total_events(self, db: Session) -> int:
        return db.query(func.count(Event.id)).scalar() or 0

    def get_total_attendees(self, db: Session) -> int:
        """Counts roster entries (manually entered or ticketed attendees)."""
        return db.query(func.count(Attendee.id)).scalar() or 0

    def get_total_revenue(self, db: Session) -> float:
        """
        Sum of the event price over every attendee whose status is confirmed
        or checked-in.
        """
        total = (
            db.query(func.sum(Event.price))
            .select_from(Attendee)
            .join(Event, Event.id == Attendee.event_id)
            .filter(Attendee.status.in_(AttendeeStatus.PAYING))
            .scalar()
        )
        return float(total or 0)

    def get_recent_events(self, db: Session, *, limit: int = 5) -> List[Event]:
        return (
            db.query(Event)
            .order_by(Event.created_at.desc(), Event.id)
            .limit(limit)
            .all()
        )

    def get_admin_stats(self, db: Session) -> Dict[str, Any]:
        return {
            "total_events": self.get_total_events(db),
            "total_attendees": self.get_total_attendees(db),
            "total_revenue": self.get_total_revenue(db),
            "recent_events": self.get_recent_events(db),
        }

    def get_user_stats(
        self, db: Session, *, user_id: str, now: datetime | None = None
    ) -> Dict[str, Any]:
        now = now or utcnow()
        registered_count = (
            db.query(func.count(EventRegistration.event_id))
            .filter(EventRegistration.user_id == user_id)
            .scalar()
            or 0
        )
        upcoming = (
            db.query(func.count(Event.id), func.min(Event.date))
            .join(EventRegistration, EventRegistration.event_id == Event.id)
            .filter(EventRegistration.user_id == user_id, Event.date > now)
            .one()
        )
        upcoming_count, next_event_date = upcoming
        return {
            "registered_count": registered_count,
            "upcoming_count": upcoming_count or 0,
            "next_event_date": next_event_date,
        }


dashboard = CRUDDashboard()
