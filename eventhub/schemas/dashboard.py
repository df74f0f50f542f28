from datetime import datetime
from typing import List, Optional

from eventhub.schemas.common import CamelModel
from eventhub.schemas.event import Event


class AdminDashboardStats(CamelModel):
    total_events: int = 0
    total_attendees: int = 0
    total_revenue: float = 0
    recent_events: List[Event] = []


class UserDashboardStats(CamelModel):
    registered_count: int = 0
    upcoming_count: int = 0
    next_event_date: Optional[datetime] = None
