# eventhub/api/endpoints/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.api import deps
from eventhub.crud import crud_dashboard
from eventhub.db.session import get_db
from eventhub.models.user import User
from eventhub.schemas.dashboard import AdminDashboardStats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=AdminDashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_roster_admin),
):
    """
    Platform-wide totals: event count, roster size, revenue from confirmed
    and checked-in attendees, and the five most recently created events.
    """
    return AdminDashboardStats.model_validate(
        crud_dashboard.dashboard.get_admin_stats(db), from_attributes=True
    )
