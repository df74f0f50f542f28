# eventhub/api/endpoints/profile.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.api import deps
from eventhub.crud import crud_dashboard, crud_user
from eventhub.db.session import get_db
from eventhub.models.user import User
from eventhub.schemas.dashboard import UserDashboardStats
from eventhub.schemas.event import Event as EventSchema
from eventhub.schemas.user import ProfileUpdate, UserProfile

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/me", response_model=UserProfile)
def read_my_profile(current_user: User = Depends(deps.get_current_user)):
    """The caller's profile; never includes the password hash or reset token."""
    return current_user


@router.put("/me", response_model=UserProfile)
def update_my_profile(
    profile_in: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return crud_user.user.update_profile(db, db_obj=current_user, obj_in=profile_in)


@router.get("/my-events", response_model=List[EventSchema])
def read_my_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return crud_user.user.get_registered_events(db, user_id=current_user.id)


@router.get("/dashboard-stats", response_model=UserDashboardStats)
def read_my_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """Registration counts for the caller's own dashboard."""
    return crud_dashboard.dashboard.get_user_stats(db, user_id=current_user.id)
