# eventhub/api/api.py

from fastapi import APIRouter
from eventhub.api.endpoints import (
    attendees,
    auth,
    dashboard,
    events,
    profile,
)

# Main router; mounted under /api in main.py.
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(events.router)
api_router.include_router(profile.router)
api_router.include_router(attendees.router)
api_router.include_router(dashboard.router)
