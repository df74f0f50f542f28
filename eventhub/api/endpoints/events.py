# eventhub/api/endpoints/events.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.api import deps
from eventhub.core.exceptions import NotFoundError
from eventhub.crud import crud_event
from eventhub.db.session import get_db
from eventhub.models.user import User
from eventhub.schemas.common import Msg
from eventhub.schemas.event import (
    Event as EventSchema,
    EventCreate,
    EventStatus,
    EventUpdate,
)
from eventhub.schemas.registration import RegistrationConfirmation
from eventhub.services import authorization
from eventhub.services.registration_engine import registration_engine

router = APIRouter(prefix="/events", tags=["Events"])


def _get_event_or_404(db: Session, event_id: str):
    event = crud_event.event.get(db, id=event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


@router.get("", response_model=List[EventSchema])
def list_events(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(deps.get_current_user_optional),
    search: Optional[str] = Query(None, description="Matches title, description or location"),
    category: Optional[str] = Query(None, description='Category name, or "all"'),
    sort_by: str = Query(
        "date", alias="sortBy", description="date, price or popularity; anything else sorts by date"
    ),
    status_filter: Optional[EventStatus] = Query(
        None, alias="status", description="Admins only; ignored for everyone else"
    ),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """
    List events. Anonymous callers and regular users only ever see published
    events; admins see every status.
    """
    query = authorization.visible_events_query(
        db, current_user, status=status_filter.value if status_filter else None
    )
    return crud_event.event.get_multi_filtered(
        db,
        query=query,
        search=search,
        category=category,
        sort_by=sort_by,
        skip=skip,
        limit=limit,
    )


@router.get("/{eventId}", response_model=EventSchema)
def get_event_by_id(
    eventId: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(deps.get_current_user_optional),
):
    event = _get_event_or_404(db, eventId)
    authorization.enforce(authorization.can_view_event(current_user, event))
    return event


@router.post("", response_model=EventSchema, status_code=status.HTTP_201_CREATED)
def create_event(
    event_in: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_admin),
):
    """Creates an event owned by the calling admin."""
    return crud_event.event.create_with_owner(db, obj_in=event_in, owner_id=current_user.id)


@router.put("/{eventId}", response_model=EventSchema)
def update_event(
    eventId: str,
    event_in: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_admin),
):
    """Partially update an event. Only its owner may do so."""
    event = _get_event_or_404(db, eventId)
    authorization.enforce(authorization.can_modify_event(current_user, event))
    return crud_event.event.update(db, db_obj=event, obj_in=event_in)


@router.delete("/{eventId}", response_model=Msg)
def delete_event(
    eventId: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    Delete an event, its registrations and its attendee roster. Only its
    owner may do so.
    """
    event = _get_event_or_404(db, eventId)
    authorization.enforce(authorization.can_modify_event(current_user, event))
    crud_event.event.remove_with_cascade(db, db_obj=event)
    return {"msg": "Event removed"}


@router.post(
    "/{eventId}/duplicate",
    response_model=EventSchema,
    status_code=status.HTTP_201_CREATED,
)
def duplicate_event(
    eventId: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_admin),
):
    """Copy an event into a new draft owned by the caller."""
    source = _get_event_or_404(db, eventId)
    return crud_event.event.duplicate(db, source=source, owner_id=current_user.id)


@router.post("/{eventId}/register", response_model=RegistrationConfirmation)
def register_for_event(
    eventId: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    event = registration_engine.register(db, user_id=current_user.id, event_id=eventId)
    return RegistrationConfirmation(
        msg="Registered for event successfully",
        event_id=event.id,
        current_attendees=event.current_attendees,
    )


@router.post("/{eventId}/unregister", response_model=RegistrationConfirmation)
def unregister_from_event(
    eventId: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    event = registration_engine.unregister(db, user_id=current_user.id, event_id=eventId)
    return RegistrationConfirmation(
        msg="Unregistered from event successfully",
        event_id=event.id,
        current_attendees=event.current_attendees,
    )
