# eventhub/api/endpoints/attendees.py
from enum import Enum
from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.api import deps
from eventhub.core.exceptions import NotFoundError
from eventhub.crud import crud_attendee
from eventhub.db.session import get_db
from eventhub.models.user import User
from eventhub.schemas.attendee import (
    Attendee as AttendeeSchema,
    AttendeeCreate,
    AttendeeStatus,
    AttendeeUpdate,
    BulkDeleteRequest,
    BulkDeleteResult,
    TicketType,
)
from eventhub.schemas.common import Msg

# Every roster route is admin only
router = APIRouter(
    prefix="/attendees",
    tags=["Attendees"],
    dependencies=[Depends(deps.get_roster_admin)],
)


def _get_attendee_or_404(db: Session, attendee_id: str):
    attendee = crud_attendee.attendee.get(db, id=attendee_id)
    if not attendee:
        raise NotFoundError("Attendee not found")
    return attendee


def _filter_value(value):
    return value.value if isinstance(value, Enum) else value


@router.get("", response_model=List[AttendeeSchema])
def list_attendees(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="Matches name, email or company"),
    status_filter: Optional[Union[AttendeeStatus, Literal["all"]]] = Query(
        None, alias="status"
    ),
    ticket_type: Optional[Union[TicketType, Literal["all"]]] = Query(
        None, alias="ticketType"
    ),
    event_id: Optional[str] = Query(None, alias="eventId"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """
    Roster listing with optional filters. A filter value of "all" means no
    filter on that field.
    """
    return crud_attendee.attendee.get_multi_filtered(
        db,
        search=search,
        status=_filter_value(status_filter),
        ticket_type=_filter_value(ticket_type),
        event_id=event_id,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=AttendeeSchema, status_code=status.HTTP_201_CREATED)
def create_attendee(attendee_in: AttendeeCreate, db: Session = Depends(get_db)):
    return crud_attendee.attendee.create(db, obj_in=attendee_in)


@router.post("/bulk-delete", response_model=BulkDeleteResult)
def bulk_delete_attendees(body: BulkDeleteRequest, db: Session = Depends(get_db)):
    """Unknown ids are skipped; `deleted` is how many rows were removed."""
    deleted = crud_attendee.attendee.remove_many(db, ids=body.ids)
    return {"msg": f"{deleted} attendees removed", "deleted": deleted}


@router.put("/{attendeeId}", response_model=AttendeeSchema)
def update_attendee(
    attendeeId: str, attendee_in: AttendeeUpdate, db: Session = Depends(get_db)
):
    attendee = _get_attendee_or_404(db, attendeeId)
    return crud_attendee.attendee.update(db, db_obj=attendee, obj_in=attendee_in)


@router.delete("/{attendeeId}", response_model=Msg)
def delete_attendee(attendeeId: str, db: Session = Depends(get_db)):
    _get_attendee_or_404(db, attendeeId)
    crud_attendee.attendee.remove(db, id=attendeeId)
    return {"msg": "Attendee removed"}


@router.patch("/{attendeeId}/checkin", response_model=AttendeeSchema)
def check_in_attendee(attendeeId: str, db: Session = Depends(get_db)):
    attendee = _get_attendee_or_404(db, attendeeId)
    return crud_attendee.attendee.check_in(db, db_obj=attendee)
