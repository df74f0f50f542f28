# eventhub/crud/crud_attendee.py
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from eventhub.constants.statuses import AttendeeStatus
from eventhub.core.exceptions import DuplicateAttendeeError, NotFoundError
from eventhub.crud.base import CRUDBase
from eventhub.models.attendee import Attendee
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.attendee import AttendeeCreate, AttendeeUpdate

logger = logging.getLogger(__name__)


class CRUDAttendee(CRUDBase[Attendee, AttendeeCreate, AttendeeUpdate]):
    def get_multi_filtered(
        self,
        db: Session,
        *,
        search: str | None = None,
        status: str | None = None,
        ticket_type: str | None = None,
        event_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Attendee]:
        """
        Roster listing, newest registrations first. A filter value of "all"
        is the same as no filter.
        """
        query = db.query(self.model).options(joinedload(self.model.event))

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    self.model.name.ilike(pattern),
                    self.model.email.ilike(pattern),
                    self.model.company.ilike(pattern),
                )
            )
        if status and status != "all":
            query = query.filter(self.model.status == status)
        if ticket_type and ticket_type != "all":
            query = query.filter(self.model.ticket_type == ticket_type)
        if event_id and event_id != "all":
            query = query.filter(self.model.event_id == event_id)

        return (
            query.order_by(self.model.registration_date.desc(), self.model.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_event_and_email(
        self, db: Session, *, event_id: str, email: str
    ) -> Optional[Attendee]:
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id, self.model.email == email)
            .first()
        )

    def _check_references(self, db: Session, *, event_id: str, user_id: str | None):
        if not db.get(Event, event_id):
            raise NotFoundError("Event not found")
        if user_id and not db.get(User, user_id):
            raise NotFoundError("User not found")

    def create(self, db: Session, *, obj_in: AttendeeCreate) -> Attendee:
        self._check_references(db, event_id=obj_in.event_id, user_id=obj_in.user_id)
        if self.get_by_event_and_email(db, event_id=obj_in.event_id, email=obj_in.email):
            raise DuplicateAttendeeError(obj_in.email)

        db_obj = self.model(**obj_in.model_dump())
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            # A concurrent insert took the (event, email) pair first
            db.rollback()
            raise DuplicateAttendeeError(obj_in.email)
        db.refresh(db_obj)
        logger.info(f"Attendee {db_obj.id} added to event {db_obj.event_id}")
        return db_obj

    def update(self, db: Session, *, db_obj: Attendee, obj_in: AttendeeUpdate) -> Attendee:
        update_data = obj_in.model_dump(exclude_unset=True)

        event_id = update_data.get("event_id", db_obj.event_id)
        email = update_data.get("email", db_obj.email)
        if "event_id" in update_data or "user_id" in update_data:
            self._check_references(
                db, event_id=event_id, user_id=update_data.get("user_id")
            )
        if (event_id, email) != (db_obj.event_id, db_obj.email):
            if self.get_by_event_and_email(db, event_id=event_id, email=email):
                raise DuplicateAttendeeError(email)

        try:
            return super().update(db, db_obj=db_obj, obj_in=update_data)
        except IntegrityError:
            db.rollback()
            raise DuplicateAttendeeError(email)

    def check_in(self, db: Session, *, db_obj: Attendee) -> Attendee:
        return super().update(
            db, db_obj=db_obj, obj_in={"status": AttendeeStatus.CHECKED_IN}
        )

    def remove_many(self, db: Session, *, ids: List[str]) -> int:
        """Deletes the attendees that exist among `ids`; returns how many."""
        deleted = (
            db.query(self.model)
            .filter(self.model.id.in_(ids))
            .delete(synchronize_session=False)
        )
        db.commit()
        logger.info(f"Bulk removed {deleted} attendees")
        return deleted


attendee = CRUDAttendee(Attendee)
