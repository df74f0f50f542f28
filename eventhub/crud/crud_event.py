# eventhub/crud/crud_event.py
import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from eventhub.constants.statuses import EventStatus
from eventhub.core.exceptions import InvalidStateError, ValidationError
from eventhub.crud.base import CRUDBase
from eventhub.models.attendee import Attendee
from eventhub.models.event import Event
from eventhub.models.event_registration import EventRegistration
from eventhub.schemas.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

# Fields copied verbatim when an event is duplicated
DESCRIPTIVE_FIELDS = (
    "title",
    "description",
    "category",
    "location",
    "date",
    "price",
    "capacity",
)


def _capacity_below_registrations(registered: int) -> ValidationError:
    return ValidationError(
        f"Capacity cannot be lower than the {registered} users already registered",
        field="capacity",
    )


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    # --- Visibility: one query builder per audience ---

    def public_events_query(self, db: Session) -> Query:
        """Events anyone may see: published only."""
        return db.query(self.model).filter(self.model.status == EventStatus.PUBLISHED)

    def admin_events_query(self, db: Session, *, status: str | None = None) -> Query:
        """Every event, optionally narrowed to one lifecycle status."""
        query = db.query(self.model)
        if status:
            query = query.filter(self.model.status == status)
        return query

    def get_multi_filtered(
        self,
        db: Session,
        *,
        query: Query,
        search: str | None = None,
        category: str | None = None,
        sort_by: str | None = "date",
        skip: int = 0,
        limit: int = 100,
    ) -> List[Event]:
        """
        Applies search, category filter, sorting and pagination on top of a
        visibility query.
        """
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    self.model.title.ilike(pattern),
                    self.model.description.ilike(pattern),
                    self.model.location.ilike(pattern),
                )
            )

        if category and category != "all":
            query = query.filter(self.model.category == category)

        if sort_by == "price":
            query = query.order_by(self.model.price.asc(), self.model.date.asc())
        elif sort_by == "popularity":
            query = query.order_by(
                self.model.current_attendees.desc(), self.model.date.asc()
            )
        else:
            query = query.order_by(self.model.date.asc())

        return query.offset(skip).limit(limit).all()

    # --- Mutations ---

    def create_with_owner(
        self, db: Session, *, obj_in: EventCreate, owner_id: str
    ) -> Event:
        db_obj = self.model(
            **obj_in.model_dump(),
            user_id=owner_id,
            current_attendees=0,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"Event {db_obj.id} created by {owner_id}")
        return db_obj

    def update(self, db: Session, *, db_obj: Event, obj_in: EventUpdate) -> Event:
        """
        Partial update. Enforces the lifecycle transition table and refuses to
        shrink capacity below the current attendee count.
        """
        update_data = obj_in.model_dump(exclude_unset=True)

        new_status = update_data.get("status")
        if new_status and not EventStatus.can_transition(db_obj.status, new_status):
            raise InvalidStateError(
                f"Cannot move event from '{db_obj.status}' to '{new_status}'",
                details={"from": db_obj.status, "to": new_status},
            )

        new_capacity = update_data.get("capacity")
        if new_capacity is not None and new_capacity < db_obj.current_attendees:
            raise _capacity_below_registrations(db_obj.current_attendees)

        try:
            return super().update(db, db_obj=db_obj, obj_in=update_data)
        except IntegrityError:
            # A registration committed after the check above
            db.rollback()
            registered = self.count_registrations(db, event_id=db_obj.id)
            logger.warning(
                f"Capacity update of event {db_obj.id} lost a race with registrations"
            )
            raise _capacity_below_registrations(registered)

    def remove_with_cascade(self, db: Session, *, db_obj: Event) -> None:
        """
        Deletes an event together with its registrations (which removes it
        from every user's registered events) and its roster entries, in one
        transaction.
        """
        event_id = db_obj.id
        try:
            registrations = (
                db.query(EventRegistration)
                .filter(EventRegistration.event_id == event_id)
                .delete(synchronize_session=False)
            )
            roster = (
                db.query(Attendee)
                .filter(Attendee.event_id == event_id)
                .delete(synchronize_session=False)
            )
            db.query(self.model).filter(self.model.id == event_id).delete(
                synchronize_session=False
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(
            f"Event {event_id} deleted with {registrations} registrations "
            f"and {roster} attendee records"
        )

    def duplicate(self, db: Session, *, source: Event, owner_id: str) -> Event:
        """
        Copies the descriptive fields of `source` into a fresh draft owned by
        `owner_id`, with no attendees.
        """
        data = {field: getattr(source, field) for field in DESCRIPTIVE_FIELDS}
        db_obj = self.model(
            **data,
            user_id=owner_id,
            status=EventStatus.DRAFT,
            current_attendees=0,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"Event {source.id} duplicated as {db_obj.id} by {owner_id}")
        return db_obj

    def count_registrations(self, db: Session, *, event_id: str) -> int:
        return (
            db.query(EventRegistration)
            .filter(EventRegistration.event_id == event_id)
            .count()
        )


event = CRUDEvent(Event)
