# eventhub/services/registration_engine.py
"""
Self-registration of users for events.

A registration is a single `EventRegistration` row, which is at the same time
the event's attendee entry and the user's registered-event entry. The only
other state that changes is the denormalized `Event.current_attendees`
counter, and it is written in the same transaction as the row, through a
conditional UPDATE that re-checks status and capacity inside the database.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import FlushError

from eventhub.constants.statuses import EventStatus
from eventhub.core.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    InvalidStateError,
    NotFoundError,
    NotRegisteredError,
)
from eventhub.models.event import Event
from eventhub.models.event_registration import EventRegistration
from eventhub.models.user import User

logger = logging.getLogger(__name__)


class RegistrationEngine:
    def is_registered(self, db: Session, *, user_id: str, event_id: str) -> bool:
        return (
            db.query(EventRegistration.user_id)
            .filter(
                EventRegistration.user_id == user_id,
                EventRegistration.event_id == event_id,
            )
            .first()
            is not None
        )

    def _load(self, db: Session, *, user_id: str, event_id: str) -> Event:
        event = db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event not found")
        if not db.get(User, user_id):
            raise NotFoundError("User not found")
        return event

    def _claim_seat(self, db: Session, *, event_id: str) -> bool:
        """Increments the counter only while the event is published and not full."""
        claimed = (
            db.query(Event)
            .filter(
                Event.id == event_id,
                Event.status == EventStatus.PUBLISHED,
                Event.current_attendees < Event.capacity,
            )
            .update(
                {Event.current_attendees: Event.current_attendees + 1},
                synchronize_session=False,
            )
        )
        return claimed == 1

    def _release_seat(self, db: Session, *, event_id: str) -> None:
        """Decrements the counter, never below zero."""
        db.query(Event).filter(
            Event.id == event_id, Event.current_attendees > 0
        ).update(
            {Event.current_attendees: Event.current_attendees - 1},
            synchronize_session=False,
        )

    def register(self, db: Session, *, user_id: str, event_id: str) -> Event:
        """
        Registers `user_id` for `event_id` and returns the refreshed event.

        Raises NotFoundError, InvalidStateError (event not published),
        CapacityExceededError or AlreadyRegisteredError. Nothing is written
        unless the relation row and the counter both change.
        """
        event = self._load(db, user_id=user_id, event_id=event_id)

        if event.status != EventStatus.PUBLISHED:
            raise InvalidStateError(
                "Event is not open for registration",
                details={"eventId": event_id, "status": event.status},
            )
        if event.current_attendees >= event.capacity:
            raise CapacityExceededError(event_id)
        if self.is_registered(db, user_id=user_id, event_id=event_id):
            raise AlreadyRegisteredError(event_id)

        try:
            db.add(EventRegistration(user_id=user_id, event_id=event_id))
            try:
                db.flush()
            except (IntegrityError, FlushError):
                # Lost a race against a concurrent registration of the same pair
                db.rollback()
                raise AlreadyRegisteredError(event_id)

            if not self._claim_seat(db, event_id=event_id):
                db.rollback()
                db.refresh(event)
                if event.status != EventStatus.PUBLISHED:
                    raise InvalidStateError(
                        "Event is not open for registration",
                        details={"eventId": event_id, "status": event.status},
                    )
                raise CapacityExceededError(event_id)

            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(event)
        logger.info(
            f"User {user_id} registered for event {event_id} "
            f"({event.current_attendees}/{event.capacity})"
        )
        return event

    def unregister(self, db: Session, *, user_id: str, event_id: str) -> Event:
        """
        Removes the registration of `user_id` for `event_id` and returns the
        refreshed event. Raises NotFoundError or NotRegisteredError.
        """
        event = self._load(db, user_id=user_id, event_id=event_id)

        try:
            removed = (
                db.query(EventRegistration)
                .filter(
                    EventRegistration.user_id == user_id,
                    EventRegistration.event_id == event_id,
                )
                .delete(synchronize_session="fetch")
            )
            if removed != 1:
                db.rollback()
                raise NotRegisteredError(event_id)

            self._release_seat(db, event_id=event_id)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(event)
        logger.info(
            f"User {user_id} unregistered from event {event_id} "
            f"({event.current_attendees}/{event.capacity})"
        )
        return event


registration_engine = RegistrationEngine()
