# eventhub/crud/crud_user.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.core.exceptions import EmailInUseError
from eventhub.core.security import get_password_hash, verify_password
from eventhub.crud.base import CRUDBase
from eventhub.models.event import Event
from eventhub.models.event_registration import EventRegistration
from eventhub.models.user import User
from eventhub.schemas.user import ProfileUpdate, UserCreate

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[User, UserCreate, ProfileUpdate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(self.model).filter(self.model.email == email.lower()).first()

    def create(self, db: Session, *, obj_in: UserCreate, role: str = "user") -> User:
        """
        Creates an account with a hashed password. Raises EmailInUseError if
        the email is taken, including when a concurrent signup wins the race.
        """
        if self.get_by_email(db, email=obj_in.email):
            raise EmailInUseError()

        db_obj = self.model(
            email=obj_in.email.lower(),
            hashed_password=get_password_hash(obj_in.password),
            first_name=obj_in.first_name,
            last_name=obj_in.last_name,
            role=role,
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise EmailInUseError()
        db.refresh(db_obj)
        logger.info(f"Created {role} account {db_obj.id}")
        return db_obj

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    def update_profile(self, db: Session, *, db_obj: User, obj_in: ProfileUpdate) -> User:
        update_data = obj_in.model_dump(exclude_unset=True)
        new_email = update_data.get("email")
        if new_email and new_email != db_obj.email:
            existing = self.get_by_email(db, email=new_email)
            if existing and existing.id != db_obj.id:
                raise EmailInUseError()
        try:
            return super().update(db, db_obj=db_obj, obj_in=update_data)
        except IntegrityError:
            db.rollback()
            raise EmailInUseError()

    def set_password(self, db: Session, *, db_obj: User, password: str) -> User:
        """Stores a new password hash and invalidates any pending reset token."""
        db_obj.hashed_password = get_password_hash(password)
        db_obj.reset_password_token = None
        db_obj.reset_password_expires = None
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def set_reset_token(
        self, db: Session, *, db_obj: User, token_hash: str, expires: datetime
    ) -> User:
        db_obj.reset_password_token = token_hash
        db_obj.reset_password_expires = expires
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def clear_reset_token(self, db: Session, *, db_obj: User) -> User:
        db_obj.reset_password_token = None
        db_obj.reset_password_expires = None
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_reset_token(
        self, db: Session, *, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Only matches tokens that have not expired yet."""
        return (
            db.query(self.model)
            .filter(
                self.model.reset_password_token == token_hash,
                self.model.reset_password_expires > now,
            )
            .first()
        )

    def get_registered_events(self, db: Session, *, user_id: str) -> List[Event]:
        """The user's registered events, most recent registration first."""
        return (
            db.query(Event)
            .join(EventRegistration, EventRegistration.event_id == Event.id)
            .filter(EventRegistration.user_id == user_id)
            .order_by(EventRegistration.registered_at.desc(), Event.id)
            .all()
        )


user = CRUDUser(User)
