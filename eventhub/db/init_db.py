# eventhub/db/init_db.py
import logging

from sqlalchemy.orm import Session

from eventhub.constants.statuses import UserRole
from eventhub.core.config import settings
from eventhub.crud import crud_user
from eventhub.db.base import Base
from eventhub.db.session import engine
from eventhub.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def create_tables() -> None:
    # Migrations live in alembic/; this keeps local SQLite setups working.
    Base.metadata.create_all(bind=engine)


def seed_first_admin(db: Session) -> None:
    """Creates the bootstrap admin from FIRST_ADMIN_EMAIL/PASSWORD, once."""
    if not settings.FIRST_ADMIN_EMAIL or not settings.FIRST_ADMIN_PASSWORD:
        return
    if crud_user.user.get_by_email(db, email=settings.FIRST_ADMIN_EMAIL):
        return

    admin_in = UserCreate(
        first_name="Admin",
        last_name="User",
        email=settings.FIRST_ADMIN_EMAIL,
        password=settings.FIRST_ADMIN_PASSWORD,
    )
    admin = crud_user.user.create(db, obj_in=admin_in, role=UserRole.ADMIN)
    logger.info(f"Seeded first admin account {admin.id}")


def init_db(db: Session) -> None:
    create_tables()
    seed_first_admin(db)
