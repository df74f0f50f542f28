# Imports every model so Base.metadata knows all tables (used by
# create_all and by Alembic autogenerate).
from eventhub.db.base_class import Base  # noqa: F401
from eventhub.models import Attendee, Event, EventRegistration, User  # noqa: F401
