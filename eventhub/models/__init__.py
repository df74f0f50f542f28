# eventhub/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships

from eventhub.db.base_class import Base
from eventhub.models.user import User
from eventhub.models.event import Event
from eventhub.models.event_registration import EventRegistration
from eventhub.models.attendee import Attendee
