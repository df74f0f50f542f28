# eventhub/crud/__init__.py

from .crud_attendee import attendee
from .crud_dashboard import dashboard
from .crud_event import event
from .crud_user import user
