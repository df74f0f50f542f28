from eventhub.schemas.common import CamelModel


class RegistrationConfirmation(CamelModel):
    msg: str
    event_id: str
    current_attendees: int
