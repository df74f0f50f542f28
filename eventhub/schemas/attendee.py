# eventhub/schemas/attendee.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from eventhub.constants import statuses
from eventhub.schemas.common import CamelModel


class TicketType(str, Enum):
    vip = statuses.TicketType.VIP
    regular = statuses.TicketType.REGULAR
    student = statuses.TicketType.STUDENT
    staff = statuses.TicketType.STAFF


class AttendeeStatus(str, Enum):
    confirmed = statuses.AttendeeStatus.CONFIRMED
    pending = statuses.AttendeeStatus.PENDING
    cancelled = statuses.AttendeeStatus.CANCELLED
    checked_in = statuses.AttendeeStatus.CHECKED_IN


def _normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


class AttendeeBase(CamelModel):
    name: str = Field(..., min_length=1, json_schema_extra={"example": "Grace Hopper"})
    email: str = Field(..., min_length=3, json_schema_extra={"example": "grace@example.com"})
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    ticket_type: TicketType
    dietary: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class AttendeeCreate(AttendeeBase):
    event_id: str
    user_id: Optional[str] = None
    status: AttendeeStatus = Field(AttendeeStatus.pending, validate_default=True)


class AttendeeUpdate(CamelModel):
    event_id: Optional[str] = None
    user_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    ticket_type: Optional[TicketType] = None
    status: Optional[AttendeeStatus] = None
    dietary: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)

    @model_validator(mode="after")
    def check_required_not_null(self):
        for field in ("event_id", "name", "email", "ticket_type", "status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class Attendee(CamelModel):
    id: str
    event_id: str
    event_title: Optional[str] = None
    user_id: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    ticket_type: TicketType
    status: AttendeeStatus
    registration_date: datetime
    dietary: Optional[str] = None
    notes: Optional[str] = None


class BulkDeleteRequest(CamelModel):
    ids: List[str] = Field(..., min_length=1)


class BulkDeleteResult(CamelModel):
    msg: str
    deleted: int
