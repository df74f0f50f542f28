from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from eventhub.constants import statuses
from eventhub.schemas.common import CamelModel
from eventhub.utils.dates import to_naive_utc


class EventStatus(str, Enum):
    draft = statuses.EventStatus.DRAFT
    published = statuses.EventStatus.PUBLISHED
    ongoing = statuses.EventStatus.ONGOING
    completed = statuses.EventStatus.COMPLETED
    cancelled = statuses.EventStatus.CANCELLED


class Organizer(CamelModel):
    id: str
    first_name: str
    last_name: str


class Event(CamelModel):
    id: str = Field(..., json_schema_extra={"example": "evt_c5a6d8e0f9b1"})
    user_id: str = Field(..., description="The admin who owns the event")
    organizer: Optional[Organizer] = None
    title: str = Field(..., json_schema_extra={"example": "Python Meetup"})
    description: str
    category: str = Field(..., json_schema_extra={"example": "Technology"})
    location: str
    date: datetime
    price: float
    capacity: int
    status: EventStatus
    current_attendees: int
    attendees: List[str] = Field(
        default_factory=list, description="Ids of users registered for the event"
    )
    created_at: datetime
    updated_at: datetime


class EventCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    date: datetime
    price: float = Field(0, ge=0)
    capacity: int = Field(..., ge=0)
    status: EventStatus = Field(EventStatus.draft, validate_default=True)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @field_validator("status")
    @classmethod
    def check_initial_status(cls, value):
        if value not in (EventStatus.draft, EventStatus.published):
            raise ValueError("A new event must start as draft or published")
        return value


# All fields are optional; only the ones sent are applied.
class EventUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    price: Optional[float] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, ge=0)
    status: Optional[EventStatus] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_not_null(self):
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self
