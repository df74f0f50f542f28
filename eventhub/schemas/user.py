# eventhub/schemas/user.py
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BeforeValidator, EmailStr, Field, model_validator

from eventhub.constants import statuses
from eventhub.schemas.common import CamelModel


class UserRole(str, Enum):
    user = statuses.UserRole.USER
    admin = statuses.UserRole.ADMIN


def _normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


NormalizedEmail = Annotated[EmailStr, BeforeValidator(_normalize_email)]
NormalizedStr = Annotated[str, BeforeValidator(_normalize_email)]


class UserCreate(CamelModel):
    first_name: str = Field(..., min_length=1, json_schema_extra={"example": "Ada"})
    last_name: str = Field(..., min_length=1, json_schema_extra={"example": "Lovelace"})
    email: NormalizedEmail = Field(..., json_schema_extra={"example": "ada@example.com"})
    password: str = Field(..., min_length=6)


class LoginRequest(CamelModel):
    email: NormalizedStr
    password: str


class ForgotPasswordRequest(CamelModel):
    email: NormalizedStr


class ResetPasswordRequest(CamelModel):
    password: str = Field(..., min_length=6)
    confirm_password: str


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[NormalizedEmail] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None

    @model_validator(mode="after")
    def check_required_not_null(self):
        # Optional in the payload, but a present value may not be null
        for field in ("first_name", "last_name", "email"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class UserProfile(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime
    registered_events: List[str] = []
    organized_events: List[str] = []
