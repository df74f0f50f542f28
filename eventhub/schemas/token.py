# eventhub/schemas/token.py
from pydantic import BaseModel
from typing import Optional


class Token(BaseModel):
    token: str


class TokenPayload(BaseModel):
    sub: str  # "sub" is the standard claim for subject (user ID)
    # Only present on admin session tokens
    role: Optional[str] = None
    exp: int  # Standard claim for expiration time
