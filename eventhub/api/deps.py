# eventhub/api/deps.py
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from eventhub.core.exceptions import UnauthorizedError
from eventhub.core.security import decode_access_token
from eventhub.crud import crud_user
from eventhub.db.session import get_db
from eventhub.models.user import User
from eventhub.schemas.token import TokenPayload
from eventhub.services import authorization

logger = logging.getLogger(__name__)

# This tells FastAPI where to look for the token.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _decode(token: str) -> TokenPayload:
    try:
        return TokenPayload(**decode_access_token(token))
    except (JWTError, PydanticValidationError):
        # Catches any error from jose or Pydantic validation
        raise UnauthorizedError("Token is not valid")


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """The authenticated caller; 401 when the token is missing or invalid."""
    if not token:
        raise UnauthorizedError("No token, authorization denied")

    payload = _decode(token)
    user = crud_user.user.get(db, id=payload.sub)
    if not user:
        logger.warning(f"Token presented for unknown user {payload.sub}")
        raise UnauthorizedError("Token is not valid")
    return user


def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    The caller when a valid token is presented, otherwise None. Used by the
    public event routes, where an invalid token reads as anonymous.
    """
    if not token:
        return None
    try:
        payload = _decode(token)
    except UnauthorizedError:
        return None
    return crud_user.user.get(db, id=payload.sub)


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """The authenticated caller, who must hold the admin role (403 otherwise)."""
    authorization.enforce(authorization.can_manage_events(current_user))
    return current_user


def get_roster_admin(current_user: User = Depends(get_current_user)) -> User:
    """Caller allowed to manage attendee rosters and read platform stats."""
    authorization.enforce(authorization.can_manage_roster(current_user))
    return current_user
