# eventhub/services/authorization.py
"""
Authorization policy.

Each `can_*` function answers ALLOW or DENY with a reason for one
(caller, resource, action) triple; `enforce` turns a denial into the error
the API answers with:

* role failures are FORBIDDEN (403);
* ownership failures are NOT_FOUND (404), so another admin's event is
  indistinguishable from a missing one;
* hidden (unpublished) events are NOT_FOUND for non-admins.

Missing or invalid credentials never reach this module; the auth
dependencies answer those with 401.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Query, Session

from eventhub.constants.statuses import EventStatus, UserRole
from eventhub.core.exceptions import ForbiddenError, NotFoundError
from eventhub.crud import crud_event
from eventhub.models.event import Event
from eventhub.models.user import User

DENY_FORBIDDEN = "forbidden"
DENY_NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: str = ""
    deny_as: Optional[str] = None

    @classmethod
    def allow(cls) -> "PolicyDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, deny_as: str) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, deny_as=deny_as)


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == UserRole.ADMIN


def can_view_event(user: Optional[User], event: Event) -> PolicyDecision:
    if is_admin(user) or event.status == EventStatus.PUBLISHED:
        return PolicyDecision.allow()
    return PolicyDecision.deny("Event not found", DENY_NOT_FOUND)


def can_manage_events(user: Optional[User]) -> PolicyDecision:
    """Create and duplicate."""
    if is_admin(user):
        return PolicyDecision.allow()
    return PolicyDecision.deny(
        "Access denied. Administrator privileges required.", DENY_FORBIDDEN
    )


def can_modify_event(user: Optional[User], event: Event) -> PolicyDecision:
    """Update and delete: admin role plus ownership."""
    decision = can_manage_events(user)
    if not decision.allowed:
        return decision
    if event.user_id != user.id:
        return PolicyDecision.deny("Event not found", DENY_NOT_FOUND)
    return PolicyDecision.allow()


def can_manage_roster(user: Optional[User]) -> PolicyDecision:
    """Attendee roster and admin dashboard; no ownership scoping."""
    return can_manage_events(user)


def enforce(decision: PolicyDecision) -> None:
    if decision.allowed:
        return
    if decision.deny_as == DENY_NOT_FOUND:
        raise NotFoundError(decision.reason)
    raise ForbiddenError(decision.reason)


def visible_events_query(
    db: Session, user: Optional[User], *, status: Optional[str] = None
) -> Query:
    """
    Picks the listing query for the caller. The `status` filter is only
    honoured for admins; everybody else gets published events.
    """
    if is_admin(user):
        return crud_event.event.admin_events_query(db, status=status)
    return crud_event.event.public_events_query(db)
