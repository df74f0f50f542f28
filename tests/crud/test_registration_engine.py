# tests/crud/test_registration_engine.py
import pytest
from sqlalchemy.orm import Session

from eventhub.constants.statuses import EventStatus
from eventhub.core.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    InvalidStateError,
    NotFoundError,
    NotRegisteredError,
)
from eventhub.crud import crud_event
from eventhub.schemas.event import EventUpdate
from eventhub.services.registration_engine import registration_engine
from tests.utils.auth import create_random_admin, create_random_user
from tests.utils.event import create_random_event


def _assert_consistent(db: Session, event_id: str) -> None:
    """The counter always equals the number of registration rows."""
    db.expire_all()
    event = crud_event.event.get(db, id=event_id)
    count = crud_event.event.count_registrations(db, event_id=event_id)
    assert event.current_attendees == count
    assert len(event.attendees) == count
    assert 0 <= event.current_attendees <= event.capacity


def test_register_links_both_sides(db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=2)

    updated = registration_engine.register(db, user_id=user.id, event_id=event.id)

    assert updated.current_attendees == 1
    assert user.id in updated.attendees
    db.refresh(user)
    assert user.registered_events == [event.id]
    _assert_consistent(db, event.id)


def test_capacity_one_admits_only_the_first_user(db: Session) -> None:
    admin = create_random_admin(db)
    first = create_random_user(db)
    second = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=1)

    registration_engine.register(db, user_id=first.id, event_id=event.id)
    with pytest.raises(CapacityExceededError):
        registration_engine.register(db, user_id=second.id, event_id=event.id)

    assert not registration_engine.is_registered(db, user_id=second.id, event_id=event.id)
    _assert_consistent(db, event.id)


def test_zero_capacity_event_is_always_full(db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=0)

    with pytest.raises(CapacityExceededError):
        registration_engine.register(db, user_id=user.id, event_id=event.id)
    _assert_consistent(db, event.id)


def test_double_registration_is_rejected(db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=5)

    registration_engine.register(db, user_id=user.id, event_id=event.id)
    with pytest.raises(AlreadyRegisteredError):
        registration_engine.register(db, user_id=user.id, event_id=event.id)

    db.refresh(event)
    assert event.current_attendees == 1
    _assert_consistent(db, event.id)


@pytest.mark.parametrize(
    "status",
    [EventStatus.DRAFT, EventStatus.ONGOING, EventStatus.COMPLETED, EventStatus.CANCELLED],
)
def test_only_published_events_accept_registrations(db: Session, status: str) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, status=status)

    with pytest.raises(InvalidStateError):
        registration_engine.register(db, user_id=user.id, event_id=event.id)
    _assert_consistent(db, event.id)


def test_register_for_missing_event(db: Session) -> None:
    user = create_random_user(db)
    with pytest.raises(NotFoundError):
        registration_engine.register(db, user_id=user.id, event_id="evt_missing")


def test_register_missing_user(db: Session) -> None:
    admin = create_random_admin(db)
    event = create_random_event(db, admin.id)
    with pytest.raises(NotFoundError):
        registration_engine.register(db, user_id="usr_missing", event_id=event.id)


def test_unregister_releases_the_seat(db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    other = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=1)

    registration_engine.register(db, user_id=user.id, event_id=event.id)
    updated = registration_engine.unregister(db, user_id=user.id, event_id=event.id)

    assert updated.current_attendees == 0
    assert user.id not in updated.attendees
    db.refresh(user)
    assert user.registered_events == []

    # The freed seat can be taken by someone else
    registration_engine.register(db, user_id=other.id, event_id=event.id)
    _assert_consistent(db, event.id)


def test_unregister_without_registration_changes_nothing(db: Session) -> None:
    admin = create_random_admin(db)
    registered = create_random_user(db)
    stranger = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=3)
    registration_engine.register(db, user_id=registered.id, event_id=event.id)

    with pytest.raises(NotRegisteredError):
        registration_engine.unregister(db, user_id=stranger.id, event_id=event.id)

    db.refresh(event)
    assert event.current_attendees == 1
    _assert_consistent(db, event.id)


def test_unregister_is_allowed_after_the_event_closes(db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id)
    registration_engine.register(db, user_id=user.id, event_id=event.id)

    crud_event.event.update(
        db, db_obj=event, obj_in=EventUpdate(status=EventStatus.CANCELLED)
    )
    updated = registration_engine.unregister(db, user_id=user.id, event_id=event.id)

    assert updated.current_attendees == 0
    _assert_consistent(db, event.id)


def test_capacity_one_scenario(db: Session) -> None:
    admin = create_random_admin(db)
    user_a = create_random_user(db)
    user_b = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=1)

    assert registration_engine.register(
        db, user_id=user_a.id, event_id=event.id
    ).current_attendees == 1

    with pytest.raises(CapacityExceededError):
        registration_engine.register(db, user_id=user_b.id, event_id=event.id)

    assert registration_engine.unregister(
        db, user_id=user_a.id, event_id=event.id
    ).current_attendees == 0

    final = registration_engine.register(db, user_id=user_b.id, event_id=event.id)
    assert final.current_attendees == 1
    assert final.attendees == [user_b.id]
    _assert_consistent(db, event.id)


def test_counter_matches_relation_after_mixed_sequence(db: Session) -> None:
    admin = create_random_admin(db)
    users = [create_random_user(db) for _ in range(4)]
    event = create_random_event(db, admin.id, capacity=3)

    steps = [
        ("register", 0),
        ("register", 1),
        ("register", 1),
        ("unregister", 2),
        ("register", 2),
        ("register", 3),
        ("unregister", 0),
        ("register", 3),
        ("unregister", 0),
        ("register", 0),
    ]
    for action, index in steps:
        operation = getattr(registration_engine, action)
        try:
            operation(db, user_id=users[index].id, event_id=event.id)
        except (AlreadyRegisteredError, NotRegisteredError, CapacityExceededError):
            pass
        _assert_consistent(db, event.id)

    for user in users:
        db.refresh(user)
        on_user_side = event.id in user.registered_events
        assert on_user_side == registration_engine.is_registered(
            db, user_id=user.id, event_id=event.id
        )


def test_failed_seat_claim_rolls_back_the_relation_row(
    db: Session, monkeypatch: pytest.MonkeyPatch
) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=2)

    def failing_claim(db, *, event_id):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(registration_engine, "_claim_seat", failing_claim)

    with pytest.raises(RuntimeError):
        registration_engine.register(db, user_id=user.id, event_id=event.id)

    assert not registration_engine.is_registered(db, user_id=user.id, event_id=event.id)
    db.refresh(user)
    assert user.registered_events == []
    _assert_consistent(db, event.id)


def test_failed_seat_release_keeps_the_registration(
    db: Session, monkeypatch: pytest.MonkeyPatch
) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=2)
    registration_engine.register(db, user_id=user.id, event_id=event.id)

    def failing_release(db, *, event_id):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(registration_engine, "_release_seat", failing_release)

    with pytest.raises(RuntimeError):
        registration_engine.unregister(db, user_id=user.id, event_id=event.id)

    assert registration_engine.is_registered(db, user_id=user.id, event_id=event.id)
    _assert_consistent(db, event.id)


def test_lost_seat_race_rolls_back_the_relation_row(
    db: Session, monkeypatch: pytest.MonkeyPatch
) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=2)

    # Another request filled the event between the checks and the update
    monkeypatch.setattr(
        registration_engine, "_claim_seat", lambda db, *, event_id: False
    )

    with pytest.raises(CapacityExceededError):
        registration_engine.register(db, user_id=user.id, event_id=event.id)

    assert not registration_engine.is_registered(db, user_id=user.id, event_id=event.id)
    _assert_consistent(db, event.id)


def test_claim_seat_guards_status_and_capacity(db: Session) -> None:
    admin = create_random_admin(db)
    full = create_random_event(db, admin.id, capacity=0)
    draft = create_random_event(db, admin.id, status=EventStatus.DRAFT)
    open_event = create_random_event(db, admin.id, capacity=1)

    assert registration_engine._claim_seat(db, event_id=full.id) is False
    assert registration_engine._claim_seat(db, event_id=draft.id) is False
    assert registration_engine._claim_seat(db, event_id=open_event.id) is True
    assert registration_engine._claim_seat(db, event_id=open_event.id) is False
    db.rollback()
