# tests/api/test_events_api.py
from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from eventhub.constants.statuses import EventStatus
from eventhub.crud import crud_event, crud_user
from eventhub.utils.dates import utcnow
from tests.utils.attendee import create_random_attendee
from tests.utils.auth import (
    create_random_admin,
    create_random_user,
    get_authentication_headers,
)
from tests.utils.event import create_random_event


def _event_payload(**overrides) -> dict:
    data = {
        "title": "PyCon Berlin",
        "description": "Talks and sprints",
        "category": "Technology",
        "location": "Berlin",
        "date": (utcnow() + timedelta(days=30)).isoformat(),
        "price": 20,
        "capacity": 100,
    }
    data.update(overrides)
    return data


# --- Visibility ---


def test_anonymous_listing_shows_only_published(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    published = create_random_event(db, admin.id)
    for status in (EventStatus.DRAFT, EventStatus.ONGOING, EventStatus.CANCELLED):
        create_random_event(db, admin.id, status=status)

    response = client.get("/api/events")

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [published.id]


def test_regular_user_cannot_see_unpublished(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    draft = create_random_event(db, admin.id, status=EventStatus.DRAFT)
    headers = get_authentication_headers(user)

    listing = client.get("/api/events", headers=headers, params={"status": "draft"})
    assert listing.status_code == 200
    assert listing.json() == []

    detail = client.get(f"/api/events/{draft.id}", headers=headers)
    assert detail.status_code == 404
    assert detail.json()["error"]["code"] == "NOT_FOUND"


def test_admin_sees_every_status(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    create_random_event(db, admin.id)
    draft = create_random_event(db, admin.id, status=EventStatus.DRAFT)
    headers = get_authentication_headers(admin)

    listing = client.get("/api/events", headers=headers)
    assert len(listing.json()) == 2

    drafts = client.get("/api/events", headers=headers, params={"status": "draft"})
    assert [e["id"] for e in drafts.json()] == [draft.id]

    detail = client.get(f"/api/events/{draft.id}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["status"] == "draft"


def test_invalid_token_on_public_route_reads_as_anonymous(
    client: TestClient, db: Session
) -> None:
    admin = create_random_admin(db)
    create_random_event(db, admin.id, status=EventStatus.DRAFT)
    published = create_random_event(db, admin.id)

    response = client.get(
        "/api/events", headers={"Authorization": "Bearer not-a-real-token"}
    )

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [published.id]


def test_get_missing_event(client: TestClient, db: Session) -> None:
    response = client.get("/api/events/evt_missing")
    assert response.status_code == 404


def test_event_response_shape(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    event = create_random_event(db, admin.id, capacity=7)

    content = client.get(f"/api/events/{event.id}").json()

    assert content["userId"] == admin.id
    assert content["organizer"] == {
        "id": admin.id,
        "firstName": admin.first_name,
        "lastName": admin.last_name,
    }
    assert content["capacity"] == 7
    assert content["currentAttendees"] == 0
    assert content["attendees"] == []
    assert "createdAt" in content and "updatedAt" in content


def test_listing_search_and_sort(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    cheap = create_random_event(db, admin.id, title="Python Meetup", price=5)
    pricey = create_random_event(db, admin.id, title="Jazz Night", price=80, category="Music")

    by_price = client.get("/api/events", params={"sortBy": "price"}).json()
    assert [e["id"] for e in by_price] == [cheap.id, pricey.id]

    searched = client.get("/api/events", params={"search": "jazz"}).json()
    assert [e["id"] for e in searched] == [pricey.id]

    music = client.get("/api/events", params={"category": "Music"}).json()
    assert [e["id"] for e in music] == [pricey.id]


def test_unknown_sort_falls_back_to_date(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    later = create_random_event(
        db, admin.id, price=5, date=utcnow() + timedelta(days=30)
    )
    sooner = create_random_event(
        db, admin.id, price=80, date=utcnow() + timedelta(days=3)
    )

    response = client.get("/api/events", params={"sortBy": "newest"})

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [sooner.id, later.id]


# --- Management ---


def test_create_event_requires_a_token(client: TestClient, db: Session) -> None:
    response = client.post("/api/events", json=_event_payload())

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_create_event_requires_admin(client: TestClient, db: Session) -> None:
    user = create_random_user(db)

    response = client.post(
        "/api/events", json=_event_payload(), headers=get_authentication_headers(user)
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_admin_creates_draft_by_default(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)

    response = client.post(
        "/api/events", json=_event_payload(), headers=get_authentication_headers(admin)
    )

    assert response.status_code == 201
    content = response.json()
    assert content["status"] == "draft"
    assert content["userId"] == admin.id
    assert content["currentAttendees"] == 0
    db.expire_all()
    assert content["id"] in crud_user.user.get(db, id=admin.id).organized_events


def test_create_rejects_bad_input(client: TestClient, db: Session) -> None:
    headers = get_authentication_headers(create_random_admin(db))

    completed = client.post(
        "/api/events", json=_event_payload(status="completed"), headers=headers
    )
    assert completed.status_code == 400
    assert completed.json()["error"]["code"] == "VALIDATION_ERROR"

    negative = client.post("/api/events", json=_event_payload(capacity=-1), headers=headers)
    assert negative.status_code == 400

    missing = client.post("/api/events", json={"title": "Only a title"}, headers=headers)
    assert missing.status_code == 400


def test_owner_updates_event(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    event = create_random_event(db, admin.id, status=EventStatus.DRAFT)
    headers = get_authentication_headers(admin)

    response = client.put(
        f"/api/events/{event.id}",
        json={"title": "Renamed", "status": "published"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"
    assert response.json()["status"] == "published"


def test_other_admin_update_reads_as_not_found(client: TestClient, db: Session) -> None:
    owner = create_random_admin(db)
    intruder = create_random_admin(db)
    event = create_random_event(db, owner.id)

    response = client.put(
        f"/api/events/{event.id}",
        json={"title": "Hijacked"},
        headers=get_authentication_headers(intruder),
    )

    assert response.status_code == 404
    db.refresh(event)
    assert event.title != "Hijacked"


def test_invalid_transition_is_a_conflict(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    event = create_random_event(db, admin.id, status=EventStatus.COMPLETED)

    response = client.put(
        f"/api/events/{event.id}",
        json={"status": "published"},
        headers=get_authentication_headers(admin),
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "INVALID_STATE"


def test_null_field_in_update_is_rejected(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    event = create_random_event(db, admin.id)

    response = client.put(
        f"/api/events/{event.id}",
        json={"title": None},
        headers=get_authentication_headers(admin),
    )

    assert response.status_code == 400


def test_owner_deletes_event_with_registrations(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id)
    create_random_attendee(db, event.id)
    client.post(
        f"/api/events/{event.id}/register", headers=get_authentication_headers(user)
    )
    event_id = event.id

    response = client.delete(
        f"/api/events/{event_id}", headers=get_authentication_headers(admin)
    )

    assert response.status_code == 200
    assert response.json() == {"msg": "Event removed"}
    db.expire_all()
    assert crud_event.event.get(db, id=event_id) is None
    assert crud_user.user.get(db, id=user.id).registered_events == []

    profile = client.get("/api/profile/me", headers=get_authentication_headers(user))
    assert profile.json()["registeredEvents"] == []


def test_other_admin_delete_reads_as_not_found(client: TestClient, db: Session) -> None:
    owner = create_random_admin(db)
    intruder = create_random_admin(db)
    event = create_random_event(db, owner.id)

    response = client.delete(
        f"/api/events/{event.id}", headers=get_authentication_headers(intruder)
    )

    assert response.status_code == 404
    assert crud_event.event.get(db, id=event.id) is not None


def test_duplicate_event(client: TestClient, db: Session) -> None:
    owner = create_random_admin(db)
    other_admin = create_random_admin(db)
    source = create_random_event(db, owner.id, title="Annual Summit", price=30)

    response = client.post(
        f"/api/events/{source.id}/duplicate",
        headers=get_authentication_headers(other_admin),
    )

    assert response.status_code == 201
    copy = response.json()
    assert copy["id"] != source.id
    assert copy["title"] == "Annual Summit"
    assert copy["price"] == 30
    assert copy["status"] == "draft"
    assert copy["userId"] == other_admin.id
    assert copy["currentAttendees"] == 0

    forbidden = client.post(
        f"/api/events/{source.id}/duplicate",
        headers=get_authentication_headers(create_random_user(db)),
    )
    assert forbidden.status_code == 403


# --- Registration ---


def test_register_and_unregister(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    user = create_random_user(db)
    event = create_random_event(db, admin.id, capacity=3)
    headers = get_authentication_headers(user)

    registered = client.post(f"/api/events/{event.id}/register", headers=headers)
    assert registered.status_code == 200
    assert registered.json() == {
        "msg": "Registered for event successfully",
        "eventId": event.id,
        "currentAttendees": 1,
    }

    again = client.post(f"/api/events/{event.id}/register", headers=headers)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_REGISTERED"

    detail = client.get(f"/api/events/{event.id}").json()
    assert detail["attendees"] == [user.id]
    assert detail["currentAttendees"] == 1

    left = client.post(f"/api/events/{event.id}/unregister", headers=headers)
    assert left.status_code == 200
    assert left.json()["currentAttendees"] == 0

    not_registered = client.post(f"/api/events/{event.id}/unregister", headers=headers)
    assert not_registered.status_code == 409
    assert not_registered.json()["error"]["code"] == "NOT_REGISTERED"


def test_capacity_one_scenario_over_http(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    user_a = get_authentication_headers(create_random_user(db))
    user_b = get_authentication_headers(create_random_user(db))
    event = create_random_event(db, admin.id, capacity=1)
    register = f"/api/events/{event.id}/register"

    assert client.post(register, headers=user_a).json()["currentAttendees"] == 1

    full = client.post(register, headers=user_b)
    assert full.status_code == 409
    assert full.json()["error"]["code"] == "CAPACITY_EXCEEDED"

    left = client.post(f"/api/events/{event.id}/unregister", headers=user_a)
    assert left.json()["currentAttendees"] == 0

    assert client.post(register, headers=user_b).status_code == 200


def test_register_for_draft_is_invalid_state(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    event = create_random_event(db, admin.id, status=EventStatus.DRAFT)

    response = client.post(
        f"/api/events/{event.id}/register",
        headers=get_authentication_headers(create_random_user(db)),
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "INVALID_STATE"


def test_register_requires_a_valid_token(client: TestClient, db: Session) -> None:
    admin = create_random_admin(db)
    event = create_random_event(db, admin.id)

    missing = client.post(f"/api/events/{event.id}/register")
    assert missing.status_code == 401
    assert missing.json()["msg"] == "No token, authorization denied"

    invalid = client.post(
        f"/api/events/{event.id}/register",
        headers={"Authorization": "Bearer not-a-real-token"},
    )
    assert invalid.status_code == 401
    assert invalid.json()["msg"] == "Token is not valid"


def test_register_for_missing_event(client: TestClient, db: Session) -> None:
    response = client.post(
        "/api/events/evt_missing/register",
        headers=get_authentication_headers(create_random_user(db)),
    )
    assert response.status_code == 404
