"""
HTTP tests for GET/POST/PUT /booking against the in-memory store.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from app.api.deps import get_booking_service, get_session_repository
from app.infrastructure.memory_repositories import InMemorySessionRepository
from app.main import app
from app.models.enrollment import TicketStatus
from app.services.booking_service import BookingService
from tests.factories import create_ticket, make_eligible


# GET /booking

@pytest.mark.asyncio
async def test_get_without_booking_returns_404(client: AsyncClient, user):
    response = await client.get("/booking", headers=user.headers)
    assert response.status_code == 404
    assert response.json()["reason"] == "booking_not_found"


@pytest.mark.asyncio
async def test_get_returns_booking_with_room(client: AsyncClient, store, user):
    room = store.add_room(hotel_id=3, name="Ocean view", capacity=3)
    booking = store.add_booking(user.id, room.id)

    response = await client.get("/booking", headers=user.headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == booking.id
    assert data["Room"]["id"] == room.id
    assert data["Room"]["name"] == "Ocean view"
    assert data["Room"]["capacity"] == 3
    assert data["Room"]["hotelId"] == 3
    assert set(data["Room"]) == {"id", "name", "capacity", "hotelId", "createdAt", "updatedAt"}


# POST /booking

@pytest.mark.asyncio
async def test_post_books_room(client: AsyncClient, store, user):
    room = store.add_room()
    make_eligible(store, user.id)

    response = await client.post("/booking", json={"roomId": room.id}, headers=user.headers)

    assert response.status_code == 200
    booking_id = response.json()["bookingId"]
    assert store.bookings[booking_id].room_id == room.id
    assert store.bookings[booking_id].user_id == user.id


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"roomId": "abc"}, {"roomId": None}, {"room": 1}])
async def test_post_invalid_body_returns_400(client: AsyncClient, user, body):
    response = await client.post("/booking", json=body, headers=user.headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_post_missing_room_returns_404(client: AsyncClient, store, user):
    make_eligible(store, user.id)

    response = await client.post("/booking", json={"roomId": 0}, headers=user.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_post_without_enrollment_returns_404(client: AsyncClient, store, user):
    room = store.add_room()

    response = await client.post("/booking", json={"roomId": room.id}, headers=user.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_post_without_ticket_returns_403(client: AsyncClient, store, user):
    room = store.add_room()
    store.add_enrollment(user.id)

    response = await client.post("/booking", json={"roomId": room.id}, headers=user.headers)
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "ticket_kwargs",
    [
        {"status": TicketStatus.RESERVED},
        {"is_remote": True},
        {"includes_hotel": False},
    ],
)
async def test_post_with_ineligible_ticket_returns_403(client: AsyncClient, store, user, ticket_kwargs):
    room = store.add_room()
    create_ticket(store, user.id, **ticket_kwargs)

    response = await client.post("/booking", json={"roomId": room.id}, headers=user.headers)

    assert response.status_code == 403
    assert store.bookings == {}


@pytest.mark.asyncio
async def test_post_taken_room_returns_403(client: AsyncClient, store, make_user):
    first, second = make_user(), make_user()
    room = store.add_room()
    make_eligible(store, first.id)
    make_eligible(store, second.id)

    response = await client.post("/booking", json={"roomId": room.id}, headers=first.headers)
    assert response.status_code == 200

    response = await client.post("/booking", json={"roomId": room.id}, headers=second.headers)
    assert response.status_code == 403
    assert response.json()["reason"] == "room_occupied"
    assert len(store.bookings) == 1


# PUT /booking/{bookingId}

@pytest.mark.asyncio
async def test_put_moves_booking(client: AsyncClient, store, make_user):
    owner, other = make_user(), make_user()
    old_room = store.add_room(name="101")
    new_room = store.add_room(name="102")
    booking = store.add_booking(owner.id, old_room.id)
    make_eligible(store, other.id)

    response = await client.put(
        f"/booking/{booking.id}", json={"roomId": new_room.id}, headers=owner.headers
    )

    assert response.status_code == 200
    assert response.json() == {"bookingId": booking.id}
    assert store.bookings[booking.id].room_id == new_room.id

    # The vacated room can now be booked by someone else
    response = await client.post("/booking", json={"roomId": old_room.id}, headers=other.headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_put_invalid_body_returns_400(client: AsyncClient, user):
    response = await client.put("/booking/1", json={}, headers=user.headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_put_non_numeric_booking_id_returns_400(client: AsyncClient, store, user):
    room = store.add_room()
    response = await client.put("/booking/abc", json={"roomId": room.id}, headers=user.headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_put_missing_room_returns_404(client: AsyncClient, user):
    response = await client.put("/booking/0", json={"roomId": 0}, headers=user.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_put_missing_room_wins_over_foreign_booking(client: AsyncClient, store, make_user):
    owner, intruder = make_user(), make_user()
    room = store.add_room()
    booking = store.add_booking(owner.id, room.id)

    response = await client.put(f"/booking/{booking.id}", json={"roomId": 999}, headers=intruder.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_put_to_taken_room_returns_403(client: AsyncClient, store, make_user):
    owner, neighbour = make_user(), make_user()
    room = store.add_room()
    taken = store.add_room()
    booking = store.add_booking(owner.id, room.id)
    store.add_booking(neighbour.id, taken.id)

    response = await client.put(f"/booking/{booking.id}", json={"roomId": taken.id}, headers=owner.headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_put_to_own_current_room_returns_403(client: AsyncClient, store, user):
    room = store.add_room()
    booking = store.add_booking(user.id, room.id)

    response = await client.put(f"/booking/{booking.id}", json={"roomId": room.id}, headers=user.headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_put_missing_booking_returns_403(client: AsyncClient, store, user):
    room = store.add_room()

    response = await client.put("/booking/0", json={"roomId": room.id}, headers=user.headers)
    assert response.status_code == 403
    assert response.json()["reason"] == "booking_not_owned"


@pytest.mark.asyncio
async def test_put_foreign_booking_returns_403(client: AsyncClient, store, make_user):
    owner, intruder = make_user(), make_user()
    room = store.add_room()
    free_room = store.add_room()
    booking = store.add_booking(owner.id, room.id)

    response = await client.put(
        f"/booking/{booking.id}", json={"roomId": free_room.id}, headers=intruder.headers
    )

    assert response.status_code == 403
    assert store.bookings[booking.id].room_id == room.id


# Error mapping and observability

class _BrokenRooms:

    async def find(self, room_id):
        raise RuntimeError("database went away")


@pytest.mark.asyncio
async def test_unexpected_error_returns_500(store, service, user):
    broken = BookingService(
        bookings=service.bookings,
        rooms=_BrokenRooms(),
        enrollments=service.enrollments,
        tickets=service.tickets,
    )

    app.dependency_overrides[get_booking_service] = lambda: broken
    app.dependency_overrides[get_session_repository] = lambda: InMemorySessionRepository(store)
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.post("/booking", json={"roomId": 1}, headers=user.headers)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["reason"] == "internal_error"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient, user):
    response = await client.get("/booking", headers={**user.headers, "X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_metrics_count_booking_outcomes(client: AsyncClient, user):
    await client.get("/booking", headers=user.headers)

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert 'booking_operations_total{operation="get",outcome="not_found"}' in response.text
