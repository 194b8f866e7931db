"""
Pytest fixtures: in-memory store, booking service, HTTP client, and
authenticated users.

The API is exercised through httpx against the real FastAPI app with the
repository dependencies overridden to use the in-memory store, so no
database is needed for these tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.api.deps import get_booking_service, get_session_repository
from app.core.security import create_access_token
from app.infrastructure.memory_repositories import (
    InMemoryBookingRepository,
    InMemoryEnrollmentRepository,
    InMemoryRoomRepository,
    InMemorySessionRepository,
    InMemoryStore,
    InMemoryTicketRepository,
)
from app.main import app
from app.services.booking_service import BookingService
from tests.factories import AuthenticatedUser


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def service(store: InMemoryStore) -> BookingService:
    return BookingService(
        bookings=InMemoryBookingRepository(store),
        rooms=InMemoryRoomRepository(store),
        enrollments=InMemoryEnrollmentRepository(store),
        tickets=InMemoryTicketRepository(store),
    )


@pytest_asyncio.fixture
async def client(store: InMemoryStore, service: BookingService) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the service and session lookup pointed at the in-memory store."""
    app.dependency_overrides[get_booking_service] = lambda: service
    app.dependency_overrides[get_session_repository] = lambda: InMemorySessionRepository(store)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(store: InMemoryStore):
    """Create a user id with a live session; returns its auth headers too."""

    def _make_user() -> AuthenticatedUser:
        user_id = store.next_id()
        token = create_access_token(user_id)
        store.add_session(user_id, token)
        return AuthenticatedUser(id=user_id, token=token)

    return _make_user


@pytest.fixture
def user(make_user) -> AuthenticatedUser:
    return make_user()
