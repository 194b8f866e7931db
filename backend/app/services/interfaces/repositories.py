"""
Data-access interfaces used by the booking service.

Implementations:
- app.infrastructure.sql_repositories: SQLAlchemy / PostgreSQL
- app.infrastructure.memory_repositories: in-process store for tests
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.services.interfaces.records import (
    BookingRecord,
    EnrollmentRecord,
    RoomRecord,
    SessionRecord,
    TicketRecord,
)


class BookingRepository(ABC):

    @abstractmethod
    async def get_by_user(self, user_id: int) -> Optional[BookingRecord]:
        """The user's booking with its room embedded, or None."""
        pass

    @abstractmethod
    async def find_by_room(self, room_id: int) -> Optional[BookingRecord]:
        """Any booking currently holding the room."""
        pass

    @abstractmethod
    async def find_for_user(self, user_id: int, booking_id: int) -> Optional[BookingRecord]:
        """The booking with this id, only if it belongs to the user."""
        pass

    @abstractmethod
    async def create(self, user_id: int, room_id: int) -> BookingRecord:
        """
        Insert a booking.

        Raises:
            ForbiddenError: the room was taken by a concurrent writer
        """
        pass

    @abstractmethod
    async def update(self, booking_id: int, room_id: int) -> BookingRecord:
        """
        Move an existing booking to another room.

        Raises:
            ForbiddenError: the room was taken by a concurrent writer
        """
        pass


class RoomRepository(ABC):

    @abstractmethod
    async def find(self, room_id: int) -> Optional[RoomRecord]:
        pass


class EnrollmentRepository(ABC):

    @abstractmethod
    async def find_by_user(self, user_id: int) -> Optional[EnrollmentRecord]:
        pass


class TicketRepository(ABC):

    @abstractmethod
    async def find_by_enrollment(self, enrollment_id: int) -> Optional[TicketRecord]:
        """The enrollment's ticket with its ticket type embedded."""
        pass


class SessionRepository(ABC):

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[SessionRecord]:
        pass
