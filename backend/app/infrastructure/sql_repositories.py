"""
SQLAlchemy implementations of the booking repositories.

Each repository works on the request's AsyncSession and never commits;
the session dependency owns the transaction. Writes that touch
bookings.room_id run inside a SAVEPOINT so a unique-constraint violation
can be reported as "room taken" without poisoning the outer transaction.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ForbiddenError, NotFoundError
from app.core.logging import get_logger
from app.models import Booking, Enrollment, Room, Session, Ticket
from app.services.interfaces.records import (
    BookingRecord,
    EnrollmentRecord,
    RoomRecord,
    SessionRecord,
    TicketRecord,
    TicketTypeRecord,
)
from app.services.interfaces.repositories import (
    BookingRepository,
    EnrollmentRepository,
    RoomRepository,
    SessionRepository,
    TicketRepository,
)

logger = get_logger(__name__)

ROOM_UNIQUE_CONSTRAINT = "uq_booking_room"


def _room_record(room: Room) -> RoomRecord:
    return RoomRecord(
        id=room.id,
        name=room.name,
        capacity=room.capacity,
        hotel_id=room.hotel_id,
        created_at=room.created_at,
        updated_at=room.updated_at,
    )


def _booking_record(booking: Booking, with_room: bool = False) -> BookingRecord:
    return BookingRecord(
        id=booking.id,
        user_id=booking.user_id,
        room_id=booking.room_id,
        room=_room_record(booking.room) if with_room else None,
    )


def _is_room_conflict(exc: IntegrityError) -> bool:
    return ROOM_UNIQUE_CONSTRAINT in str(exc.orig)


class SqlBookingRepository(BookingRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user(self, user_id: int) -> Optional[BookingRecord]:
        result = await self.db.execute(
            select(Booking).where(Booking.user_id == user_id).order_by(Booking.id).limit(1)
        )
        booking = result.scalars().first()
        return _booking_record(booking, with_room=True) if booking else None

    async def find_by_room(self, room_id: int) -> Optional[BookingRecord]:
        result = await self.db.execute(
            select(Booking).where(Booking.room_id == room_id).limit(1)
        )
        booking = result.scalars().first()
        return _booking_record(booking) if booking else None

    async def find_for_user(self, user_id: int, booking_id: int) -> Optional[BookingRecord]:
        result = await self.db.execute(
            select(Booking).where(Booking.id == booking_id, Booking.user_id == user_id)
        )
        booking = result.scalars().first()
        return _booking_record(booking) if booking else None

    async def create(self, user_id: int, room_id: int) -> BookingRecord:
        booking = Booking(user_id=user_id, room_id=room_id)
        try:
            async with self.db.begin_nested():
                self.db.add(booking)
        except IntegrityError as exc:
            if not _is_room_conflict(exc):
                raise
            logger.warning("booking_room_conflict", room_id=room_id, user_id=user_id)
            raise ForbiddenError("Room is no longer available", reason="room_occupied") from exc
        return _booking_record(booking)

    async def update(self, booking_id: int, room_id: int) -> BookingRecord:
        booking = await self.db.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError(reason="booking_not_found")
        try:
            async with self.db.begin_nested():
                booking.room_id = room_id
        except IntegrityError as exc:
            if not _is_room_conflict(exc):
                raise
            logger.warning("booking_room_conflict", room_id=room_id, booking_id=booking_id)
            raise ForbiddenError("Room is no longer available", reason="room_occupied") from exc
        return _booking_record(booking)


class SqlRoomRepository(RoomRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, room_id: int) -> Optional[RoomRecord]:
        result = await self.db.execute(select(Room).where(Room.id == room_id))
        room = result.scalars().first()
        return _room_record(room) if room else None


class SqlEnrollmentRepository(EnrollmentRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_user(self, user_id: int) -> Optional[EnrollmentRecord]:
        result = await self.db.execute(select(Enrollment).where(Enrollment.user_id == user_id))
        enrollment = result.scalars().first()
        if not enrollment:
            return None
        return EnrollmentRecord(id=enrollment.id, user_id=enrollment.user_id)


class SqlTicketRepository(TicketRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_enrollment(self, enrollment_id: int) -> Optional[TicketRecord]:
        result = await self.db.execute(
            select(Ticket).where(Ticket.enrollment_id == enrollment_id).order_by(Ticket.id).limit(1)
        )
        ticket = result.scalars().first()
        if not ticket:
            return None
        return TicketRecord(
            id=ticket.id,
            enrollment_id=ticket.enrollment_id,
            status=ticket.status.value,
            ticket_type=TicketTypeRecord(
                id=ticket.ticket_type.id,
                is_remote=ticket.ticket_type.is_remote,
                includes_hotel=ticket.ticket_type.includes_hotel,
            ),
        )


class SqlSessionRepository(SessionRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_token(self, token: str) -> Optional[SessionRecord]:
        result = await self.db.execute(select(Session).where(Session.token == token))
        session = result.scalars().first()
        if not session:
            return None
        return SessionRecord(user_id=session.user_id, token=session.token)
