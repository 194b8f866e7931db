"""
In-process implementations of the booking repositories.

Backs the test suite and local experiments. One InMemoryStore is shared by
all repositories built from it, and it enforces the same one-booking-per-room
rule as the bookings.room_id unique constraint.
"""

import itertools
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

from app.core.errors import ForbiddenError, NotFoundError
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


class InMemoryStore:
    """Tables as dicts keyed by primary key, plus a shared id sequence."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.rooms: Dict[int, RoomRecord] = {}
        self.bookings: Dict[int, BookingRecord] = {}
        self.enrollments: Dict[int, EnrollmentRecord] = {}
        self.ticket_types: Dict[int, TicketTypeRecord] = {}
        self.tickets: Dict[int, TicketRecord] = {}
        self.sessions: Dict[str, SessionRecord] = {}

    def next_id(self) -> int:
        return next(self._ids)

    def add_room(self, hotel_id: int = 1, name: str = "101", capacity: int = 2) -> RoomRecord:
        now = datetime.now(timezone.utc)
        room = RoomRecord(
            id=self.next_id(),
            name=name,
            capacity=capacity,
            hotel_id=hotel_id,
            created_at=now,
            updated_at=now,
        )
        self.rooms[room.id] = room
        return room

    def add_booking(self, user_id: int, room_id: int) -> BookingRecord:
        booking = BookingRecord(id=self.next_id(), user_id=user_id, room_id=room_id)
        self.bookings[booking.id] = booking
        return booking

    def add_enrollment(self, user_id: int) -> EnrollmentRecord:
        enrollment = EnrollmentRecord(id=self.next_id(), user_id=user_id)
        self.enrollments[enrollment.id] = enrollment
        return enrollment

    def add_ticket_type(self, is_remote: bool = False, includes_hotel: bool = True) -> TicketTypeRecord:
        ticket_type = TicketTypeRecord(
            id=self.next_id(), is_remote=is_remote, includes_hotel=includes_hotel
        )
        self.ticket_types[ticket_type.id] = ticket_type
        return ticket_type

    def add_ticket(self, enrollment_id: int, ticket_type: TicketTypeRecord, status: str) -> TicketRecord:
        ticket = TicketRecord(
            id=self.next_id(),
            enrollment_id=enrollment_id,
            status=status,
            ticket_type=ticket_type,
        )
        self.tickets[ticket.id] = ticket
        return ticket

    def add_session(self, user_id: int, token: str) -> SessionRecord:
        session = SessionRecord(user_id=user_id, token=token)
        self.sessions[token] = session
        return session

    def room_holder(self, room_id: int) -> Optional[BookingRecord]:
        return next((b for b in self.bookings.values() if b.room_id == room_id), None)


class InMemoryBookingRepository(BookingRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get_by_user(self, user_id: int) -> Optional[BookingRecord]:
        for booking in sorted(self.store.bookings.values(), key=lambda b: b.id):
            if booking.user_id == user_id:
                return replace(booking, room=self.store.rooms.get(booking.room_id))
        return None

    async def find_by_room(self, room_id: int) -> Optional[BookingRecord]:
        return self.store.room_holder(room_id)

    async def find_for_user(self, user_id: int, booking_id: int) -> Optional[BookingRecord]:
        booking = self.store.bookings.get(booking_id)
        if booking and booking.user_id == user_id:
            return booking
        return None

    async def create(self, user_id: int, room_id: int) -> BookingRecord:
        if self.store.room_holder(room_id):
            raise ForbiddenError("Room is no longer available", reason="room_occupied")
        return self.store.add_booking(user_id, room_id)

    async def update(self, booking_id: int, room_id: int) -> BookingRecord:
        booking = self.store.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(reason="booking_not_found")
        holder = self.store.room_holder(room_id)
        if holder and holder.id != booking_id:
            raise ForbiddenError("Room is no longer available", reason="room_occupied")
        updated = replace(booking, room_id=room_id, room=None)
        self.store.bookings[booking_id] = updated
        return updated


class InMemoryRoomRepository(RoomRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find(self, room_id: int) -> Optional[RoomRecord]:
        return self.store.rooms.get(room_id)


class InMemoryEnrollmentRepository(EnrollmentRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_by_user(self, user_id: int) -> Optional[EnrollmentRecord]:
        return next((e for e in self.store.enrollments.values() if e.user_id == user_id), None)


class InMemoryTicketRepository(TicketRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_by_enrollment(self, enrollment_id: int) -> Optional[TicketRecord]:
        tickets = sorted(self.store.tickets.values(), key=lambda t: t.id)
        return next((t for t in tickets if t.enrollment_id == enrollment_id), None)


class InMemorySessionRepository(SessionRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_by_token(self, token: str) -> Optional[SessionRecord]:
        return self.store.sessions.get(token)
