"""
Plain records returned by the repositories.

The booking core only ever sees these, never ORM instances, so it runs the
same against PostgreSQL and against the in-memory store.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RoomRecord:
    id: int
    name: str
    capacity: int
    hotel_id: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class BookingRecord:
    id: int
    user_id: int
    room_id: int
    room: Optional[RoomRecord] = None


@dataclass(frozen=True)
class EnrollmentRecord:
    id: int
    user_id: int


@dataclass(frozen=True)
class TicketTypeRecord:
    id: int
    is_remote: bool
    includes_hotel: bool


@dataclass(frozen=True)
class TicketRecord:
    id: int
    enrollment_id: int
    status: str
    ticket_type: TicketTypeRecord


@dataclass(frozen=True)
class SessionRecord:
    user_id: int
    token: str
