"""
Booking service: lookup, eligibility and mutation for hotel room bookings.

ELIGIBILITY CHAIN
=================

Create (POST /booking), first failure wins:
  1. find_room      room must exist                  -> NotFoundError
  2. room_unable    no booking may hold the room     -> ForbiddenError
  3. verify_ticket  enrollment must exist            -> NotFoundError
                    ticket paid, in person, w/ hotel -> ForbiddenError
  4. admission      room claim (no-op by default)    -> ForbiddenError
  5. create

Update (PUT /booking/{id}):
  1. find_room      target room must exist           -> NotFoundError
  2. room_unable    target room must be free         -> ForbiddenError
  3. find_booking   booking must be the caller's     -> ForbiddenError
  4. admission
  5. update
  6. release this user's claim on the room it left

Moving a booking to the room it already holds is rejected at step 2, same
as any other occupied room.

RACES
=====

Steps 2 and 5 are separate statements, so two requests can both see a
free room. The unique constraint on bookings.room_id makes the second
write fail, and the repository reports that as ForbiddenError
(reason=room_occupied), the same answer step 2 would have given.
"""

from contextlib import asynccontextmanager
from typing import Optional

from app.core.errors import BookingError, ForbiddenError, NotFoundError
from app.core.logging import get_logger
from app.core.metrics import booking_latency, record_booking_operation, record_rejection
from app.models.enrollment import TicketStatus
from app.services.interfaces.admission import RoomAdmission
from app.services.interfaces.optimistic_admission import OptimisticAdmission
from app.services.interfaces.records import BookingRecord, RoomRecord, TicketRecord
from app.services.interfaces.repositories import (
    BookingRepository,
    EnrollmentRepository,
    RoomRepository,
    TicketRepository,
)

logger = get_logger(__name__)

# Operations whose BookingErrors count as eligibility rejections
REJECTING_OPERATIONS = ("create", "update")


def ticket_rejection_reason(ticket: Optional[TicketRecord]) -> Optional[str]:
    """
    Decide whether a ticket grants hotel access.
    Returns None when it does, otherwise the first failing rule.
    """
    if ticket is None:
        return "ticket_missing"
    if ticket.status != TicketStatus.PAID:
        return "ticket_not_paid"
    if ticket.ticket_type.is_remote:
        return "ticket_remote"
    if not ticket.ticket_type.includes_hotel:
        return "ticket_without_hotel"
    return None


@asynccontextmanager
async def _instrumented(operation: str, **context):
    with booking_latency.labels(operation=operation).time():
        try:
            yield
        except BookingError as exc:
            outcome = "not_found" if isinstance(exc, NotFoundError) else "forbidden"
            record_booking_operation(operation, outcome)
            if operation in REJECTING_OPERATIONS:
                record_rejection(exc.reason)
            logger.info("booking_rejected", operation=operation, reason=exc.reason, **context)
            raise
        except Exception:
            record_booking_operation(operation, "error")
            raise
    record_booking_operation(operation, "success")


class BookingService:

    def __init__(
        self,
        bookings: BookingRepository,
        rooms: RoomRepository,
        enrollments: EnrollmentRepository,
        tickets: TicketRepository,
        admission: Optional[RoomAdmission] = None,
    ):
        self.bookings = bookings
        self.rooms = rooms
        self.enrollments = enrollments
        self.tickets = tickets
        self.admission = admission or OptimisticAdmission()

    # Lookup

    async def get_booking(self, user_id: int) -> BookingRecord:
        async with _instrumented("get", user_id=user_id):
            booking = await self.bookings.get_by_user(user_id)
            if not booking:
                raise NotFoundError(reason="booking_not_found")
        return booking

    async def find_room(self, room_id: int) -> RoomRecord:
        room = await self.rooms.find(room_id)
        if not room:
            raise NotFoundError(reason="room_not_found")
        return room

    async def find_booking(self, user_id: int, booking_id: int) -> BookingRecord:
        # Missing and foreign bookings are indistinguishable to the caller
        booking = await self.bookings.find_for_user(user_id, booking_id)
        if not booking:
            raise ForbiddenError("Booking does not belong to user", reason="booking_not_owned")
        return booking

    # Eligibility

    async def room_unable(self, room_id: int) -> None:
        if await self.bookings.find_by_room(room_id):
            raise ForbiddenError(reason="room_occupied")

    async def verify_ticket(self, user_id: int) -> TicketRecord:
        enrollment = await self.enrollments.find_by_user(user_id)
        if not enrollment:
            raise NotFoundError(reason="enrollment_not_found")

        ticket = await self.tickets.find_by_enrollment(enrollment.id)
        reason = ticket_rejection_reason(ticket)
        if reason:
            raise ForbiddenError("Ticket does not include hotel", reason=reason)
        return ticket

    # Mutation

    async def create(self, user_id: int, room_id: int) -> BookingRecord:
        return await self.bookings.create(user_id, room_id)

    async def update(self, booking_id: int, room_id: int) -> BookingRecord:
        return await self.bookings.update(booking_id, room_id)

    # Flows

    async def book_room(self, user_id: int, room_id: int) -> BookingRecord:
        async with _instrumented("create", user_id=user_id, room_id=room_id):
            await self.find_room(room_id)
            await self.room_unable(room_id)
            await self.verify_ticket(user_id)

            await self._admit(room_id, user_id)
            try:
                booking = await self.create(user_id, room_id)
            except Exception:
                await self.admission.release(room_id, user_id)
                raise

        logger.info("booking_created", booking_id=booking.id, user_id=user_id, room_id=room_id)
        return booking

    async def change_room(self, user_id: int, booking_id: int, room_id: int) -> BookingRecord:
        async with _instrumented("update", user_id=user_id, booking_id=booking_id, room_id=room_id):
            await self.find_room(room_id)
            await self.room_unable(room_id)
            previous = await self.find_booking(user_id, booking_id)

            await self._admit(room_id, user_id)
            try:
                booking = await self.update(booking_id, room_id)
            except Exception:
                await self.admission.release(room_id, user_id)
                raise

            # The vacated room must not stay claimed by this user
            await self.admission.release(previous.room_id, user_id)

        logger.info(
            "booking_room_changed",
            booking_id=booking.id,
            user_id=user_id,
            from_room_id=previous.room_id,
            to_room_id=room_id,
        )
        return booking

    async def _admit(self, room_id: int, user_id: int) -> None:
        if not await self.admission.claim(room_id, user_id):
            raise ForbiddenError("Room is being booked by another request", reason="room_claimed")
