"""
FastAPI dependency providers wiring the SQL repositories to the request session.
Tests override get_booking_service / get_session_repository to swap in
the in-memory store.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.infrastructure.sql_repositories import (
    SqlBookingRepository,
    SqlEnrollmentRepository,
    SqlRoomRepository,
    SqlSessionRepository,
    SqlTicketRepository,
)
from app.services.booking_service import BookingService
from app.services.interfaces.repositories import SessionRepository
from app.services.strategy_factory import get_admission


def get_session_repository(db: AsyncSession = Depends(get_db)) -> SessionRepository:
    return SqlSessionRepository(db)


def get_booking_service(db: AsyncSession = Depends(get_db)) -> BookingService:
    return BookingService(
        bookings=SqlBookingRepository(db),
        rooms=SqlRoomRepository(db),
        enrollments=SqlEnrollmentRepository(db),
        tickets=SqlTicketRepository(db),
        admission=get_admission(),
    )
