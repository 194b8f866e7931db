"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .admission import RoomAdmission
from .optimistic_admission import OptimisticAdmission
from .repositories import (
    BookingRepository,
    EnrollmentRepository,
    RoomRepository,
    SessionRepository,
    TicketRepository,
)

__all__ = [
    'RoomAdmission', 'OptimisticAdmission',
    'BookingRepository', 'EnrollmentRepository', 'RoomRepository',
    'SessionRepository', 'TicketRepository',
]
