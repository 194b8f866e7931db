from app.models.user import User, Session
from app.models.hotel import Hotel, Room
from app.models.booking import Booking
from app.models.enrollment import Enrollment, Ticket, TicketType, TicketStatus

__all__ = [
    "User", "Session",
    "Hotel", "Room",
    "Booking",
    "Enrollment", "Ticket", "TicketType", "TicketStatus",
]
