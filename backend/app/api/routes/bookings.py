"""
Booking endpoints: read, create and change the caller's hotel room booking.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_booking_service
from app.core.security import get_current_user_id
from app.schemas.booking import BookingBody, BookingIdResponse, BookingWithRoomResponse
from app.services.booking_service import BookingService

router = APIRouter(prefix="/booking", tags=["Booking"])


@router.get("", response_model=BookingWithRoomResponse, response_model_by_alias=True)
async def get_booking(
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
):
    """Get the authenticated user's booking with its room."""
    booking = await service.get_booking(user_id)
    return BookingWithRoomResponse.from_record(booking)


@router.post("", response_model=BookingIdResponse, response_model_by_alias=True)
async def create_booking(
    body: BookingBody,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
):
    """
    Book a room.

    404 if the room or the caller's enrollment does not exist, 403 if the
    room is taken or the caller's ticket does not cover a hotel stay.
    """
    booking = await service.book_room(user_id, body.room_id)
    return BookingIdResponse(booking_id=booking.id)


@router.put("/{booking_id}", response_model=BookingIdResponse, response_model_by_alias=True)
async def change_booking_room(
    booking_id: int,
    body: BookingBody,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
):
    """
    Move an existing booking to another room.

    404 if the target room does not exist, 403 if it is taken or the booking
    is not the caller's.
    """
    booking = await service.change_room(user_id, booking_id, body.room_id)
    return BookingIdResponse(booking_id=booking.id)
