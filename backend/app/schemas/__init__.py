from app.schemas.booking import BookingBody, BookingIdResponse, BookingWithRoomResponse, RoomResponse

__all__ = [
    "BookingBody", "BookingIdResponse", "BookingWithRoomResponse", "RoomResponse",
]
