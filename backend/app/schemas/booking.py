"""
Pydantic schemas for booking request/response validation.

Wire names are camelCase (roomId, bookingId, hotelId, ...) to match the
public API; Python attributes stay snake_case.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.services.interfaces.records import BookingRecord


class BookingBody(BaseModel):
    room_id: int = Field(..., alias="roomId")

    model_config = ConfigDict(populate_by_name=True)


class RoomResponse(BaseModel):
    id: int
    name: str
    capacity: int
    hotel_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingWithRoomResponse(BaseModel):
    id: int
    room: RoomResponse = Field(..., alias="Room")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(cls, booking: BookingRecord) -> "BookingWithRoomResponse":
        room = booking.room
        return cls(
            id=booking.id,
            room=RoomResponse(
                id=room.id,
                name=room.name,
                capacity=room.capacity,
                hotel_id=room.hotel_id,
                created_at=room.created_at,
                updated_at=room.updated_at,
            ),
        )


class BookingIdResponse(BaseModel):
    booking_id: int = Field(..., alias="bookingId")

    model_config = ConfigDict(populate_by_name=True)
