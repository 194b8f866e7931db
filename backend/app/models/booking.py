"""
Booking model linking a user to a hotel room.

Key design decisions:
- Unique constraint on room_id: a room holds at most one booking. This is
  the database-level guard behind the "room taken" check, so two requests
  racing for the same room cannot both commit.
- Rows are updated in place when a user changes rooms; there is no
  cancellation status.
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)

    # Relationships
    user = relationship("User", back_populates="bookings")
    room = relationship("Room", back_populates="bookings", lazy="joined")

    __table_args__ = (
        UniqueConstraint("room_id", name="uq_booking_room"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, room={self.room_id})>"
