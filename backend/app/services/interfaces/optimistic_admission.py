"""
Optimistic admission strategy - no pre-check.
Relies entirely on the bookings.room_id unique constraint.
"""

from app.services.interfaces.admission import RoomAdmission


class OptimisticAdmission(RoomAdmission):
    """Always admit - let the database reject the loser of a race."""

    async def claim(self, room_id: int, user_id: int) -> bool:
        return True

    async def release(self, room_id: int, user_id: int):
        pass
