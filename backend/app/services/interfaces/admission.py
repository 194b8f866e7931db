"""
Room admission gate interface.
Sits between the eligibility checks and the write, for deployments that
want to turn away racing requests before they reach the database.
"""

from abc import ABC, abstractmethod


class RoomAdmission(ABC):
    """
    Interface for room admission strategies.

    Implementations:
    - OptimisticAdmission: admit everything, the unique constraint on
      bookings.room_id decides
    - RedisAdmission: short-lived per-room claim in Redis
    """

    @abstractmethod
    async def claim(self, room_id: int, user_id: int) -> bool:
        """
        Try to claim a room for a pending write.

        Returns:
            True if admitted (proceed to DB)
            False if another request holds the claim
        """
        pass

    @abstractmethod
    async def release(self, room_id: int, user_id: int):
        """Drop a claim held by this user (on write failure)."""
        pass
