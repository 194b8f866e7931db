"""
Redis-backed room admission gate.
Implements RoomAdmission with a short-lived claim key per room.

Circuit Breaker Pattern:
  On Redis failure the gate "fails open" (admits the request).
  The unique constraint on bookings.room_id remains authoritative, so a
  Redis outage degrades to optimistic behaviour instead of blocking
  every booking.
"""

from typing import Optional

import redis.asyncio as redis

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_admission, redis_connection_errors
from app.infrastructure.redis_client import get_redis
from app.services.interfaces.admission import RoomAdmission

logger = get_logger(__name__)

# Delete the claim only if this user still owns it
RELEASE_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


def _claim_key(room_id: int) -> str:
    return f"room:claim:{room_id}"


class RedisAdmission(RoomAdmission):
    """
    Claim = SET room:claim:{id} {user_id} NX EX ttl.

    The claim is not released after a successful write: by the time it
    expires the booking row is committed and the availability check takes
    over. Claims are released early when the write fails, and on a room
    change the claim on the vacated room is dropped.
    """

    def __init__(self, client: Optional[redis.Redis] = None, ttl_seconds: Optional[int] = None):
        self.redis = client if client is not None else get_redis()
        self.ttl = ttl_seconds or get_settings().ROOM_CLAIM_TTL_SECONDS
        self.release_script = self.redis.register_script(RELEASE_SCRIPT)

    async def claim(self, room_id: int, user_id: int) -> bool:
        key = _claim_key(room_id)
        try:
            admitted = await self.redis.set(key, str(user_id), nx=True, ex=self.ttl)
            if not admitted:
                # Same user retrying holds the claim already
                admitted = await self.redis.get(key) == str(user_id)
        except Exception as e:
            redis_connection_errors.inc()
            logger.warning("room_admission_fail_open", room_id=room_id, error=str(e))
            admitted = True

        record_admission(bool(admitted))
        return bool(admitted)

    async def release(self, room_id: int, user_id: int):
        try:
            await self.release_script(keys=[_claim_key(room_id)], args=[str(user_id)])
        except Exception as e:
            redis_connection_errors.inc()
            logger.warning("room_release_failed", room_id=room_id, error=str(e))
