"""
Admission strategy factory.
Configures which room admission strategy the booking service uses.
"""

from typing import Optional

from app.services.interfaces.admission import RoomAdmission
from app.services.interfaces.optimistic_admission import OptimisticAdmission
from app.services.admission_service import RedisAdmission
from app.core.config import get_settings


def get_admission_strategy() -> RoomAdmission:
    """
    Build the configured admission strategy.

    ADMISSION_STRATEGY=redis  -> RedisAdmission (claim rooms in Redis first)
    anything else            -> OptimisticAdmission (DB constraint only)
    """
    strategy = get_settings().ADMISSION_STRATEGY

    if strategy == 'redis':
        return RedisAdmission()
    return OptimisticAdmission()


# Singleton instance
_strategy: Optional[RoomAdmission] = None


def get_admission() -> RoomAdmission:
    """Get admission strategy singleton."""
    global _strategy
    if _strategy is None:
        _strategy = get_admission_strategy()
    return _strategy


def reset_admission() -> None:
    global _strategy
    _strategy = None
