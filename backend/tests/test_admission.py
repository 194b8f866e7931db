"""
Tests for the room admission strategies and the strategy factory.
Redis is replaced by a mock client; no server is needed.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.config import get_settings
from app.services import strategy_factory
from app.services.admission_service import RedisAdmission
from app.services.interfaces.optimistic_admission import OptimisticAdmission


@pytest.fixture
def redis_mock() -> MagicMock:
    client = MagicMock()
    client.set = AsyncMock(return_value=True)
    client.get = AsyncMock(return_value=None)
    client.register_script.return_value = AsyncMock(return_value=1)
    return client


@pytest.mark.asyncio
async def test_optimistic_admits_everything():
    admission = OptimisticAdmission()
    assert await admission.claim(1, 1) is True
    assert await admission.release(1, 1) is None


@pytest.mark.asyncio
async def test_first_claim_is_admitted(redis_mock):
    admission = RedisAdmission(client=redis_mock, ttl_seconds=15)

    assert await admission.claim(7, 42) is True
    redis_mock.set.assert_awaited_once_with("room:claim:7", "42", nx=True, ex=15)


@pytest.mark.asyncio
async def test_claim_held_by_other_user_is_rejected(redis_mock):
    redis_mock.set.return_value = None
    redis_mock.get.return_value = "99"
    admission = RedisAdmission(client=redis_mock, ttl_seconds=15)

    assert await admission.claim(7, 42) is False


@pytest.mark.asyncio
async def test_claim_held_by_same_user_is_admitted(redis_mock):
    redis_mock.set.return_value = None
    redis_mock.get.return_value = "42"
    admission = RedisAdmission(client=redis_mock, ttl_seconds=15)

    assert await admission.claim(7, 42) is True


@pytest.mark.asyncio
async def test_redis_failure_fails_open(redis_mock):
    redis_mock.set.side_effect = RedisConnectionError("connection refused")
    admission = RedisAdmission(client=redis_mock, ttl_seconds=15)

    assert await admission.claim(7, 42) is True


@pytest.mark.asyncio
async def test_release_only_deletes_own_claim(redis_mock):
    admission = RedisAdmission(client=redis_mock, ttl_seconds=15)

    await admission.release(7, 42)

    redis_mock.register_script.return_value.assert_awaited_once_with(
        keys=["room:claim:7"], args=["42"]
    )


@pytest.mark.asyncio
async def test_release_swallows_redis_errors(redis_mock):
    redis_mock.register_script.return_value.side_effect = RedisConnectionError("gone")
    admission = RedisAdmission(client=redis_mock, ttl_seconds=15)

    await admission.release(7, 42)


@pytest.fixture
def fresh_strategy():
    strategy_factory.reset_admission()
    yield
    strategy_factory.reset_admission()


def test_factory_defaults_to_optimistic(fresh_strategy, monkeypatch):
    monkeypatch.setattr(get_settings(), "ADMISSION_STRATEGY", "optimistic")
    assert isinstance(strategy_factory.get_admission(), OptimisticAdmission)


def test_factory_builds_redis_strategy(fresh_strategy, monkeypatch, redis_mock):
    monkeypatch.setattr(get_settings(), "ADMISSION_STRATEGY", "redis")
    monkeypatch.setattr("app.services.admission_service.get_redis", lambda: redis_mock)

    admission = strategy_factory.get_admission()

    assert isinstance(admission, RedisAdmission)
    assert admission.redis is redis_mock
    assert strategy_factory.get_admission() is admission
