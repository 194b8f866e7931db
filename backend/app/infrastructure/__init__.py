"""
Infrastructure layer - storage and Redis integrations behind the
service interfaces.
"""

from .redis_client import get_redis, RedisClient
from .memory_repositories import InMemoryStore

__all__ = ['get_redis', 'RedisClient', 'InMemoryStore']
