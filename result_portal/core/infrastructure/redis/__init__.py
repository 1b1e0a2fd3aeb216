"""Redis 客户端封装。"""

from result_portal.core.infrastructure.redis.client import RedisClient
from result_portal.core.infrastructure.redis.keys import RedisKeys

__all__ = [
    "RedisClient",
    "RedisKeys",
]
