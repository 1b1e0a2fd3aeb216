"""Redis 客户端封装。

Selection store 在设计上是同步存储，这里使用 redis-py 的同步客户端。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import redis
from loguru import logger

if TYPE_CHECKING:
    from redis import Redis

from result_portal.core.config import settings
from result_portal.core.infrastructure.health import HealthStatus, RedisHealthResult


class RedisClient:
    """Redis 客户端封装类。"""

    def __init__(self, url: str | None = None):
        """初始化 Redis 客户端。

        Args:
            url: Redis 连接 URL，默认使用配置中的 REDIS_URL
        """
        self._url = url or settings.REDIS_URL
        self._client: Redis | None = None

    @property
    def client(self) -> Redis:
        """获取 Redis 客户端实例（延迟初始化）。"""
        if self._client is None:
            self._client = redis.Redis.from_url(
                self._url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=2.0,
                socket_connect_timeout=2.0,
            )
        return self._client

    def close(self) -> None:
        """关闭 Redis 连接。"""
        if self._client is not None:
            self._client.close()
            self._client = None

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    def health_check(self) -> RedisHealthResult:
        """执行 Redis 健康检查。"""
        try:
            is_connected = self.ping()
            info = self.client.info("server") if is_connected else {}
            return RedisHealthResult(
                status=HealthStatus.OK if is_connected else HealthStatus.ERROR,
                connected=is_connected,
                version=info.get("redis_version", "unknown"),
            )
        except redis.RedisError as e:
            return RedisHealthResult(
                status=HealthStatus.ERROR,
                connected=False,
                error=str(e),
            )

    # ============ 缓存操作 ============

    def get(self, key: str) -> str | None:
        """获取字符串值。"""
        return self.client.get(key)

    def set(self, key: str, value: str) -> bool:
        """设置字符串值（无过期时间）。"""
        return bool(self.client.set(key, value))
