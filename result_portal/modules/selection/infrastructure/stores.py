"""Selection store backends.

- InMemorySelectionStore: 进程内存（测试/临时运行）
- JsonFileSelectionStore: 本地 JSON 文件（默认，重启后保留）
- RedisSelectionStore: Redis 单 key

存储失败只记录降级日志，不向调用方抛出：last-used 仅用于高亮展示。
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import redis
from loguru import logger

from result_portal.core.infrastructure.health import HealthStatus, StoreHealthResult
from result_portal.core.infrastructure.logging import BusinessEvents
from result_portal.core.infrastructure.redis import RedisClient, RedisKeys
from result_portal.modules.selection.domain.store import (
    LAST_USED_KEY,
    decode_link_id,
    encode_link_id,
)


class InMemorySelectionStore:
    backend = "memory"

    def __init__(self) -> None:
        self._value: str | None = None

    def get(self) -> int | None:
        return decode_link_id(self._value)

    def set(self, link_id: int) -> None:
        self._value = encode_link_id(link_id)

    def health_check(self) -> StoreHealthResult:
        return StoreHealthResult(status=HealthStatus.OK, backend=self.backend)


class JsonFileSelectionStore:
    """Key-value JSON object on disk; the selection lives under ``lastUsedPortal``."""

    backend = "file"

    def __init__(self, path: Path, key: str = LAST_USED_KEY) -> None:
        self.path = path
        self.key = key

    def get(self) -> int | None:
        raw = self._load().get(self.key)
        value = decode_link_id(raw if isinstance(raw, str) else None)
        if raw is not None and value is None:
            logger.warning(f"Ignoring unreadable selection value {raw!r} in {self.path}")
        return value

    def set(self, link_id: int) -> None:
        data = self._load()
        data[self.key] = encode_link_id(link_id)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            BusinessEvents.selection_store_degraded(backend=self.backend, reason=str(exc))
            logger.warning(f"Failed to persist selection to {self.path}: {exc}")

    def health_check(self) -> StoreHealthResult:
        directory = self.path.parent
        if directory.exists() and not os.access(directory, os.W_OK):
            return StoreHealthResult(
                status=HealthStatus.ERROR,
                backend=self.backend,
                error=f"{directory} is not writable",
            )
        return StoreHealthResult(status=HealthStatus.OK, backend=self.backend)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            # Corrupt store reads as empty
            logger.warning(f"Selection store {self.path} unreadable: {exc}")
            return {}
        if not isinstance(raw, dict):
            return {}
        return raw


class RedisSelectionStore:
    backend = "redis"

    def __init__(self, client: RedisClient, key: str = LAST_USED_KEY) -> None:
        self.client = client
        self.redis_key = RedisKeys.selection(key)

    def get(self) -> int | None:
        try:
            raw = self.client.get(self.redis_key)
        except redis.RedisError as exc:
            BusinessEvents.selection_store_degraded(backend=self.backend, reason=str(exc))
            return None
        return decode_link_id(raw)

    def set(self, link_id: int) -> None:
        try:
            self.client.set(self.redis_key, encode_link_id(link_id))
        except redis.RedisError as exc:
            BusinessEvents.selection_store_degraded(backend=self.backend, reason=str(exc))
            logger.warning(f"Failed to persist selection to Redis: {exc}")

    def health_check(self) -> StoreHealthResult:
        result = self.client.health_check()
        return StoreHealthResult(
            status=result.status,
            backend=self.backend,
            error=result.error,
        )

    def close(self) -> None:
        self.client.close()
