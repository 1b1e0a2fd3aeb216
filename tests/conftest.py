"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务，feed 使用 httpx.MockTransport）

使用方法：
    # 运行所有测试
    uv run pytest

    # 只运行单元测试
    uv run pytest tests/unit/

    # 运行带覆盖率
    uv run pytest --cov=result_portal --cov-report=html
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from result_portal.core.config import Settings
from result_portal.modules.feed.domain.client import LinkFeedClient
from result_portal.modules.feed.domain.entities import ResultFeed
from result_portal.modules.feed.domain.exceptions import FeedError

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    """倒计时引擎依赖 asyncio 事件循环。"""
    return "asyncio"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        RESULT_LINKS_URL="https://results.example.com/links.json",
        COUNTDOWN_TICK_SEC=0.01,
        SELECTION_STORE_BACKEND="file",
        SELECTION_STORE_PATH=tmp_path / "selection.json",
        REDIS_URL="redis://localhost:6379/1",
    )


# ============================================
# 时间控制 Fixtures
# ============================================


BASE_NOW = datetime(2025, 4, 25, 9, 0, 0).astimezone()


class FakeClock:
    """手动推进的时钟；step 不为零时每次读取后自动前进。"""

    def __init__(self, start: datetime = BASE_NOW, step: timedelta | None = None):
        self.current = start
        self.step = step or timedelta(0)
        self.reads = 0

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        self.reads += 1
        return value

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ticking_clock() -> FakeClock:
    """每次采样前进 1 秒。"""
    return FakeClock(step=timedelta(seconds=1))


# ============================================
# Feed Fixtures
# ============================================


@pytest.fixture
def sample_feed_payload() -> dict[str, Any]:
    """示例 feed 数据。"""
    return {
        "resultDate": (BASE_NOW + timedelta(days=2, hours=3)).isoformat(),
        "notificationDate": "Results will be declared on 27 April at 12 noon",
        "links": [
            {"id": 1, "url": "#", "status": "down"},
            {"id": 2, "url": "https://resultsassam.nic.in", "status": "active"},
            {"id": 3, "url": "https://ahsec.assam.gov.in/results", "status": "active"},
        ],
    }


class StubFeedClient(LinkFeedClient):
    """返回固定 feed 或抛出指定错误。"""

    url = "https://results.example.com/links.json"

    def __init__(
        self,
        feed: ResultFeed | None = None,
        error: FeedError | None = None,
    ):
        self.feed = feed
        self.error = error
        self.calls = 0

    async def fetch(self) -> ResultFeed:
        self.calls += 1
        if self.error is not None:
            raise self.error
        assert self.feed is not None
        return self.feed


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """构造返回固定响应的 httpx MockTransport。"""

    def _make(
        status_code: int = 200,
        json: Any = None,
        content: bytes | None = None,
        error: Exception | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if error is not None:
                raise error
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json)

        return httpx.MockTransport(handler)

    return _make


# ============================================
# Redis Fixtures
# ============================================


@pytest.fixture
def mock_redis_client() -> MagicMock:
    """Mock Redis 客户端。"""
    from result_portal.core.infrastructure.redis.client import RedisClient

    client = MagicMock(spec=RedisClient)
    client.get = MagicMock(return_value=None)
    client.set = MagicMock(return_value=True)
    return client
