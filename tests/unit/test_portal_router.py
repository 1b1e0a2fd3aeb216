"""门户 HTTP 接口测试（httpx.ASGITransport，不触发 lifespan）。"""

import threading

import httpx
import pytest

from main import app
from result_portal.modules.countdown.application.engine import CountdownEngine
from result_portal.modules.feed.domain.entities import UNAVAILABLE_NOTICE
from result_portal.modules.feed.domain.exceptions import ProtocolError
from result_portal.modules.feed.infrastructure.http_client import HttpLinkFeedClient
from result_portal.modules.portal.application import dependencies as portal_app_deps
from result_portal.modules.portal.application.controller import AppController
from result_portal.modules.portal.application.models import (
    SHARE_UNSUPPORTED_MESSAGE,
    SharePayload,
)
from result_portal.modules.selection.infrastructure.stores import InMemorySelectionStore
from tests.conftest import StubFeedClient

pytestmark = pytest.mark.anyio


class ThreadRecordingStore(InMemorySelectionStore):
    """记录每次存储调用所在的线程。"""

    def __init__(self) -> None:
        super().__init__()
        self.thread_ids: list[int] = []

    def get(self) -> int | None:
        self.thread_ids.append(threading.get_ident())
        return super().get()

    def set(self, link_id: int) -> None:
        self.thread_ids.append(threading.get_ident())
        super().set(link_id)

    def health_check(self):
        self.thread_ids.append(threading.get_ident())
        return super().health_check()


def _controller(fake_clock, feed=None, error=None) -> AppController:
    return AppController(
        feed_client=StubFeedClient(feed=feed, error=error),
        selection_store=ThreadRecordingStore(),
        engine=CountdownEngine(clock=fake_clock, period_sec=0.01),
        share_payload=SharePayload(
            title="Results", text="Check your results", url="https://portal.example"
        ),
    )


@pytest.fixture
async def ready_controller(fake_clock, sample_feed_payload):
    controller = _controller(
        fake_clock, feed=HttpLinkFeedClient.parse_payload(sample_feed_payload)
    )
    await controller.start()
    yield controller
    controller.close()


@pytest.fixture
async def failed_controller(fake_clock):
    controller = _controller(fake_clock, error=ProtocolError.from_status(500))
    await controller.start()
    yield controller
    controller.close()


def _override(controller: AppController):
    original = app.dependency_overrides.get(portal_app_deps.get_app_controller)
    app.dependency_overrides[portal_app_deps.get_app_controller] = lambda: controller
    return original


def _restore(original) -> None:
    app.dependency_overrides[portal_app_deps.get_app_controller] = original


@pytest.fixture
async def client(ready_controller):
    original = _override(ready_controller)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    _restore(original)


@pytest.fixture
async def failed_client(failed_controller):
    original = _override(failed_controller)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    _restore(original)


class TestPortalView:
    async def test_ready_view(self, client):
        response = await client.get("/api/v1/portal")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phase"] == "ready"
        assert data["countdown"]["kind"] == "pending"
        assert data["countdown"]["days"] == 2
        assert data["countdown_text"] == "2d 3h 0m 0s"
        assert [link["id"] for link in data["links"]] == [1, 2, 3]
        assert data["links"][0]["available"] is False
        assert data["links"][0]["label"] == "Link 1"
        assert all(link["last_used"] is False for link in data["links"])
        assert data["notification_visible"] is False

    async def test_failed_view(self, failed_client):
        response = await failed_client.get("/api/v1/portal")

        data = response.json()["data"]
        assert data["phase"] == "failed"
        assert "500" in data["error"]
        assert data["countdown"] is None
        assert data["links"] == []


class TestActivateLink:
    async def test_activate_real_link(self, client, ready_controller):
        response = await client.post("/api/v1/portal/links/2/activate")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["navigate_to"] == "https://resultsassam.nic.in"
        assert data["notice"] is None
        assert ready_controller.last_used_id == 2

        view = (await client.get("/api/v1/portal")).json()["data"]
        assert [link["last_used"] for link in view["links"]] == [False, True, False]

    async def test_activate_sentinel_link(self, client, ready_controller):
        response = await client.post("/api/v1/portal/links/1/activate")

        data = response.json()["data"]
        assert data["navigate_to"] is None
        assert data["notice"] == UNAVAILABLE_NOTICE
        assert ready_controller.last_used_id is None

    async def test_activate_unknown_link(self, client):
        response = await client.post("/api/v1/portal/links/42/activate")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestNotificationAndShare:
    async def test_toggle_notification(self, client, sample_feed_payload):
        first = (await client.post("/api/v1/portal/notification/toggle")).json()["data"]
        second = (await client.post("/api/v1/portal/notification/toggle")).json()["data"]

        assert first == {"visible": True, "text": sample_feed_payload["notificationDate"]}
        assert second == {"visible": False, "text": None}

    async def test_share_supported(self, client):
        data = (await client.get("/api/v1/portal/share")).json()["data"]

        assert data["supported"] is True
        assert data["url"] == "https://portal.example"
        assert data["message"] is None

    async def test_share_unsupported(self, client):
        response = await client.get("/api/v1/portal/share", params={"supported": "false"})

        data = response.json()["data"]
        assert data["supported"] is False
        assert data["message"] == SHARE_UNSUPPORTED_MESSAGE


class TestReloadAndHealth:
    async def test_reload_recovers(self, failed_client, failed_controller, sample_feed_payload):
        failed_controller.feed_client.error = None
        failed_controller.feed_client.feed = HttpLinkFeedClient.parse_payload(
            sample_feed_payload
        )

        response = await failed_client.post("/api/v1/portal/reload")

        assert response.json()["data"]["phase"] == "ready"
        assert failed_controller.feed_client.calls == 2

    async def test_health_ready(self, client):
        data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["components"]["feed"]["phase"] == "ready"
        assert data["components"]["selection_store"]["backend"] == "memory"
        assert data["countdown_running"] is True

    async def test_health_failed(self, failed_client):
        data = (await failed_client.get("/health")).json()

        assert data["status"] == "unhealthy"
        assert data["components"]["feed"]["phase"] == "failed"
        assert data["countdown_running"] is False


class TestStoreOffEventLoop:
    async def test_store_calls_run_in_worker_threads(self, client, ready_controller):
        loop_thread = threading.get_ident()
        store = ready_controller.selection_store

        await client.get("/api/v1/portal")
        await client.post("/api/v1/portal/links/2/activate")
        await client.get("/health")

        assert len(store.thread_ids) >= 3
        assert loop_thread not in store.thread_ids
