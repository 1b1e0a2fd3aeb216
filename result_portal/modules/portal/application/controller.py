"""结果门户编排器。

职责：
- 启动时拉取一次 feed（LOADING → READY | FAILED）
- feed 加载成功后驱动倒计时
- 处理链接点击（占位链接拦截、记录 last used）
- 通知显隐与分享内容
"""

from loguru import logger

from result_portal.core.config import settings
from result_portal.core.infrastructure.logging import BusinessEvents
from result_portal.modules.countdown.application.engine import (
    CountdownEngine,
    CountdownHandle,
)
from result_portal.modules.countdown.domain.state import CountdownState, TargetInstant
from result_portal.modules.feed.domain.client import LinkFeedClient
from result_portal.modules.feed.domain.entities import (
    UNAVAILABLE_NOTICE,
    ResultFeed,
    ResultLink,
)
from result_portal.modules.feed.domain.exceptions import FeedError
from result_portal.modules.portal.application.models import (
    SHARE_UNSUPPORTED_MESSAGE,
    AppPhase,
    LinkActivation,
    LinkView,
    PortalView,
    ShareOutcome,
    SharePayload,
)
from result_portal.modules.portal.domain.exceptions import LinkNotFoundError
from result_portal.modules.selection.domain.store import SelectionStore


class AppController:
    """Orchestrates feed loading, the countdown and link selection."""

    def __init__(
        self,
        feed_client: LinkFeedClient,
        selection_store: SelectionStore,
        engine: CountdownEngine | None = None,
        share_payload: SharePayload | None = None,
    ):
        self.feed_client = feed_client
        self.selection_store = selection_store
        self.engine = engine or CountdownEngine()
        self._share_payload = share_payload or SharePayload(
            title=settings.SHARE_TITLE,
            text=settings.SHARE_TEXT,
            url=settings.SHARE_URL or settings.FRONTEND_HOST,
        )

        self.phase = AppPhase.LOADING
        self.error: str | None = None
        self.feed: ResultFeed | None = None
        self.target = TargetInstant.unset()
        self.countdown: CountdownState | None = None
        self.notification_visible = False

        self._started = False
        self._handle: CountdownHandle | None = None

    # ============ 生命周期 ============

    async def start(self) -> None:
        """Fetch the feed once. Later calls are no-ops; use ``reload`` explicitly."""
        if self._started:
            return
        self._started = True
        await self._load()

    async def reload(self) -> None:
        """Explicit re-fetch requested by the user or caller."""
        self.close()
        self.phase = AppPhase.LOADING
        self.error = None
        self.countdown = None
        self.feed = None
        self.target = TargetInstant.unset()
        self._started = True
        await self._load()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def _load(self) -> None:
        url = getattr(self.feed_client, "url", "")
        try:
            feed = await self.feed_client.fetch()
        except FeedError as exc:
            self.phase = AppPhase.FAILED
            self.error = exc.message
            self.feed = None
            self.target = TargetInstant.unset()
            BusinessEvents.feed_failed(url=url, error=exc.message, error_code=exc.error_code)
            logger.warning(f"Feed load failed: {exc.message}")
            return

        self.feed = feed
        self.target = feed.target
        self.phase = AppPhase.READY
        BusinessEvents.feed_loaded(
            url=url,
            link_count=len(feed.links),
            target_instant=self.target.isoformat(),
        )
        self._handle = self.engine.start(self.target, self._on_tick)

    def _on_tick(self, state: CountdownState) -> None:
        self.countdown = state

    # ============ 链接 ============

    @property
    def links(self) -> tuple[ResultLink, ...]:
        return self.feed.links if self.feed is not None else ()

    @property
    def last_used_id(self) -> int | None:
        return self.selection_store.get()

    def is_last_used(self, link: ResultLink) -> bool:
        return self.last_used_id == link.id

    def activate_link(self, link_id: int) -> LinkActivation:
        """Handle a click on a result link.

        Sentinel links short-circuit: no navigation and no store write.
        """
        if self.phase != AppPhase.READY or self.feed is None:
            raise LinkNotFoundError(link_id)

        link = self.feed.find_link(link_id)
        if link is None:
            raise LinkNotFoundError(link_id)

        if not link.is_available:
            BusinessEvents.link_unavailable(link_id=link.id, status=link.status)
            return LinkActivation(link_id=link.id, notice=UNAVAILABLE_NOTICE)

        self.selection_store.set(link.id)
        BusinessEvents.link_activated(link_id=link.id, url=link.url)
        return LinkActivation(link_id=link.id, navigate_to=link.url)

    # ============ 通知与分享 ============

    @property
    def notification_text(self) -> str | None:
        return self.feed.notification_text if self.feed is not None else None

    def toggle_notification(self) -> bool:
        self.notification_visible = not self.notification_visible
        return self.show_notification

    @property
    def show_notification(self) -> bool:
        return self.notification_visible and bool(self.notification_text)

    def share_payload(self, supported: bool = True) -> ShareOutcome:
        if not supported:
            return ShareOutcome(message=SHARE_UNSUPPORTED_MESSAGE)
        return ShareOutcome(payload=self._share_payload)

    # ============ 展示 ============

    @property
    def countdown_text(self) -> str:
        return self.countdown.text if self.countdown is not None else ""

    def view(self) -> PortalView:
        last_used = self.last_used_id
        return PortalView(
            phase=self.phase,
            error=self.error,
            countdown=self.countdown,
            countdown_text=self.countdown_text,
            target_instant=self.target.isoformat(),
            notification_text=self.notification_text,
            notification_visible=self.show_notification,
            links=[
                LinkView(
                    id=link.id,
                    label=link.label,
                    url=link.url,
                    status=link.status,
                    available=link.is_available,
                    last_used=link.id == last_used,
                )
                for link in self.links
            ],
        )
