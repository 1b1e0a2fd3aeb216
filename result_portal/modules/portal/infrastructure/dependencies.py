"""Portal module infrastructure wiring."""

from fastapi import Request

from result_portal.core.config import Settings, settings
from result_portal.modules.countdown.application.engine import CountdownEngine
from result_portal.modules.feed.infrastructure.http_client import HttpLinkFeedClient
from result_portal.modules.portal.application.controller import AppController
from result_portal.modules.selection.infrastructure.factory import build_selection_store


def build_app_controller(config: Settings | None = None) -> AppController:
    config = config or settings
    return AppController(
        feed_client=HttpLinkFeedClient(
            url=config.RESULT_LINKS_URL,
            timeout_sec=config.FEED_TIMEOUT_SEC,
        ),
        selection_store=build_selection_store(config),
        engine=CountdownEngine(period_sec=config.COUNTDOWN_TICK_SEC),
    )


async def get_app_controller(request: Request) -> AppController:
    return request.app.state.controller
