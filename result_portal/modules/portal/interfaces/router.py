"""Portal API routes."""

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from result_portal.core.interfaces.http.response import ApiResponse
from result_portal.modules.countdown.domain.state import CountdownState, Pending
from result_portal.modules.portal.application.controller import AppController
from result_portal.modules.portal.application.dependencies import get_app_controller
from result_portal.modules.portal.application.models import PortalView
from result_portal.modules.portal.interfaces.schemas import (
    CountdownResponse,
    LinkActivationResponse,
    LinkResponse,
    NotificationResponse,
    PortalViewResponse,
    ShareResponse,
)

router = APIRouter(prefix="/portal", tags=["portal"])


def _to_countdown_response(state: CountdownState | None) -> CountdownResponse | None:
    if state is None:
        return None
    if isinstance(state, Pending):
        return CountdownResponse(
            kind=state.kind,
            text=state.text,
            days=state.days,
            hours=state.hours,
            minutes=state.minutes,
            seconds=state.seconds,
        )
    return CountdownResponse(kind=state.kind, text=state.text)


def _to_view_response(view: PortalView) -> PortalViewResponse:
    return PortalViewResponse(
        phase=view.phase.value,
        error=view.error,
        countdown=_to_countdown_response(view.countdown),
        countdown_text=view.countdown_text,
        target_instant=view.target_instant,
        notification_text=view.notification_text,
        notification_visible=view.notification_visible,
        links=[
            LinkResponse(
                id=link.id,
                label=link.label,
                url=link.url,
                status=link.status,
                available=link.available,
                last_used=link.last_used,
            )
            for link in view.links
        ],
    )


@router.get("", response_model=ApiResponse[PortalViewResponse])
async def get_portal(
    controller: AppController = Depends(get_app_controller),
) -> ApiResponse[PortalViewResponse]:
    """Current phase, countdown, notification and links."""
    # selection store reads can block (file or Redis I/O)
    view = await run_in_threadpool(controller.view)
    return ApiResponse.success(data=_to_view_response(view))


@router.post(
    "/links/{link_id}/activate",
    response_model=ApiResponse[LinkActivationResponse],
)
async def activate_link(
    link_id: int,
    controller: AppController = Depends(get_app_controller),
) -> ApiResponse[LinkActivationResponse]:
    """Record a link click. Unavailable links return a notice instead of a URL."""
    activation = await run_in_threadpool(controller.activate_link, link_id)
    return ApiResponse.success(
        data=LinkActivationResponse(
            link_id=activation.link_id,
            navigate_to=activation.navigate_to,
            notice=activation.notice,
        )
    )


@router.post("/notification/toggle", response_model=ApiResponse[NotificationResponse])
async def toggle_notification(
    controller: AppController = Depends(get_app_controller),
) -> ApiResponse[NotificationResponse]:
    visible = controller.toggle_notification()
    return ApiResponse.success(
        data=NotificationResponse(
            visible=visible,
            text=controller.notification_text if visible else None,
        )
    )


@router.get("/share", response_model=ApiResponse[ShareResponse])
async def get_share(
    supported: bool = Query(True, description="客户端是否支持系统分享"),
    controller: AppController = Depends(get_app_controller),
) -> ApiResponse[ShareResponse]:
    outcome = controller.share_payload(supported=supported)
    if outcome.payload is None:
        return ApiResponse.success(
            data=ShareResponse(supported=False, message=outcome.message)
        )
    return ApiResponse.success(
        data=ShareResponse(
            supported=True,
            title=outcome.payload.title,
            text=outcome.payload.text,
            url=outcome.payload.url,
        )
    )


@router.post("/reload", response_model=ApiResponse[PortalViewResponse])
async def reload_feed(
    controller: AppController = Depends(get_app_controller),
) -> ApiResponse[PortalViewResponse]:
    """Explicitly fetch the feed again."""
    await controller.reload()
    view = await run_in_threadpool(controller.view)
    return ApiResponse.success(data=_to_view_response(view))
