"""Result Portal Backend - 成绩发布倒计时与结果链接服务入口。"""

from fastapi import Depends, FastAPI
from fastapi.concurrency import asynccontextmanager, run_in_threadpool
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from result_portal.core.config import settings
from result_portal.core.domain.exceptions import DomainException
from result_portal.core.infrastructure.health import HealthStatus
from result_portal.core.infrastructure.logging import setup_logging
from result_portal.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from result_portal.core.interfaces.http.routers import api_router
from result_portal.modules.portal.application import dependencies as portal_app_deps
from result_portal.modules.portal.application.controller import AppController
from result_portal.modules.portal.application.models import AppPhase
from result_portal.modules.portal.infrastructure import (
    dependencies as portal_infra_deps,
)


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting result portal backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    controller = portal_infra_deps.build_app_controller(settings)
    app.state.controller = controller
    await controller.start()
    logger.info(f"Portal phase after startup: {controller.phase}")

    yield

    logger.info("Shutting down result portal backend...")
    controller.close()
    close_store = getattr(controller.selection_store, "close", None)
    if close_store is not None:
        close_store()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="成绩发布倒计时、结果查询链接与最近使用记录",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[portal_app_deps.get_app_controller] = (
    portal_infra_deps.get_app_controller
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check(
    controller: AppController = Depends(portal_app_deps.get_app_controller),
):
    """Health check endpoint.

    - feed: 启动时的加载阶段
    - selection_store: last-used 存储后端
    """
    health_check_fn = getattr(controller.selection_store, "health_check", None)
    store_health = (
        await run_in_threadpool(health_check_fn) if health_check_fn is not None else None
    )

    feed_ok = controller.phase == AppPhase.READY
    store_ok = store_health is None or store_health.status == HealthStatus.OK

    if feed_ok and store_ok:
        overall_status = "healthy"
    elif feed_ok:
        overall_status = "degraded"
    else:
        overall_status = "unhealthy"

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
        "components": {
            "feed": {"phase": controller.phase.value, "error": controller.error},
            "selection_store": store_health.to_dict() if store_health else None,
        },
        "countdown_running": controller.engine.running,
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to result portal API",
        "docs": f"{settings.API_V1_STR}/docs",
    }
