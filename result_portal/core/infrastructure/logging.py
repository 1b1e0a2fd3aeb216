"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志（feed 加载、倒计时结束、链接点击等）
"""

import sys
from typing import Any

import structlog
from loguru import logger

from result_portal.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/result_portal_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="14 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    Usage:
        from result_portal.core.infrastructure.logging import BusinessEvents

        BusinessEvents.feed_loaded(url="...", link_count=5, target_instant="...")
        BusinessEvents.link_activated(link_id=2, url="https://...")
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def feed_loaded(
        cls,
        url: str,
        link_count: int,
        target_instant: str | None,
        **extra: Any,
    ) -> None:
        """记录 feed 加载成功事件。"""
        cls._log.info(
            "feed_loaded",
            event_type="feed",
            url=url,
            link_count=link_count,
            target_instant=target_instant,
            **extra,
        )

    @classmethod
    def feed_failed(
        cls,
        url: str,
        error: str,
        error_code: str,
        **extra: Any,
    ) -> None:
        """记录 feed 加载失败事件。"""
        cls._log.warning(
            "feed_failed",
            event_type="feed_error",
            url=url,
            error=error,
            error_code=error_code,
            **extra,
        )

    @classmethod
    def countdown_expired(cls, target_instant: str, **extra: Any) -> None:
        """记录倒计时结束事件。"""
        cls._log.info(
            "countdown_expired",
            event_type="countdown",
            target_instant=target_instant,
            **extra,
        )

    @classmethod
    def link_activated(cls, link_id: int, url: str, **extra: Any) -> None:
        """记录结果链接点击事件。"""
        cls._log.info(
            "link_activated",
            event_type="click",
            link_id=link_id,
            url=url,
            **extra,
        )

    @classmethod
    def link_unavailable(cls, link_id: int, status: str, **extra: Any) -> None:
        """记录点击了尚未开放的链接。"""
        cls._log.info(
            "link_unavailable",
            event_type="click",
            link_id=link_id,
            status=status,
            **extra,
        )

    @classmethod
    def selection_store_degraded(
        cls,
        backend: str,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录 last-used 存储降级事件。"""
        cls._log.warning(
            "selection_store_degraded",
            event_type="degradation",
            backend=backend,
            reason=reason,
            **extra,
        )
