"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    # 配置 structlog
    _configure_structlog()

    # 配置 loguru
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    # 根据环境选择渲染器
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

    # Add file handler for production
    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/projects_api_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
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
        from src.core.infrastructure.logging import BusinessEvents

        BusinessEvents.cache_refreshed(project_count=42, duration_ms=1800)
        BusinessEvents.documentation_added(project_slug="spring-boot", version="3.2.0")
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def cache_refreshed(
        cls,
        project_count: int,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录项目缓存刷新成功事件。"""
        cls._log.info(
            "cache_refreshed",
            event_type="cache",
            project_count=project_count,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def cache_refresh_failed(
        cls,
        error: str,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录项目缓存刷新失败事件（旧快照保持不变）。"""
        cls._log.warning(
            "cache_refresh_failed",
            event_type="cache_error",
            error=error,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def documentation_added(
        cls,
        project_slug: str,
        version: str,
        current_version: str | None = None,
        **extra: Any,
    ) -> None:
        """记录发布文档新增事件。"""
        cls._log.info(
            "documentation_added",
            event_type="documentation",
            project_slug=project_slug,
            version=version,
            current_version=current_version,
            **extra,
        )

    @classmethod
    def documentation_deleted(
        cls,
        project_slug: str,
        version: str,
        current_version: str | None = None,
        **extra: Any,
    ) -> None:
        """记录发布文档删除事件。"""
        cls._log.info(
            "documentation_deleted",
            event_type="documentation",
            project_slug=project_slug,
            version=version,
            current_version=current_version,
            **extra,
        )

    @classmethod
    def rate_limit_backoff(
        cls,
        operation: str,
        reset_sec: float,
        attempt: int,
        elapsed_sec: float,
        **extra: Any,
    ) -> None:
        """记录 Contentful 限流等待事件。"""
        cls._log.warning(
            "rate_limit_backoff",
            event_type="rate_limit",
            operation=operation,
            reset_sec=reset_sec,
            attempt=attempt,
            elapsed_sec=round(elapsed_sec, 3),
            **extra,
        )
