"""projects-api - 项目元数据（发布文档、支持周期、支持策略）服务入口。"""

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.infrastructure.logging import setup_logging
from src.core.interfaces.http.exceptions import register_exception_handlers
from src.core.interfaces.http.routers import api_router
from src.modules.projects.application import dependencies as projects_app_deps
from src.modules.projects.application.cache import ProjectCache
from src.modules.projects.application.snapshot_loader import SnapshotLoader
from src.modules.projects.infrastructure import dependencies as projects_infra_deps
from src.modules.projects.infrastructure.contentful import HttpContentfulClient

APP_VERSION = "0.1.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    The first snapshot is loaded before serving; if it fails start-up fails.
    """
    setup_logging()
    logger.info("Starting projects-api...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    project_source = projects_infra_deps.build_project_source()
    contentful_http_client = HttpContentfulClient()
    try:
        logger.info("Loading project snapshot...")
        app.state.project_cache = await ProjectCache.load(
            SnapshotLoader(project_source)
        )
        app.state.contentful_client = projects_infra_deps.build_contentful_client(
            contentful_http_client
        )

        yield
    finally:
        logger.info("Shutting down projects-api...")
        await project_source.aclose()
        await contentful_http_client.aclose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Project metadata API: releases, support windows and support policies.\n\n"
        "Reads are served from an in-memory snapshot refreshed via `/refresh_cache`; "
        "release administration writes go to Contentful (HTTP Basic admin auth)."
    ),
    version=APP_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[projects_app_deps.get_project_cache] = (
    projects_infra_deps.get_project_cache
)
app.dependency_overrides[projects_app_deps.get_contentful_client] = (
    projects_infra_deps.get_contentful_client
)

# Exception handlers
register_exception_handlers(app)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    报告缓存状态：项目数量与最近一次加载时间。
    """
    cache: ProjectCache | None = getattr(app.state, "project_cache", None)
    if cache is None:
        return {
            "status": "unhealthy",
            "environment": settings.ENVIRONMENT,
            "version": APP_VERSION,
            "components": {"project_cache": {"status": "not_loaded"}},
        }

    snapshot = cache.snapshot
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
        "components": {
            "project_cache": {
                "status": "ok",
                "project_count": len(snapshot),
                "loaded_at": snapshot.loaded_at.isoformat(),
            },
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to projects-api",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
