"""Project API routes."""

import asyncio

from fastapi import APIRouter, Depends, Header, status
from loguru import logger

from src.core.interfaces.http.response import ApiResponse
from src.modules.projects.application.cache import ProjectCache
from src.modules.projects.application.commands import (
    AddProjectDocumentationCommand,
    DeleteProjectDocumentationCommand,
)
from src.modules.projects.application.dependencies import (
    get_add_documentation_handler,
    get_delete_documentation_handler,
    get_project_cache,
)
from src.modules.projects.application.handlers import (
    AddProjectDocumentationHandler,
    DeleteProjectDocumentationHandler,
)
from src.modules.projects.domain.entities import (
    Project,
    ProjectDocumentation,
    ProjectSupport,
)
from src.modules.projects.domain.entities import (
    ReleaseStatus as DomainReleaseStatus,
)
from src.modules.projects.interfaces.schemas import (
    AddReleaseRequest,
    CacheRefreshResponse,
    GenerationResponse,
    ProjectResponse,
    ProjectStatus,
    ReleaseResponse,
    ReleaseStatus,
    SupportPolicyResponse,
)
from src.modules.projects.interfaces.security import (
    require_admin,
    verify_webhook_signature,
)

router = APIRouter(prefix="/projects", tags=["projects"])
cache_router = APIRouter(tags=["cache"])

# 缓存本身不对 refresh 做互斥，由宿主保证同一时间只有一个刷新
_refresh_lock = asyncio.Lock()


def _to_project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        slug=project.slug,
        name=project.name,
        repository_url=project.repository_url,
        status=ProjectStatus(project.status.value),
    )


def _to_release_response(documentation: ProjectDocumentation) -> ReleaseResponse:
    return ReleaseResponse(
        version=documentation.version,
        api_doc_url=documentation.api_doc_url,
        ref_doc_url=documentation.ref_doc_url,
        status=ReleaseStatus(documentation.status.value),
        current=documentation.current,
    )


def _to_generation_response(support: ProjectSupport) -> GenerationResponse:
    return GenerationResponse(
        branch=support.branch,
        initial_date=support.initial_date,
        oss_support_end_date=support.oss_support_end_date,
        commercial_support_end_date=support.commercial_support_end_date,
    )


@router.get(
    "",
    response_model=ApiResponse[list[ProjectResponse]],
    summary="获取项目列表",
)
async def list_projects(
    cache: ProjectCache = Depends(get_project_cache),
) -> ApiResponse[list[ProjectResponse]]:
    """List all projects."""
    return ApiResponse.success(
        data=[_to_project_response(project) for project in cache.get_projects()]
    )


@router.get(
    "/{slug}",
    response_model=ApiResponse[ProjectResponse],
    summary="获取项目详情",
)
async def get_project(
    slug: str,
    cache: ProjectCache = Depends(get_project_cache),
) -> ApiResponse[ProjectResponse]:
    """Get a single project."""
    return ApiResponse.success(data=_to_project_response(cache.get_project(slug)))


@router.get(
    "/{slug}/releases",
    response_model=ApiResponse[list[ReleaseResponse]],
    summary="获取项目发布文档列表",
)
async def list_releases(
    slug: str,
    cache: ProjectCache = Depends(get_project_cache),
) -> ApiResponse[list[ReleaseResponse]]:
    """List documentation releases of a project."""
    return ApiResponse.success(
        data=[
            _to_release_response(documentation)
            for documentation in cache.get_project_documentations(slug)
        ]
    )


@router.get(
    "/{slug}/releases/current",
    response_model=ApiResponse[ReleaseResponse],
    summary="获取项目当前版本",
)
async def get_current_release(
    slug: str,
    cache: ProjectCache = Depends(get_project_cache),
) -> ApiResponse[ReleaseResponse]:
    """Get the current (latest GA) release of a project."""
    return ApiResponse.success(
        data=_to_release_response(cache.get_current_documentation(slug))
    )


@router.get(
    "/{slug}/generations",
    response_model=ApiResponse[list[GenerationResponse]],
    summary="获取项目支持周期",
)
async def list_generations(
    slug: str,
    cache: ProjectCache = Depends(get_project_cache),
) -> ApiResponse[list[GenerationResponse]]:
    """List support windows of a project."""
    return ApiResponse.success(
        data=[
            _to_generation_response(support)
            for support in cache.get_project_supports(slug)
        ]
    )


@router.get(
    "/{slug}/support-policy",
    response_model=ApiResponse[SupportPolicyResponse],
    summary="获取项目支持策略",
)
async def get_support_policy(
    slug: str,
    cache: ProjectCache = Depends(get_project_cache),
) -> ApiResponse[SupportPolicyResponse]:
    """Get the support policy of a project."""
    return ApiResponse.success(
        data=SupportPolicyResponse(
            slug=slug, support_policy=cache.get_project_support_policy(slug)
        )
    )


@router.post(
    "/{slug}/releases",
    response_model=ApiResponse[None],
    status_code=status.HTTP_201_CREATED,
    summary="新增发布文档",
)
async def add_release(
    slug: str,
    request: AddReleaseRequest,
    _admin: str = Depends(require_admin),
    handler: AddProjectDocumentationHandler = Depends(get_add_documentation_handler),
) -> ApiResponse[None]:
    """Add a documentation release; the current release is recomputed."""
    command = AddProjectDocumentationCommand(
        project_slug=slug,
        documentation=ProjectDocumentation(
            version=request.version,
            api_doc_url=request.api_doc_url,
            ref_doc_url=request.ref_doc_url,
            status=DomainReleaseStatus(request.status.value),
        ),
    )
    await handler.handle(command)
    return ApiResponse.success(message="Release added", code=status.HTTP_201_CREATED)


@router.delete(
    "/{slug}/releases/{version}",
    response_model=ApiResponse[None],
    summary="删除发布文档",
)
async def delete_release(
    slug: str,
    version: str,
    _admin: str = Depends(require_admin),
    handler: DeleteProjectDocumentationHandler = Depends(
        get_delete_documentation_handler
    ),
) -> ApiResponse[None]:
    """Delete a documentation release; the current release is recomputed."""
    await handler.handle(
        DeleteProjectDocumentationCommand(project_slug=slug, version=version)
    )
    return ApiResponse.success(message="Release deleted")


@cache_router.post(
    "/refresh_cache",
    response_model=ApiResponse[CacheRefreshResponse],
    dependencies=[Depends(verify_webhook_signature)],
    summary="刷新项目缓存",
)
async def refresh_cache(
    x_github_event: str | None = Header(default=None),
    cache: ProjectCache = Depends(get_project_cache),
) -> ApiResponse[CacheRefreshResponse]:
    """Reload all project data (GitHub webhook or operator trigger)."""
    if x_github_event == "ping":
        return ApiResponse.success(message="pong")

    async with _refresh_lock:
        logger.info("Refreshing project cache")
        snapshot = await cache.refresh()
    return ApiResponse.success(
        data=CacheRefreshResponse(
            project_count=len(snapshot), loaded_at=snapshot.loaded_at
        ),
        message="Cache refreshed",
    )
