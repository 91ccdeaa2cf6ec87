"""Project module infrastructure dependencies.

The cache and the Contentful client are process-wide; they are created in
the application lifespan and kept on ``app.state``.
"""

from fastapi import Request

from src.core.domain.exceptions import ServiceUnavailableError
from src.modules.projects.application.cache import ProjectCache
from src.modules.projects.infrastructure.contentful import (
    HttpContentfulClient,
    RetryingContentfulClient,
)
from src.modules.projects.infrastructure.github_source import GithubProjectSource


def build_project_source() -> GithubProjectSource:
    return GithubProjectSource()


def build_contentful_client(
    http_client: HttpContentfulClient | None = None,
) -> RetryingContentfulClient:
    return RetryingContentfulClient(http_client or HttpContentfulClient())


async def get_project_cache(request: Request) -> ProjectCache:
    cache = getattr(request.app.state, "project_cache", None)
    if cache is None:
        raise ServiceUnavailableError("Project cache is not initialized")
    return cache


async def get_contentful_client(request: Request) -> RetryingContentfulClient:
    client = getattr(request.app.state, "contentful_client", None)
    if client is None:
        raise ServiceUnavailableError("Contentful client is not configured")
    return client
