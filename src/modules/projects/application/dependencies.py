"""Project module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.modules.projects.application.cache import ProjectCache
from src.modules.projects.application.handlers import (
    AddProjectDocumentationHandler,
    DeleteProjectDocumentationHandler,
)
from src.modules.projects.domain.ports import ContentfulEntriesClient


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_project_cache() -> ProjectCache:
    _missing_dependency("ProjectCache")


async def get_contentful_client() -> ContentfulEntriesClient:
    _missing_dependency("ContentfulEntriesClient")


async def get_add_documentation_handler(
    client: ContentfulEntriesClient = Depends(get_contentful_client),
) -> AddProjectDocumentationHandler:
    return AddProjectDocumentationHandler(client)


async def get_delete_documentation_handler(
    client: ContentfulEntriesClient = Depends(get_contentful_client),
) -> DeleteProjectDocumentationHandler:
    return DeleteProjectDocumentationHandler(client)
