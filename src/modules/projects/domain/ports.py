"""Ports to the external services behind the projects module."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from src.modules.projects.domain.entities import (
    Project,
    ProjectDocumentation,
    ProjectSupport,
)


class ProjectSource(Protocol):
    """Read-only source of truth for project data.

    Implementations raise ProjectSourceError (or a subclass of it) on
    transport failures, missing projects and malformed payloads.
    """

    async def list_projects(self) -> Sequence[Project]: ...

    async def get_documentations(self, slug: str) -> Sequence[ProjectDocumentation]: ...

    async def get_supports(self, slug: str) -> Sequence[ProjectSupport]: ...

    async def get_support_policy(self, slug: str) -> str: ...


class ContentfulEntry(BaseModel):
    """A Contentful entry as seen through the management API.

    ``fields`` maps field name -> locale -> value. ``version`` is the
    optimistic-lock version required by update and publish.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    version: int
    content_type: str | None = None
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def get_field(self, name: str, locale: str) -> Any:
        return self.fields.get(name, {}).get(locale)

    def with_field(self, name: str, locale: str, value: Any) -> "ContentfulEntry":
        """Return a copy of this entry with one localized field replaced."""
        fields = {key: dict(locales) for key, locales in self.fields.items()}
        fields.setdefault(name, {})[locale] = value
        return self.model_copy(update={"fields": fields})


class ContentfulEntriesClient(Protocol):
    """Entry operations of the Contentful management API.

    Failures raise ContentfulHttpError carrying the backend's rate-limit
    reset (seconds, negative when not retryable).
    """

    async def fetch_all_entries(
        self, query: Mapping[str, str]
    ) -> Sequence[ContentfulEntry]: ...

    async def update(self, entry: ContentfulEntry) -> ContentfulEntry: ...

    async def publish(self, entry: ContentfulEntry) -> ContentfulEntry: ...
