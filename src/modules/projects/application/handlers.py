"""Project documentation command handlers.

Releases are written to the project's Contentful entry. The snapshot cache
is not touched here: Contentful publishes to the content repository, whose
webhook triggers a cache refresh.
"""

from collections.abc import Sequence
from typing import Any

from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.projects.application.commands import (
    AddProjectDocumentationCommand,
    DeleteProjectDocumentationCommand,
)
from src.modules.projects.domain.exceptions import (
    ContentfulProjectNotFoundError,
    InvalidContentfulQueryResponseError,
    NoUniqueContentfulProjectError,
    ProjectDocumentationNotFoundError,
)
from src.modules.projects.domain.ports import ContentfulEntriesClient, ContentfulEntry
from src.modules.projects.domain.releases import (
    VERSION_KEY,
    add_release,
    find_current_release,
    remove_release,
)

PROJECT_CONTENT_TYPE = "project"
DOCUMENTATION_FIELD = "documentation"


class _ProjectEntryHandler:
    """Shared lookup/write steps for handlers editing a project entry."""

    def __init__(
        self,
        client: ContentfulEntriesClient,
        locale: str | None = None,
    ):
        self.client = client
        self.locale = locale or settings.CONTENTFUL_LOCALE
        self.logger = logger

    async def _get_project_entry(self, project_slug: str) -> ContentfulEntry:
        entries = await self.client.fetch_all_entries(
            {"content_type": PROJECT_CONTENT_TYPE, "fields.slug": project_slug}
        )
        if not entries:
            raise ContentfulProjectNotFoundError(project_slug)
        if len(entries) > 1:
            raise NoUniqueContentfulProjectError(project_slug, len(entries))
        return entries[0]

    def _get_releases(self, entry: ContentfulEntry) -> list[dict[str, Any]]:
        releases = entry.get_field(DOCUMENTATION_FIELD, self.locale)
        if releases is None:
            return []
        if not isinstance(releases, list):
            raise InvalidContentfulQueryResponseError(
                f"Field '{DOCUMENTATION_FIELD}' of entry {entry.id} is not a list"
            )
        for release in releases:
            if not isinstance(release, dict) or not isinstance(
                release.get(VERSION_KEY), str
            ):
                raise InvalidContentfulQueryResponseError(
                    f"Entry {entry.id} holds a release without a string "
                    f"'{VERSION_KEY}': {release!r}"
                )
        return releases

    async def _update_and_publish(
        self, entry: ContentfulEntry, releases: Sequence[dict[str, Any]]
    ) -> ContentfulEntry:
        updated = await self.client.update(
            entry.with_field(DOCUMENTATION_FIELD, self.locale, list(releases))
        )
        return await self.client.publish(updated)

    @staticmethod
    def _current_version(releases: Sequence[dict[str, Any]]) -> str | None:
        current = find_current_release(releases)
        return current[VERSION_KEY] if current else None


class AddProjectDocumentationHandler(_ProjectEntryHandler):
    """Handle adding a documentation release."""

    async def handle(self, command: AddProjectDocumentationCommand) -> ContentfulEntry:
        entry = await self._get_project_entry(command.project_slug)
        releases = add_release(
            self._get_releases(entry), command.documentation.to_content()
        )
        published = await self._update_and_publish(entry, releases)

        current_version = self._current_version(releases)
        self.logger.info(
            f"Added documentation {command.documentation.version} "
            f"to {command.project_slug} (current: {current_version})"
        )
        BusinessEvents.documentation_added(
            project_slug=command.project_slug,
            version=command.documentation.version,
            current_version=current_version,
        )
        return published


class DeleteProjectDocumentationHandler(_ProjectEntryHandler):
    """Handle deleting a documentation release."""

    async def handle(
        self, command: DeleteProjectDocumentationCommand
    ) -> ContentfulEntry:
        entry = await self._get_project_entry(command.project_slug)
        releases = remove_release(self._get_releases(entry), command.version)
        if releases is None:
            raise ProjectDocumentationNotFoundError(
                command.project_slug, command.version
            )
        published = await self._update_and_publish(entry, releases)

        current_version = self._current_version(releases)
        self.logger.info(
            f"Deleted documentation {command.version} "
            f"from {command.project_slug} (current: {current_version})"
        )
        BusinessEvents.documentation_deleted(
            project_slug=command.project_slug,
            version=command.version,
            current_version=current_version,
        )
        return published
