"""In-memory project cache.

The cache owns exactly one :class:`ProjectSnapshot` reference. Readers take
that reference once per call and never lock; ``refresh`` builds a complete
replacement on the side and publishes it with a single assignment, so a
reader sees either the old snapshot or the new one, never a mix.

``refresh`` does not serialize itself: hosts that can trigger overlapping
refreshes must serialize them (the HTTP layer does so with a lock).
"""

import time

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.projects.application.snapshot_loader import SnapshotLoader
from src.modules.projects.domain.entities import (
    Project,
    ProjectDocumentation,
    ProjectSupport,
)
from src.modules.projects.domain.exceptions import (
    ProjectDocumentationNotFoundError,
    ProjectNotFoundError,
    SnapshotLoadError,
)
from src.modules.projects.domain.snapshot import ProjectSnapshot


class ProjectCache:
    """Read-optimized holder of the current project snapshot."""

    def __init__(self, loader: SnapshotLoader, snapshot: ProjectSnapshot) -> None:
        self._loader = loader
        self._snapshot = snapshot
        self._logger = logger.bind(service="ProjectCache")

    @classmethod
    async def load(cls, loader: SnapshotLoader) -> "ProjectCache":
        """Create a cache populated with a first snapshot.

        Raises:
            SnapshotLoadError: the initial load failed; no cache is created.
        """
        snapshot = await loader.load()
        return cls(loader, snapshot)

    @property
    def snapshot(self) -> ProjectSnapshot:
        return self._snapshot

    async def refresh(self) -> ProjectSnapshot:
        """Replace the held snapshot with a freshly loaded one.

        On failure (or cancellation) the previous snapshot stays in place and
        the error propagates.
        """
        start_time = time.monotonic()
        try:
            snapshot = await self._loader.load()
        except SnapshotLoadError as exc:
            BusinessEvents.cache_refresh_failed(
                error=str(exc),
                duration_ms=int((time.monotonic() - start_time) * 1000),
            )
            self._logger.warning(f"Cache refresh failed, keeping previous data: {exc}")
            raise

        self._snapshot = snapshot
        BusinessEvents.cache_refreshed(
            project_count=len(snapshot),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        return snapshot

    def get_projects(self) -> list[Project]:
        return list(self._snapshot.projects.values())

    def get_project(self, slug: str) -> Project:
        project = self._snapshot.projects.get(slug)
        if project is None:
            raise ProjectNotFoundError(slug)
        return project

    def get_project_documentations(self, slug: str) -> list[ProjectDocumentation]:
        documentation = self._snapshot.documentation.get(slug)
        if documentation is None:
            raise ProjectNotFoundError(slug)
        return list(documentation)

    def get_current_documentation(self, slug: str) -> ProjectDocumentation:
        for documentation in self.get_project_documentations(slug):
            if documentation.current:
                return documentation
        raise ProjectDocumentationNotFoundError(slug)

    def get_project_supports(self, slug: str) -> list[ProjectSupport]:
        support = self._snapshot.support.get(slug)
        if support is None:
            raise ProjectNotFoundError(slug)
        return list(support)

    def get_project_support_policy(self, slug: str) -> str:
        support_policy = self._snapshot.support_policy.get(slug)
        if support_policy is None:
            raise ProjectNotFoundError(slug)
        return support_policy
