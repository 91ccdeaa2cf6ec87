"""Builds complete project snapshots from the project source."""

import time

from loguru import logger

from src.modules.projects.domain.entities import Project
from src.modules.projects.domain.exceptions import ProjectSourceError, SnapshotLoadError
from src.modules.projects.domain.ports import ProjectSource
from src.modules.projects.domain.snapshot import ProjectRecord, ProjectSnapshot


class SnapshotLoader:
    """Load one consistent :class:`ProjectSnapshot`.

    Fail-fast: if any single fetch fails the whole load fails, so callers
    never see a half-populated snapshot.
    """

    def __init__(self, source: ProjectSource) -> None:
        self._source = source
        self._logger = logger.bind(service="SnapshotLoader")

    async def load(self) -> ProjectSnapshot:
        start_time = time.monotonic()
        try:
            records = [
                await self._load_record(project)
                for project in await self._source.list_projects()
            ]
            snapshot = ProjectSnapshot.from_records(records)
        except (ProjectSourceError, ValueError) as exc:
            raise SnapshotLoadError(f"Project data could not be loaded: {exc}") from exc

        duration_ms = int((time.monotonic() - start_time) * 1000)
        self._logger.info(
            f"Loaded snapshot with {len(snapshot)} projects in {duration_ms}ms"
        )
        return snapshot

    async def _load_record(self, project: Project) -> ProjectRecord:
        slug = project.slug
        documentation = await self._source.get_documentations(slug)
        support = await self._source.get_supports(slug)
        support_policy = await self._source.get_support_policy(slug)
        return ProjectRecord(
            project=project,
            documentation=tuple(documentation),
            support=tuple(support),
            support_policy=support_policy,
        )
