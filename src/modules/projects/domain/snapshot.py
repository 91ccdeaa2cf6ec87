"""Immutable snapshot of all project data."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from src.modules.projects.domain.entities import (
    Project,
    ProjectDocumentation,
    ProjectSupport,
)


@dataclass(frozen=True)
class ProjectRecord:
    """Everything loaded for one project slug."""

    project: Project
    documentation: tuple[ProjectDocumentation, ...]
    support: tuple[ProjectSupport, ...]
    support_policy: str


@dataclass(frozen=True)
class ProjectSnapshot:
    """One fully-populated, read-only view of the project data.

    The four mappings are keyed by slug and always share the same key set,
    in enumeration order. Build instances with :meth:`from_records` so the
    mappings cannot drift apart.
    """

    projects: Mapping[str, Project]
    documentation: Mapping[str, tuple[ProjectDocumentation, ...]]
    support: Mapping[str, tuple[ProjectSupport, ...]]
    support_policy: Mapping[str, str]
    loaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        keys = list(self.projects)
        for name, mapping in (
            ("documentation", self.documentation),
            ("support", self.support),
            ("support_policy", self.support_policy),
        ):
            if list(mapping) != keys:
                raise ValueError(f"Snapshot {name} keys do not match project keys")

    @classmethod
    def from_records(cls, records: Iterable[ProjectRecord]) -> "ProjectSnapshot":
        projects: dict[str, Project] = {}
        documentation: dict[str, tuple[ProjectDocumentation, ...]] = {}
        support: dict[str, tuple[ProjectSupport, ...]] = {}
        support_policy: dict[str, str] = {}
        for record in records:
            slug = record.project.slug
            if slug in projects:
                raise ValueError(f"Duplicate project slug '{slug}' in snapshot")
            projects[slug] = record.project
            documentation[slug] = tuple(record.documentation)
            support[slug] = tuple(record.support)
            support_policy[slug] = record.support_policy
        return cls(
            projects=MappingProxyType(projects),
            documentation=MappingProxyType(documentation),
            support=MappingProxyType(support),
            support_policy=MappingProxyType(support_policy),
        )

    def __contains__(self, slug: object) -> bool:
        return slug in self.projects

    def __len__(self) -> int:
        return len(self.projects)
