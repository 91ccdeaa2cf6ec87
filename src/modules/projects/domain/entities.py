"""Project domain entities.

All entities are frozen value objects: once a snapshot is loaded nothing
downstream can modify it.
"""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProjectStatus(StrEnum):
    """项目状态。"""

    ACTIVE = "ACTIVE"
    INCUBATING = "INCUBATING"
    COMMUNITY = "COMMUNITY"
    END_OF_LIFE = "END_OF_LIFE"


class ReleaseStatus(StrEnum):
    """发布文档状态。"""

    PRERELEASE = "PRERELEASE"
    GENERAL_AVAILABILITY = "GENERAL_AVAILABILITY"
    SNAPSHOT = "SNAPSHOT"


class _ContentModel(BaseModel):
    """Base for models exchanged with the content repository (camelCase JSON)."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Project(_ContentModel):
    """Project metadata, keyed by slug."""

    slug: str = Field(..., min_length=1, description="唯一标识")
    name: str = Field(..., description="项目名称")
    repository_url: str | None = Field(default=None, alias="github")
    status: ProjectStatus = Field(default=ProjectStatus.ACTIVE)


class ProjectDocumentation(_ContentModel):
    """One documentation release of a project.

    ``current`` is derived from the full release list by
    :func:`src.modules.projects.domain.releases.compute_current_release`
    and is never taken from a caller.
    """

    version: str = Field(..., min_length=1)
    api_doc_url: str | None = Field(default=None, alias="api")
    ref_doc_url: str | None = Field(default=None, alias="ref")
    status: ReleaseStatus
    current: bool = False

    def to_content(self) -> dict[str, object]:
        """Serialize to the wire shape stored in the content backend."""
        return self.model_dump(mode="json", by_alias=True)


class ProjectSupport(_ContentModel):
    """Support window of one project generation (branch)."""

    branch: str
    initial_date: date | None = None
    oss_support_end_date: date | None = Field(default=None, alias="ossEnforcedEnd")
    commercial_support_end_date: date | None = Field(
        default=None, alias="commercialEnforcedEnd"
    )
