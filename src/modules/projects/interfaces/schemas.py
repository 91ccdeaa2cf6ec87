"""Project API schemas."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ProjectStatus(str, Enum):
    """Project status enum for API layer."""

    ACTIVE = "ACTIVE"
    INCUBATING = "INCUBATING"
    COMMUNITY = "COMMUNITY"
    END_OF_LIFE = "END_OF_LIFE"


class ReleaseStatus(str, Enum):
    """Release status enum for API layer."""

    PRERELEASE = "PRERELEASE"
    GENERAL_AVAILABILITY = "GENERAL_AVAILABILITY"
    SNAPSHOT = "SNAPSHOT"


class ProjectResponse(BaseModel):
    """Project response."""

    slug: str = Field(..., description="项目标识")
    name: str = Field(..., description="项目名称")
    repository_url: str | None = Field(None, description="源码仓库地址")
    status: ProjectStatus = Field(..., description="项目状态")


class ReleaseResponse(BaseModel):
    """Documentation release response."""

    version: str = Field(..., description="版本号")
    api_doc_url: str | None = Field(None, description="API 文档地址")
    ref_doc_url: str | None = Field(None, description="参考文档地址")
    status: ReleaseStatus = Field(..., description="发布状态")
    current: bool = Field(..., description="是否为当前版本")


class GenerationResponse(BaseModel):
    """Support window of one project generation."""

    branch: str = Field(..., description="分支/世代")
    initial_date: date | None = Field(None, description="首次发布日期")
    oss_support_end_date: date | None = Field(None, description="开源支持结束日期")
    commercial_support_end_date: date | None = Field(
        None, description="商业支持结束日期"
    )


class SupportPolicyResponse(BaseModel):
    """Support policy response."""

    slug: str
    support_policy: str


class AddReleaseRequest(BaseModel):
    """Add release request. ``current`` is always computed server-side."""

    version: str = Field(..., min_length=1, max_length=100, description="版本号")
    api_doc_url: str | None = Field(None, description="API 文档地址")
    ref_doc_url: str | None = Field(None, description="参考文档地址")
    status: ReleaseStatus = Field(..., description="发布状态")

    class Config:
        json_schema_extra = {
            "example": {
                "version": "3.2.0",
                "api_doc_url": "https://docs.spring.io/spring-boot/docs/{version}/api/",
                "ref_doc_url": "https://docs.spring.io/spring-boot/docs/{version}/reference/html/",
                "status": "GENERAL_AVAILABILITY",
            }
        }


class CacheRefreshResponse(BaseModel):
    """Cache refresh result."""

    project_count: int
    loaded_at: datetime
