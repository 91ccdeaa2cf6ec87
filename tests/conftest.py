"""
pytest 配置和共享 fixtures。

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=src --cov-report=html
"""

from typing import Any

import pytest

from src.core.config import Settings
from src.modules.projects.domain.entities import (
    Project,
    ProjectDocumentation,
    ProjectSupport,
    ReleaseStatus,
)
from src.modules.projects.domain.exceptions import ProjectSourceError

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="test-admin-password",
        CONTENTFUL_SPACE_ID="space-1",
        CONTENTFUL_ENVIRONMENT_ID="master",
        CONTENTFUL_ACCESS_TOKEN="test-token",
    )


# ============================================
# 领域对象 Fixtures
# ============================================


class InMemoryProjectSource:
    """ProjectSource backed by dicts; records calls and can fail on demand."""

    def __init__(
        self,
        projects: list[Project] | None = None,
        documentation: dict[str, list[ProjectDocumentation]] | None = None,
        support: dict[str, list[ProjectSupport]] | None = None,
        support_policy: dict[str, str] | None = None,
    ) -> None:
        self.projects = projects or []
        self.documentation = documentation or {}
        self.support = support or {}
        self.support_policy = support_policy or {}
        self.fail_on: set[tuple[str, str | None]] = set()
        self.calls: list[tuple[str, str | None]] = []

    def _record(self, operation: str, slug: str | None = None) -> None:
        self.calls.append((operation, slug))
        if (operation, slug) in self.fail_on:
            raise ProjectSourceError(f"{operation} failed for {slug}")

    async def list_projects(self) -> list[Project]:
        self._record("list_projects")
        return list(self.projects)

    async def get_documentations(self, slug: str) -> list[ProjectDocumentation]:
        self._record("get_documentations", slug)
        return list(self.documentation.get(slug, []))

    async def get_supports(self, slug: str) -> list[ProjectSupport]:
        self._record("get_supports", slug)
        return list(self.support.get(slug, []))

    async def get_support_policy(self, slug: str) -> str:
        self._record("get_support_policy", slug)
        return self.support_policy.get(slug, "SPRING_BOOT")


def make_documentation(
    version: str,
    status: ReleaseStatus = ReleaseStatus.GENERAL_AVAILABILITY,
    current: bool = False,
) -> ProjectDocumentation:
    return ProjectDocumentation(
        version=version,
        api_doc_url=f"https://docs.example.com/{version}/api/",
        ref_doc_url=f"https://docs.example.com/{version}/reference/",
        status=status,
        current=current,
    )


@pytest.fixture
def project_source() -> InMemoryProjectSource:
    """两个项目的内存数据源。"""
    return InMemoryProjectSource(
        projects=[
            Project(slug="spring-boot", name="Spring Boot", github="spring-projects/spring-boot"),
            Project(slug="spring-data", name="Spring Data"),
        ],
        documentation={
            "spring-boot": [
                make_documentation("3.2.0", current=True),
                make_documentation("3.3.0-M1", ReleaseStatus.PRERELEASE),
            ],
            "spring-data": [make_documentation("2023.1.0", current=True)],
        },
        support={
            "spring-boot": [ProjectSupport(branch="3.2.x", initialDate="2023-11-23")],
            "spring-data": [],
        },
        support_policy={"spring-boot": "SPRING_BOOT", "spring-data": "UPSTREAM"},
    )


@pytest.fixture
def sample_release_payloads() -> list[dict[str, Any]]:
    """Contentful 中存储的 documentation 字段示例。"""
    return [
        {"version": "3.1.0", "status": "GENERAL_AVAILABILITY", "current": False},
        {"version": "3.2.0", "status": "GENERAL_AVAILABILITY", "current": True},
        {"version": "3.3.0-M1", "status": "PRERELEASE", "current": False},
    ]
