"""Project source backed by the GitHub content repository.

Layout of the repository (``GITHUB_PROJECTS_PATH``, default ``project/``)::

    project/<slug>/index.md            YAML front matter: title, github, status, supportPolicy
    project/<slug>/documentation.json  list of releases
    project/<slug>/support.json        list of support windows
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

import httpx
import yaml
from loguru import logger
from pydantic import BaseModel

from src.core.config import settings
from src.modules.projects.domain.entities import (
    Project,
    ProjectDocumentation,
    ProjectSupport,
)
from src.modules.projects.domain.exceptions import ProjectSourceError

INDEX_FILE = "index.md"
DOCUMENTATION_FILE = "documentation.json"
SUPPORT_FILE = "support.json"
RAW_MEDIA_TYPE = "application/vnd.github.raw+json"
JSON_MEDIA_TYPE = "application/vnd.github+json"

M = TypeVar("M", bound=BaseModel)


class GithubProjectNotFoundError(ProjectSourceError):
    """Raised when the content repository has no index for a project."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"No project '{slug}' in the content repository")


class GithubProjectSource:
    """Read projects from the GitHub contents API."""

    def __init__(
        self,
        *,
        access_token: str | None = None,
        org: str | None = None,
        repo: str | None = None,
        branch: str | None = None,
        projects_path: str | None = None,
        default_support_policy: str | None = None,
        base_url: str | None = None,
        timeout_sec: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        org = org or settings.GITHUB_CONTENT_ORG
        repo = repo or settings.GITHUB_CONTENT_REPO
        self.branch = branch or settings.GITHUB_CONTENT_BRANCH
        self.projects_path = (projects_path or settings.GITHUB_PROJECTS_PATH).strip("/")
        self.default_support_policy = (
            default_support_policy or settings.DEFAULT_SUPPORT_POLICY
        )
        self._contents_path = f"/repos/{org}/{repo}/contents"

        token = access_token or settings.GITHUB_ACCESS_TOKEN
        headers = {"X-GitHub-Api-Version": "2022-11-28"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http_client = http_client or httpx.AsyncClient(
            base_url=base_url or settings.GITHUB_API_URL,
            timeout=timeout_sec or settings.GITHUB_TIMEOUT_SEC,
            follow_redirects=False,
            headers=headers,
        )

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def list_projects(self) -> list[Project]:
        listing = await self._get(self.projects_path, media_type=JSON_MEDIA_TYPE)
        if listing is None:
            raise ProjectSourceError(
                f"Content repository has no '{self.projects_path}' directory"
            )
        try:
            entries = listing.json()
        except ValueError as exc:
            raise ProjectSourceError(f"Invalid listing of '{self.projects_path}'") from exc
        if not isinstance(entries, list):
            raise ProjectSourceError(f"'{self.projects_path}' is not a directory")

        slugs = [
            entry["name"]
            for entry in entries
            if isinstance(entry, dict) and entry.get("type") == "dir"
        ]
        projects = [await self._get_project(slug) for slug in sorted(slugs)]
        logger.debug(f"Listed {len(projects)} projects from GitHub")
        return projects

    async def get_documentations(self, slug: str) -> list[ProjectDocumentation]:
        return [
            self._validate(ProjectDocumentation, item, slug, DOCUMENTATION_FILE)
            for item in await self._get_json_list(slug, DOCUMENTATION_FILE)
        ]

    async def get_supports(self, slug: str) -> list[ProjectSupport]:
        return [
            self._validate(ProjectSupport, item, slug, SUPPORT_FILE)
            for item in await self._get_json_list(slug, SUPPORT_FILE)
        ]

    async def get_support_policy(self, slug: str) -> str:
        front_matter = await self._get_front_matter(slug)
        policy = front_matter.get("supportPolicy")
        if isinstance(policy, str) and policy.strip():
            return policy.strip()
        return self.default_support_policy

    async def _get_project(self, slug: str) -> Project:
        front_matter = await self._get_front_matter(slug)
        # 目录名即 slug，其它文件都按目录名读取
        declared_slug = front_matter.get("slug")
        if declared_slug is not None and declared_slug != slug:
            raise ProjectSourceError(
                f"{slug}/{INDEX_FILE} declares slug '{declared_slug}' "
                f"but lives in directory '{slug}'"
            )
        data = {
            "slug": slug,
            "name": front_matter.get("title") or slug,
            "github": front_matter.get("github"),
        }
        if isinstance(front_matter.get("status"), str):
            data["status"] = front_matter["status"].strip().upper()
        return self._validate(Project, data, slug, INDEX_FILE)

    async def _get_front_matter(self, slug: str) -> dict[str, Any]:
        response = await self._get(f"{self.projects_path}/{slug}/{INDEX_FILE}")
        if response is None:
            raise GithubProjectNotFoundError(slug)
        return parse_front_matter(response.text, source=f"{slug}/{INDEX_FILE}")

    async def _get_json_list(self, slug: str, filename: str) -> list[Any]:
        response = await self._get(f"{self.projects_path}/{slug}/{filename}")
        if response is None:
            return []
        try:
            payload = json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise ProjectSourceError(f"Invalid JSON in {slug}/{filename}: {exc}") from exc
        if not isinstance(payload, list):
            raise ProjectSourceError(f"{slug}/{filename} must contain a JSON list")
        return payload

    async def _get(
        self, path: str, media_type: str = RAW_MEDIA_TYPE
    ) -> httpx.Response | None:
        """GET a repository path; None when it does not exist."""
        try:
            response = await self._http_client.get(
                f"{self._contents_path}/{path}",
                params={"ref": self.branch},
                headers={"Accept": media_type},
            )
        except httpx.HTTPError as exc:
            logger.warning(f"GitHub request for {path} failed: {exc}")
            raise ProjectSourceError(f"GitHub request for {path} failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.is_error:
            logger.warning(f"GitHub returned HTTP {response.status_code} for {path}")
            raise ProjectSourceError(
                f"GitHub returned HTTP {response.status_code} for {path}"
            )
        return response

    @staticmethod
    def _validate(model: type[M], data: Any, slug: str, filename: str) -> M:
        try:
            return model.model_validate(data)
        except ValueError as exc:
            raise ProjectSourceError(f"Invalid entry in {slug}/{filename}: {exc}") from exc


def parse_front_matter(text: str, source: str = "document") -> dict[str, Any]:
    """Parse the leading ``---`` delimited YAML block of a markdown file."""
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != "---":
        return {}
    try:
        end = next(i for i, line in enumerate(lines[1:], start=1) if line.strip() == "---")
    except StopIteration as exc:
        raise ProjectSourceError(f"Unterminated front matter in {source}") from exc

    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise ProjectSourceError(f"Invalid front matter in {source}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProjectSourceError(f"Front matter in {source} must be a mapping")
    return data
