"""Tests for the projects HTTP API."""

import base64
import json
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi import FastAPI

from src.core.config import settings
from src.core.interfaces.http.exceptions import register_exception_handlers
from src.core.interfaces.http.routers import api_router
from src.modules.projects.application import dependencies as projects_app_deps
from src.modules.projects.application.cache import ProjectCache
from src.modules.projects.application.snapshot_loader import SnapshotLoader
from src.modules.projects.domain.exceptions import ContentfulRateLimitExhaustedError
from src.modules.projects.domain.ports import ContentfulEntry
from src.modules.projects.interfaces.security import compute_signature

pytestmark = pytest.mark.anyio


@pytest.fixture(autouse=True)
def _admin_settings(monkeypatch, test_settings) -> None:
    monkeypatch.setattr(settings, "ADMIN_USERNAME", test_settings.ADMIN_USERNAME)
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", test_settings.ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "CONTENTFUL_LOCALE", "en-US")
    monkeypatch.setattr(settings, "GITHUB_WEBHOOK_SECRET", None)


@pytest.fixture
async def cache(project_source) -> ProjectCache:
    return await ProjectCache.load(SnapshotLoader(project_source))


@pytest.fixture
def contentful_client(sample_release_payloads) -> AsyncMock:
    entry = ContentfulEntry(
        id="entry-1",
        version=4,
        content_type="project",
        fields={"documentation": {"en-US": sample_release_payloads}},
    )
    client = AsyncMock()
    client.fetch_all_entries.return_value = [entry]
    client.update.side_effect = lambda e: e
    client.publish.side_effect = lambda e: e
    return client


@pytest.fixture
async def api(cache, contentful_client):
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(api_router)

    async def _cache() -> ProjectCache:
        return cache

    async def _client():
        return contentful_client

    app.dependency_overrides[projects_app_deps.get_project_cache] = _cache
    app.dependency_overrides[projects_app_deps.get_contentful_client] = _client

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


def _basic_auth(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def _admin(test_settings) -> dict[str, str]:
    return _basic_auth(test_settings.ADMIN_USERNAME, test_settings.ADMIN_PASSWORD)


# ============================================
# Reads
# ============================================


async def test_list_projects(api) -> None:
    response = await api.get("/projects")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["slug"] for p in data] == ["spring-boot", "spring-data"]
    assert data[0]["repository_url"] == "spring-projects/spring-boot"
    assert data[0]["status"] == "ACTIVE"


async def test_get_project_not_found(api) -> None:
    response = await api.get("/projects/unknown")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_list_releases(api) -> None:
    response = await api.get("/projects/spring-boot/releases")

    assert response.status_code == 200
    releases = response.json()["data"]
    assert [(r["version"], r["current"]) for r in releases] == [
        ("3.2.0", True),
        ("3.3.0-M1", False),
    ]


async def test_current_release(api) -> None:
    response = await api.get("/projects/spring-boot/releases/current")

    assert response.status_code == 200
    assert response.json()["data"]["version"] == "3.2.0"


async def test_generations_and_support_policy(api) -> None:
    generations = await api.get("/projects/spring-boot/generations")
    policy = await api.get("/projects/spring-data/support-policy")

    assert generations.json()["data"][0]["branch"] == "3.2.x"
    assert generations.json()["data"][0]["initial_date"] == "2023-11-23"
    assert policy.json()["data"] == {"slug": "spring-data", "support_policy": "UPSTREAM"}


# ============================================
# Release administration
# ============================================


async def test_add_release_requires_admin(api, contentful_client) -> None:
    response = await api.post(
        "/projects/spring-boot/releases",
        json={"version": "3.3.0", "status": "GENERAL_AVAILABILITY"},
        headers=_basic_auth("admin", "wrong"),
    )

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Basic"
    contentful_client.fetch_all_entries.assert_not_awaited()


async def test_add_release(api, contentful_client, test_settings) -> None:
    response = await api.post(
        "/projects/spring-boot/releases",
        json={
            "version": "3.3.0",
            "api_doc_url": "https://docs/3.3.0/api",
            "status": "GENERAL_AVAILABILITY",
        },
        headers=_admin(test_settings),
    )

    assert response.status_code == 201
    written: ContentfulEntry = contentful_client.update.await_args.args[0]
    releases = written.get_field("documentation", "en-US")
    assert [r["version"] for r in releases if r["current"]] == ["3.3.0"]
    contentful_client.publish.assert_awaited_once()


async def test_add_release_rejects_unknown_status(api, test_settings) -> None:
    response = await api.post(
        "/projects/spring-boot/releases",
        json={"version": "3.3.0", "status": "BETA"},
        headers=_admin(test_settings),
    )

    assert response.status_code == 422


async def test_delete_release(api, contentful_client, test_settings) -> None:
    response = await api.delete(
        "/projects/spring-boot/releases/3.2.0", headers=_admin(test_settings)
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Release deleted"
    written: ContentfulEntry = contentful_client.update.await_args.args[0]
    releases = written.get_field("documentation", "en-US")
    assert [r["version"] for r in releases if r["current"]] == ["3.1.0"]


async def test_delete_missing_release(api, contentful_client, test_settings) -> None:
    response = await api.delete(
        "/projects/spring-boot/releases/9.9.9", headers=_admin(test_settings)
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "DOCUMENTATION_NOT_FOUND"
    contentful_client.update.assert_not_awaited()


async def test_ambiguous_project_entry(api, contentful_client, test_settings) -> None:
    entry = ContentfulEntry(id="entry-1", version=1)
    contentful_client.fetch_all_entries.return_value = [entry, entry]

    response = await api.delete(
        "/projects/spring-boot/releases/3.2.0", headers=_admin(test_settings)
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "AMBIGUOUS_ENTITY"


async def test_rate_limit_exhausted(api, contentful_client, test_settings) -> None:
    contentful_client.publish.side_effect = ContentfulRateLimitExhaustedError(
        "publish", 301.0, 300.0
    )

    response = await api.delete(
        "/projects/spring-boot/releases/3.2.0", headers=_admin(test_settings)
    )

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "CONTENTFUL_RATE_LIMITED"


# ============================================
# Cache refresh webhook
# ============================================


async def test_refresh_cache(api, project_source) -> None:
    response = await api.post("/refresh_cache", content=b"{}")

    assert response.status_code == 200
    assert response.json()["data"]["project_count"] == 2
    assert ("list_projects", None) in project_source.calls


async def test_refresh_failure_keeps_serving(api, cache, project_source) -> None:
    before = cache.snapshot
    project_source.fail_on.add(("list_projects", None))

    response = await api.post("/refresh_cache", content=b"{}")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "SNAPSHOT_LOAD_FAILED"
    assert cache.snapshot is before
    assert (await api.get("/projects/spring-boot")).status_code == 200


async def test_refresh_requires_valid_signature(api, monkeypatch) -> None:
    monkeypatch.setattr(settings, "GITHUB_WEBHOOK_SECRET", "webhook-secret")
    body = json.dumps({"ref": "refs/heads/main"}).encode()

    missing = await api.post("/refresh_cache", content=body)
    wrong = await api.post(
        "/refresh_cache",
        content=body,
        headers={"X-Hub-Signature-256": compute_signature("other", body)},
    )
    signed = await api.post(
        "/refresh_cache",
        content=body,
        headers={"X-Hub-Signature-256": compute_signature("webhook-secret", body)},
    )

    assert missing.status_code == 403
    assert wrong.status_code == 403
    assert signed.status_code == 200


async def test_ping_event(api, project_source) -> None:
    calls_before = len(project_source.calls)

    response = await api.post(
        "/refresh_cache", content=b"{}", headers={"X-GitHub-Event": "ping"}
    )

    assert response.status_code == 200
    assert response.json()["message"] == "pong"
    assert len(project_source.calls) == calls_before
