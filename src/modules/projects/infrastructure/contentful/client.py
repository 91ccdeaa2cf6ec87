"""Contentful management API client (entries only)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from src.core.config import settings
from src.modules.projects.domain.exceptions import (
    ContentfulHttpError,
    InvalidContentfulQueryResponseError,
)
from src.modules.projects.domain.ports import ContentfulEntry

CONTENT_TYPE = "application/vnd.contentful.management.v1+json"
RATE_LIMIT_RESET_HEADER = "X-Contentful-RateLimit-Reset"
VERSION_HEADER = "X-Contentful-Version"


class HttpContentfulClient:
    """Entry operations against the Contentful management REST API."""

    def __init__(
        self,
        *,
        access_token: str | None = None,
        space_id: str | None = None,
        environment_id: str | None = None,
        base_url: str | None = None,
        timeout_sec: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        space_id = space_id or settings.CONTENTFUL_SPACE_ID
        environment_id = environment_id or settings.CONTENTFUL_ENVIRONMENT_ID
        self._entries_path = f"/spaces/{space_id}/environments/{environment_id}/entries"
        self._http_client = http_client or httpx.AsyncClient(
            base_url=base_url or settings.CONTENTFUL_API_URL,
            timeout=timeout_sec or settings.CONTENTFUL_TIMEOUT_SEC,
            follow_redirects=False,
            headers={
                "Authorization": f"Bearer {access_token or settings.CONTENTFUL_ACCESS_TOKEN}",
                "Content-Type": CONTENT_TYPE,
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def fetch_all_entries(
        self, query: Mapping[str, str]
    ) -> list[ContentfulEntry]:
        payload = await self._request(
            "GET", self._entries_path, operation="fetch_all_entries", params=dict(query)
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            raise InvalidContentfulQueryResponseError()
        return [self._parse_entry(item) for item in payload["items"]]

    async def update(self, entry: ContentfulEntry) -> ContentfulEntry:
        payload = await self._request(
            "PUT",
            f"{self._entries_path}/{entry.id}",
            operation="update",
            headers={VERSION_HEADER: str(entry.version)},
            json={"fields": entry.fields},
        )
        return self._parse_entry(payload)

    async def publish(self, entry: ContentfulEntry) -> ContentfulEntry:
        payload = await self._request(
            "PUT",
            f"{self._entries_path}/{entry.id}/published",
            operation="publish",
            headers={VERSION_HEADER: str(entry.version)},
        )
        return self._parse_entry(payload)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self._http_client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(f"Contentful {operation} transport error: {exc}")
            raise ContentfulHttpError(f"Contentful {operation} failed: {exc}") from exc

        if response.is_error:
            rate_limit_reset = parse_rate_limit_reset(response)
            raise ContentfulHttpError(
                f"Contentful {operation} failed with HTTP {response.status_code}: "
                f"{_error_message(response)}",
                status_code=response.status_code,
                rate_limit_reset=rate_limit_reset,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise InvalidContentfulQueryResponseError(
                f"Contentful {operation} returned a non-JSON body"
            ) from exc

    @staticmethod
    def _parse_entry(payload: Any) -> ContentfulEntry:
        if not isinstance(payload, dict):
            raise InvalidContentfulQueryResponseError()
        sys_data = payload.get("sys")
        if not isinstance(sys_data, dict) or "id" not in sys_data:
            raise InvalidContentfulQueryResponseError("Contentful entry without sys.id")

        content_type = (
            sys_data.get("contentType", {}).get("sys", {}).get("id")
            if isinstance(sys_data.get("contentType"), dict)
            else None
        )
        fields = payload.get("fields") or {}
        if not isinstance(fields, dict):
            raise InvalidContentfulQueryResponseError(
                f"Contentful entry {sys_data['id']} has malformed fields"
            )
        return ContentfulEntry(
            id=str(sys_data["id"]),
            version=int(sys_data.get("version", 0)),
            content_type=content_type,
            fields=fields,
        )


def parse_rate_limit_reset(response: httpx.Response) -> int:
    """Return the rate-limit cool-down in seconds, or -1 when absent."""
    value = response.headers.get(RATE_LIMIT_RESET_HEADER)
    if value is None:
        return -1
    try:
        return int(value)
    except ValueError:
        return -1


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.reason_phrase
