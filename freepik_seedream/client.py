"""Async client for the Freepik REST API.

This module handles:
- Authenticated requests (``x-freepik-api-key``) to the AI and stock endpoints
- Normalization of enveloped and flat responses
- Mapping of task kinds to their status endpoints

There are no retries here: a failed request fails the call. Retrying
not-yet-ready tasks is the poller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from freepik_seedream.config import FREEPIK_API_BASE
from freepik_seedream.errors import ConfigurationError, VendorError
from freepik_seedream.models import (
    Enveloped,
    GenerationTask,
    SearchPage,
    StockResource,
    VendorPayload,
    parse_payload,
    unwrap,
)
from freepik_seedream.poller import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    wait_for_completion,
)
from freepik_seedream.types import (
    AspectRatio,
    ContentType,
    License,
    MysticAspectRatio,
    MysticEngine,
    MysticResolution,
    Orientation,
    SearchOrder,
    TaskKind,
)

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-freepik-api-key"

# Timeout for a single request (seconds)
REQUEST_TIMEOUT = 60.0

SEEDREAM_ENDPOINT = "/v1/ai/text-to-image/seedream-v4"
SEEDREAM_EDIT_ENDPOINT = "/v1/ai/text-to-image/seedream-v4-edit"
MYSTIC_ENDPOINT = "/v1/ai/mystic"
RESOURCES_ENDPOINT = "/v1/resources"

TASK_ENDPOINTS: dict[TaskKind, str] = {
    TaskKind.TEXT_TO_IMAGE: SEEDREAM_ENDPOINT,
    TaskKind.EDIT: SEEDREAM_EDIT_ENDPOINT,
    TaskKind.MYSTIC: MYSTIC_ENDPOINT,
}


@dataclass
class SearchQuery:
    """Parameters for a stock resource search."""

    term: str
    limit: int | None = None
    order: SearchOrder | None = None
    content_type: ContentType = ContentType.ALL
    orientation: Orientation = Orientation.ALL
    license: License = License.ALL

    def to_params(self) -> dict[str, str]:
        """Encode as query parameters, filters as ``filters[group][key]``."""
        params: dict[str, str] = {"term": self.term}
        if self.limit:
            params["limit"] = str(self.limit)
        if self.order:
            params["order"] = SearchOrder(self.order).value

        filters = (
            ("content_type", ContentType(self.content_type).value, ContentType.ALL),
            ("orientation", Orientation(self.orientation).value, Orientation.ALL),
            ("license", License(self.license).value, License.ALL),
        )
        for group, value, wildcard in filters:
            if value != wildcard.value:
                params[f"filters[{group}][{value}]"] = "true"
        return params


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


class FreepikClient:
    """Async Freepik API client.

    The client either owns its ``httpx.AsyncClient`` or borrows a shared one
    passed as ``http_client``; only an owned client is closed by ``aclose``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = FREEPIK_API_BASE,
        timeout: float = REQUEST_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize FreepikClient.

        Args:
            api_key: Freepik API key.
            base_url: API base URL.
            timeout: Per-request timeout in seconds.
            http_client: Optional shared HTTP client.

        Raises:
            ConfigurationError: If api_key is empty.
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("No Freepik API key configured")
        self._api_key = api_key.strip()
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> FreepikClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client:
            await self._http.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> VendorPayload:
        """Send an authenticated request and parse the response body.

        Raises:
            VendorError: On a non-2xx status, a transport failure, or a body
                that is not JSON.
        """
        url = f"{self.base_url}{endpoint}"
        headers = {
            API_KEY_HEADER: self._api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        logger.debug("%s %s", method, endpoint)

        try:
            response = await self._http.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Request to %s failed: %s", endpoint, e)
            raise VendorError(0, str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning("Freepik API returned %d for %s", response.status_code, endpoint)
            raise VendorError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as e:
            raise VendorError(response.status_code, response.text) from e

        return parse_payload(body)

    async def _task_request(
        self, method: str, endpoint: str, json: dict[str, Any] | None = None
    ) -> GenerationTask:
        payload = await self._request(method, endpoint, json=json)
        document = unwrap(payload)
        try:
            return GenerationTask.model_validate(document)
        except ValidationError as e:
            raise VendorError(200, f"Unexpected task payload: {document!r}") from e

    # Seedream 4

    async def text_to_image(
        self,
        prompt: str,
        *,
        aspect_ratio: AspectRatio | str = AspectRatio.SQUARE_1_1,
        guidance_scale: float | None = None,
        seed: int | None = None,
    ) -> GenerationTask:
        """Start a Seedream 4 text-to-image task."""
        body = _drop_none(
            {
                "prompt": prompt,
                "aspect_ratio": AspectRatio(aspect_ratio).value,
                "guidance_scale": guidance_scale,
                "seed": seed,
            }
        )
        task = await self._task_request("POST", SEEDREAM_ENDPOINT, json=body)
        logger.info("Started text-to-image task %s", task.task_id)
        return task

    async def edit_image(
        self,
        prompt: str,
        image_url: str,
        *,
        guidance_scale: float | None = None,
        seed: int | None = None,
    ) -> GenerationTask:
        """Start a Seedream 4 edit task on an image reachable by URL."""
        body = _drop_none(
            {
                "prompt": prompt,
                "image": {"url": image_url},
                "guidance_scale": guidance_scale,
                "seed": seed,
            }
        )
        task = await self._task_request("POST", SEEDREAM_EDIT_ENDPOINT, json=body)
        logger.info("Started edit task %s", task.task_id)
        return task

    # Mystic (legacy)

    async def mystic_generate(
        self,
        prompt: str,
        *,
        resolution: MysticResolution | str = MysticResolution.RES_2K,
        aspect_ratio: MysticAspectRatio | str = MysticAspectRatio.SQUARE_1_1,
        realism: bool = False,
        engine: MysticEngine | str = MysticEngine.AUTOMATIC,
        creative_detailing: int | None = None,
    ) -> GenerationTask:
        """Start a legacy Mystic generation task."""
        body = _drop_none(
            {
                "prompt": prompt,
                "resolution": MysticResolution(resolution).value,
                "aspect_ratio": MysticAspectRatio(aspect_ratio).value,
                "realism": realism,
                "engine": MysticEngine(engine).value,
                "creative_detailing": creative_detailing,
            }
        )
        task = await self._task_request("POST", MYSTIC_ENDPOINT, json=body)
        logger.info("Started Mystic task %s", task.task_id)
        return task

    # Task status

    async def check_status(
        self, task_id: str, kind: TaskKind | str = TaskKind.TEXT_TO_IMAGE
    ) -> GenerationTask:
        """Fetch the current state of a task."""
        endpoint = TASK_ENDPOINTS[TaskKind(kind)]
        return await self._task_request("GET", f"{endpoint}/{task_id}")

    async def wait_for_completion(
        self,
        task_id: str,
        kind: TaskKind | str = TaskKind.TEXT_TO_IMAGE,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> GenerationTask:
        """Poll a task of the given kind until it reaches a terminal state."""
        task_kind = TaskKind(kind)

        async def check(tid: str) -> GenerationTask:
            return await self.check_status(tid, task_kind)

        return await wait_for_completion(
            check, task_id, max_attempts=max_attempts, interval=interval
        )

    # Stock resources

    async def search_resources(self, query: SearchQuery) -> SearchPage:
        """Search the stock library."""
        payload = await self._request("GET", RESOURCES_ENDPOINT, params=query.to_params())
        items = unwrap(payload)
        if not isinstance(items, list):
            items = []

        total = len(items)
        if isinstance(payload, Enveloped):
            pagination = payload.meta.get("pagination") or {}
            if isinstance(pagination.get("total"), int):
                total = pagination["total"]

        return SearchPage(
            resources=[StockResource.model_validate(item) for item in items],
            total=total,
        )

    async def get_resource(self, resource_id: int) -> dict[str, Any]:
        """Get the details document of a stock resource."""
        payload = await self._request("GET", f"{RESOURCES_ENDPOINT}/{resource_id}")
        details = unwrap(payload)
        return details if isinstance(details, dict) else {"data": details}

    async def get_download_url(self, resource_id: int) -> str:
        """Get a signed download URL for a stock resource."""
        payload = await self._request(
            "GET", f"{RESOURCES_ENDPOINT}/{resource_id}/download"
        )
        document = unwrap(payload)
        url = document.get("url") if isinstance(document, dict) else None
        if not isinstance(url, str) or not url:
            raise VendorError(200, f"Download response without URL: {document!r}")
        return url


__all__ = [
    "API_KEY_HEADER",
    "MYSTIC_ENDPOINT",
    "RESOURCES_ENDPOINT",
    "SEEDREAM_EDIT_ENDPOINT",
    "SEEDREAM_ENDPOINT",
    "TASK_ENDPOINTS",
    "FreepikClient",
    "SearchQuery",
]
