"""Pydantic models for Freepik API payloads.

The vendor wraps most responses in a ``{"data": ..., "meta": ...}`` envelope
but not all of them. ``parse_payload`` resolves that once, at the client
boundary, into an ``Enveloped`` or ``Flat`` variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from freepik_seedream.types import TaskStatus


@dataclass(frozen=True)
class Enveloped:
    """Response whose document sits under a ``data`` key."""

    data: Any
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Flat:
    """Response whose body is the document itself."""

    data: Any


VendorPayload = Enveloped | Flat


def parse_payload(body: Any) -> VendorPayload:
    """Classify a decoded response body.

    Args:
        body: Decoded JSON body.

    Returns:
        ``Enveloped`` when the body is an object with a ``data`` key,
        otherwise ``Flat``.
    """
    if isinstance(body, dict) and "data" in body:
        meta = body.get("meta")
        return Enveloped(data=body["data"], meta=meta if isinstance(meta, dict) else {})
    return Flat(data=body)


def unwrap(payload: VendorPayload) -> Any:
    """Return the inner document of a payload."""
    return payload.data


class GeneratedAsset(BaseModel):
    """A produced image."""

    model_config = ConfigDict(extra="allow")

    url: str
    content_type: str | None = None


class GenerationTask(BaseModel):
    """A vendor-side asynchronous generation or edit task."""

    model_config = ConfigDict(extra="allow")

    task_id: str
    status: str
    generated: list[GeneratedAsset] = Field(default_factory=list)

    @field_validator("generated", mode="before")
    @classmethod
    def _coerce_generated(cls, value: Any) -> Any:
        # Seedream returns bare URL strings, Mystic returns objects
        if value is None:
            return []
        if isinstance(value, list):
            return [{"url": item} if isinstance(item, str) else item for item in value]
        return value

    @property
    def state(self) -> TaskStatus:
        """Classified status; unknown vendor statuses count as in progress."""
        try:
            return TaskStatus(self.status.upper())
        except ValueError:
            return TaskStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.state is TaskStatus.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.state is TaskStatus.FAILED

    @property
    def first_url(self) -> str | None:
        """URL of the first generated asset, if any."""
        for asset in self.generated:
            if asset.url:
                return asset.url
        return None


class StockResource(BaseModel):
    """A stock library resource as returned by search."""

    model_config = ConfigDict(extra="allow")

    id: int
    title: str | None = None
    url: str | None = None
    image: dict[str, Any] | None = None
    author: dict[str, Any] | None = None

    @property
    def preview_url(self) -> str | None:
        source = (self.image or {}).get("source") or {}
        url = source.get("url") if isinstance(source, dict) else None
        return url if isinstance(url, str) else None

    @property
    def author_name(self) -> str | None:
        name = (self.author or {}).get("name")
        return name if isinstance(name, str) else None


class SearchPage(BaseModel):
    """One page of stock search results."""

    resources: list[StockResource]
    total: int


__all__ = [
    "Enveloped",
    "Flat",
    "GeneratedAsset",
    "GenerationTask",
    "SearchPage",
    "StockResource",
    "VendorPayload",
    "parse_payload",
    "unwrap",
]
