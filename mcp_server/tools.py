"""Tool registry.

Each tool pairs a name and description with a pydantic argument model and an
async handler. Handlers are thin wrappers around FreepikClient calls: they
return the success text and let exceptions propagate to the router, which
turns them into error results.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from mcp import types
from pydantic import BaseModel

from freepik_seedream.client import FreepikClient, SearchQuery
from freepik_seedream.models import GenerationTask
from freepik_seedream.poller import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL
from freepik_seedream.types import TaskKind, TaskStatus
from mcp_server.schemas import (
    MysticGenerateArgs,
    ResourceIdArgs,
    ResourceSummary,
    SearchResourcesArgs,
    SeedreamEditArgs,
    SeedreamGenerateArgs,
    SeedreamStatusArgs,
    TaskStarted,
)

# Search results shown inline, regardless of the requested limit
MAX_SUMMARIZED_RESULTS = 10

ArgsT = TypeVar("ArgsT", bound=BaseModel)


@dataclass(frozen=True)
class PollPolicy:
    """How long a waiting tool polls before giving up."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    interval: float = DEFAULT_POLL_INTERVAL


ToolHandler = Callable[[FreepikClient, Any, PollPolicy], Awaitable[str]]


@dataclass(frozen=True)
class ToolSpec(Generic[ArgsT]):
    """A registered MCP tool."""

    name: str
    description: str
    arguments: type[ArgsT]
    handler: ToolHandler

    def to_tool(self) -> types.Tool:
        """Describe the tool for tools/list."""
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        schema.pop("description", None)
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=schema,
        )


TOOLS: dict[str, ToolSpec[Any]] = {}


def tool(
    name: str, description: str, arguments: type[ArgsT]
) -> Callable[[ToolHandler], ToolHandler]:
    """Register a handler under a tool name."""

    def decorator(handler: ToolHandler) -> ToolHandler:
        TOOLS[name] = ToolSpec(name, description, arguments, handler)
        return handler

    return decorator


def to_json(value: Any) -> str:
    """Pretty JSON dump used for raw results."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", exclude_none=True)
    return json.dumps(value, indent=2, ensure_ascii=False)


def format_completed(task: GenerationTask, headline: str) -> str:
    """Headline plus first image URL, or the raw task when there is none."""
    url = task.first_url
    if url:
        return f"{headline}\n\nURL: {url}"
    return to_json(task)


def format_started(task: GenerationTask, message: str) -> str:
    started = TaskStarted(task_id=task.task_id, status=task.status, message=message)
    return to_json(started)


@tool(
    "seedream_generate",
    "Generate an image using Seedream 4.0 (ByteDance) - High quality 4K capable",
    SeedreamGenerateArgs,
)
async def seedream_generate(
    client: FreepikClient, args: SeedreamGenerateArgs, poll: PollPolicy
) -> str:
    task = await client.text_to_image(
        args.prompt,
        aspect_ratio=args.aspect_ratio,
        guidance_scale=args.guidance_scale,
        seed=args.seed,
    )

    if not args.wait_for_result:
        return format_started(
            task, "Generation started. Use seedream_status to check progress."
        )

    completed = await client.wait_for_completion(
        task.task_id,
        TaskKind.TEXT_TO_IMAGE,
        max_attempts=poll.max_attempts,
        interval=poll.interval,
    )
    return format_completed(completed, "Image generated successfully!")


@tool(
    "seedream_edit",
    "Edit an existing image using Seedream 4.0 with natural language instructions",
    SeedreamEditArgs,
)
async def seedream_edit(
    client: FreepikClient, args: SeedreamEditArgs, poll: PollPolicy
) -> str:
    task = await client.edit_image(
        args.prompt,
        str(args.image_url),
        guidance_scale=args.guidance_scale,
        seed=args.seed,
    )

    if not args.wait_for_result:
        return format_started(task, "Edit started. Use seedream_status to check progress.")

    completed = await client.wait_for_completion(
        task.task_id,
        TaskKind.EDIT,
        max_attempts=poll.max_attempts,
        interval=poll.interval,
    )
    return format_completed(completed, "Image edited successfully!")


@tool(
    "seedream_status",
    "Check the status of a Seedream 4 generation task",
    SeedreamStatusArgs,
)
async def seedream_status(
    client: FreepikClient, args: SeedreamStatusArgs, poll: PollPolicy
) -> str:
    task = await client.check_status(args.task_id, args.kind())

    url = task.first_url
    if task.is_completed and url:
        return f"Status: {TaskStatus.COMPLETED.value}\n\nImage URL: {url}"
    return to_json(task)


@tool(
    "search_resources",
    "Search for Freepik stock resources (photos, vectors, PSDs)",
    SearchResourcesArgs,
)
async def search_resources(
    client: FreepikClient, args: SearchResourcesArgs, poll: PollPolicy
) -> str:
    page = await client.search_resources(
        SearchQuery(
            term=args.term,
            limit=args.limit,
            order=args.order,
            content_type=args.content_type,
            orientation=args.orientation,
            license=args.license,
        )
    )

    shown = page.resources[: min(args.limit, MAX_SUMMARIZED_RESULTS)]
    summary = [
        ResourceSummary(
            id=r.id,
            title=r.title,
            preview=r.preview_url,
            author=r.author_name,
        ).model_dump(mode="json")
        for r in shown
    ]
    return (
        f'Found {page.total} results for "{args.term}"\n\n'
        f"Top {len(summary)} results:\n{to_json(summary)}"
    )


@tool(
    "get_resource",
    "Get detailed information about a specific Freepik resource",
    ResourceIdArgs,
)
async def get_resource(
    client: FreepikClient, args: ResourceIdArgs, poll: PollPolicy
) -> str:
    return to_json(await client.get_resource(args.id))


@tool(
    "download_resource",
    "Get download URL for a Freepik resource",
    ResourceIdArgs,
)
async def download_resource(
    client: FreepikClient, args: ResourceIdArgs, poll: PollPolicy
) -> str:
    url = await client.get_download_url(args.id)
    return f"Download URL: {url}"


@tool(
    "mystic_generate",
    "Generate an image using Freepik Mystic AI (legacy, use seedream_generate "
    "for better results)",
    MysticGenerateArgs,
)
async def mystic_generate(
    client: FreepikClient, args: MysticGenerateArgs, poll: PollPolicy
) -> str:
    task = await client.mystic_generate(
        args.prompt,
        resolution=args.resolution,
        aspect_ratio=args.aspect_ratio,
        realism=args.realism,
        engine=args.engine,
        creative_detailing=args.creative_detailing,
    )

    if not args.wait_for_result:
        return format_started(task, "Mystic generation started.")

    completed = await client.wait_for_completion(
        task.task_id,
        TaskKind.MYSTIC,
        max_attempts=poll.max_attempts,
        interval=poll.interval,
    )
    return format_completed(completed, "Image generated successfully!")


__all__ = [
    "MAX_SUMMARIZED_RESULTS",
    "PollPolicy",
    "TOOLS",
    "ToolSpec",
    "format_completed",
    "to_json",
    "tool",
]
