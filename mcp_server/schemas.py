"""Pydantic schemas for MCP tool arguments and payloads.

The argument models double as the JSON schemas advertised by tools/list,
so bounds, enumerations and defaults live in exactly one place.
"""

from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field

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


class ToolArguments(BaseModel):
    """Base for tool argument models; unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")


class SeedreamGenerateArgs(ToolArguments):
    """Arguments for seedream_generate."""

    prompt: str = Field(min_length=1, description="Text description of the image to generate")
    aspect_ratio: AspectRatio = Field(
        default=AspectRatio.SQUARE_1_1, description="Image aspect ratio"
    )
    guidance_scale: float = Field(
        default=2.5,
        ge=1,
        le=10,
        description="How closely to follow the prompt (1-10, default 2.5)",
    )
    seed: int | None = Field(default=None, description="Random seed for reproducibility")
    wait_for_result: bool = Field(
        default=True, description="Wait for image generation to complete"
    )


class SeedreamEditArgs(ToolArguments):
    """Arguments for seedream_edit."""

    prompt: str = Field(min_length=1, description="Instructions for editing the image")
    image_url: AnyHttpUrl = Field(description="URL of the image to edit")
    guidance_scale: float = Field(
        default=2.5, ge=1, le=10, description="How closely to follow the prompt"
    )
    seed: int | None = Field(default=None, description="Random seed for reproducibility")
    wait_for_result: bool = Field(default=True, description="Wait for edit to complete")


class SeedreamStatusArgs(ToolArguments):
    """Arguments for seedream_status."""

    task_id: str = Field(min_length=1, description="Task ID to check")
    type: Literal["text-to-image", "edit"] = Field(
        default="text-to-image", description="Type of task"
    )

    def kind(self) -> TaskKind:
        return TaskKind(self.type)


class SearchResourcesArgs(ToolArguments):
    """Arguments for search_resources."""

    term: str = Field(min_length=1, description="Search term")
    limit: int = Field(default=20, ge=1, le=200, description="Number of results (max 200)")
    order: SearchOrder = Field(default=SearchOrder.RELEVANCE, description="Sort order")
    content_type: ContentType = Field(
        default=ContentType.ALL, description="Filter by content type"
    )
    orientation: Orientation = Field(
        default=Orientation.ALL, description="Filter by orientation"
    )
    license: License = Field(default=License.ALL, description="Filter by license")


class ResourceIdArgs(ToolArguments):
    """Arguments for get_resource and download_resource."""

    id: int = Field(ge=1, description="Resource ID")


class MysticGenerateArgs(ToolArguments):
    """Arguments for the legacy mystic_generate tool."""

    prompt: str = Field(min_length=1, description="Text description of the image")
    resolution: MysticResolution = Field(
        default=MysticResolution.RES_2K, description="Image resolution"
    )
    aspect_ratio: MysticAspectRatio = Field(
        default=MysticAspectRatio.SQUARE_1_1, description="Aspect ratio"
    )
    realism: bool = Field(default=False, description="Enable realistic style")
    engine: MysticEngine = Field(
        default=MysticEngine.AUTOMATIC, description="Rendering engine"
    )
    creative_detailing: int = Field(
        default=50, ge=0, le=100, description="Level of creative detail (0-100)"
    )
    wait_for_result: bool = Field(default=True, description="Wait for completion")


class TaskStarted(BaseModel):
    """Reply for a generation started without waiting."""

    model_config = ConfigDict(extra="forbid")

    task_id: str
    status: str
    message: str


class ResourceSummary(BaseModel):
    """Projection of a stock resource for search results."""

    model_config = ConfigDict(extra="forbid")

    id: int
    title: str | None = None
    preview: str | None = None
    author: str | None = None


__all__ = [
    "MysticGenerateArgs",
    "ResourceIdArgs",
    "ResourceSummary",
    "SearchResourcesArgs",
    "SeedreamEditArgs",
    "SeedreamGenerateArgs",
    "SeedreamStatusArgs",
    "TaskStarted",
    "ToolArguments",
]
