"""Shared type definitions for freepik_seedream.

This module contains the enumerations shared by the client, the MCP tool
schemas, and the CLI, to avoid circular imports.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Status of a vendor generation task."""

    CREATED = "CREATED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can occur."""
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


class TaskKind(str, Enum):
    """Selects which status endpoint applies to a task."""

    TEXT_TO_IMAGE = "text-to-image"
    EDIT = "edit"
    MYSTIC = "mystic"


class AspectRatio(str, Enum):
    """Aspect ratios accepted by Seedream 4."""

    SQUARE_1_1 = "square_1_1"
    CLASSIC_4_3 = "classic_4_3"
    TRADITIONAL_3_4 = "traditional_3_4"
    WIDESCREEN_16_9 = "widescreen_16_9"
    SOCIAL_STORY_9_16 = "social_story_9_16"
    LANDSCAPE_3_2 = "landscape_3_2"
    PORTRAIT_2_3 = "portrait_2_3"


class MysticAspectRatio(str, Enum):
    """Aspect ratios accepted by the legacy Mystic engine."""

    SQUARE_1_1 = "square_1_1"
    CLASSIC_4_3 = "classic_4_3"
    TRADITIONAL_3_4 = "traditional_3_4"
    WIDESCREEN_16_9 = "widescreen_16_9"
    SOCIAL_STORY_9_16 = "social_story_9_16"


class MysticResolution(str, Enum):
    """Output resolution for Mystic."""

    RES_2K = "2k"
    RES_4K = "4k"


class MysticEngine(str, Enum):
    """Mystic rendering engine."""

    AUTOMATIC = "automatic"
    ILLUSIO = "magnific_illusio"
    SHARPY = "magnific_sharpy"
    SPARKLE = "magnific_sparkle"


class SearchOrder(str, Enum):
    """Sort order for stock searches."""

    RELEVANCE = "relevance"
    RECENT = "recent"


class ContentType(str, Enum):
    """Stock content type filter."""

    PHOTO = "photo"
    VECTOR = "vector"
    PSD = "psd"
    ALL = "all"


class Orientation(str, Enum):
    """Stock orientation filter."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    SQUARE = "square"
    PANORAMIC = "panoramic"
    ALL = "all"


class License(str, Enum):
    """Stock license filter."""

    FREEMIUM = "freemium"
    PREMIUM = "premium"
    ALL = "all"


__all__ = [
    "AspectRatio",
    "ContentType",
    "License",
    "MysticAspectRatio",
    "MysticEngine",
    "MysticResolution",
    "Orientation",
    "SearchOrder",
    "TaskKind",
    "TaskStatus",
]
