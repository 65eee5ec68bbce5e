"""Error definitions for MCP tools.

This module defines structured error types with stable codes
that can be surfaced to MCP clients, and the conversion from the
exceptions raised by freepik_seedream.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from freepik_seedream.errors import (
    FreepikError,
    GenerationTimeout,
    VendorError,
)

# Error code constants
CONFIGURATION_ERROR = "configuration"
VALIDATION_ERROR = "validation"
VENDOR_ERROR = "vendor_error"
GENERATION_FAILED = "generation_failed"
GENERATION_TIMEOUT = "generation_timeout"
UNKNOWN_TOOL = "unknown_tool"
INTERNAL_ERROR = "internal_error"


class UnknownToolError(LookupError):
    """Raised when a tool call names a tool that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name
        self.code = UNKNOWN_TOOL


@dataclass
class MCPError:
    """Structured error response for MCP tools.

    Attributes:
        code: Stable error code for programmatic handling.
        message: Human-readable error message.
        details: Optional additional error details.
    """

    code: str
    message: str
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result

    def to_text(self) -> str:
        """Render as the text content of an error tool result."""
        return f"Error: {self.message}"


def make_error(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> MCPError:
    """Create an MCPError instance.

    Args:
        code: Stable error code.
        message: Human-readable message.
        details: Optional additional details.

    Returns:
        MCPError instance.
    """
    return MCPError(code=code, message=message, details=details)


def configuration_error(message: str) -> MCPError:
    """Create a configuration error."""
    return make_error(CONFIGURATION_ERROR, message)


def validation_error(message: str, details: dict[str, Any] | None = None) -> MCPError:
    """Create a validation error."""
    return make_error(VALIDATION_ERROR, message, details)


def from_validation_error(tool_name: str, exc: ValidationError) -> MCPError:
    """Summarize a pydantic ValidationError raised for tool arguments."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "arguments"
        problems.append(f"{location}: {err['msg']}")
    return validation_error(
        f"Invalid arguments for {tool_name}: " + "; ".join(problems),
        details={"errors": problems},
    )


def from_exception(exc: BaseException) -> MCPError:
    """Convert an exception raised while running a tool into an MCPError."""
    if isinstance(exc, VendorError):
        return make_error(
            exc.code,
            str(exc),
            details={"status_code": exc.status_code},
        )
    if isinstance(exc, GenerationTimeout):
        return make_error(
            exc.code,
            str(exc),
            details={"task_id": exc.task_id, "attempts": exc.attempts},
        )
    if isinstance(exc, FreepikError):
        task_id = getattr(exc, "task_id", None)
        return make_error(
            exc.code,
            str(exc),
            details={"task_id": task_id} if task_id else None,
        )
    if isinstance(exc, UnknownToolError):
        return make_error(UNKNOWN_TOOL, str(exc), details={"name": exc.name})
    return make_error(INTERNAL_ERROR, str(exc) or type(exc).__name__)


__all__ = [
    "CONFIGURATION_ERROR",
    "GENERATION_FAILED",
    "GENERATION_TIMEOUT",
    "INTERNAL_ERROR",
    "MCPError",
    "UNKNOWN_TOOL",
    "UnknownToolError",
    "VALIDATION_ERROR",
    "VENDOR_ERROR",
    "configuration_error",
    "from_exception",
    "from_validation_error",
    "make_error",
    "validation_error",
]
