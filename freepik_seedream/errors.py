"""Exception types for freepik_seedream.

Every exception carries a stable ``code`` attribute so the MCP layer can
surface structured errors without inspecting messages.
"""

from __future__ import annotations


class FreepikError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str, code: str = "freepik_error") -> None:
        """Initialize FreepikError.

        Args:
            message: Error description.
            code: Error code for structured error handling.
        """
        super().__init__(message)
        self.code = code


class ConfigurationError(FreepikError):
    """Raised when the API key is missing or the configuration is invalid."""

    def __init__(self, message: str, code: str = "configuration") -> None:
        super().__init__(message, code)


class VendorError(FreepikError):
    """Raised when the Freepik API answers with a non-success status."""

    def __init__(self, status_code: int, body: str, code: str = "vendor_error") -> None:
        """Initialize VendorError.

        Args:
            status_code: HTTP status returned by the vendor (0 if no response).
            body: Response body text, or the transport error description.
            code: Error code for structured error handling.
        """
        super().__init__(f"Freepik API error ({status_code}): {body}", code)
        self.status_code = status_code
        self.body = body


class GenerationFailed(FreepikError):
    """Raised when the vendor reports a task as failed."""

    def __init__(self, task_id: str, code: str = "generation_failed") -> None:
        super().__init__(f"Generation failed for task {task_id}", code)
        self.task_id = task_id


class GenerationTimeout(FreepikError):
    """Raised when polling gives up before the task reaches a terminal state."""

    def __init__(
        self, task_id: str, attempts: int, code: str = "generation_timeout"
    ) -> None:
        super().__init__(
            f"Timeout waiting for task {task_id} after {attempts} attempts", code
        )
        self.task_id = task_id
        self.attempts = attempts


__all__ = [
    "ConfigurationError",
    "FreepikError",
    "GenerationFailed",
    "GenerationTimeout",
    "VendorError",
]
