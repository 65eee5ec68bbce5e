"""Freepik Seedream MCP - expose the Freepik generation and stock APIs as MCP tools.

This package provides the async Freepik API client, the task completion
poller, configuration, and the command-line interface.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
