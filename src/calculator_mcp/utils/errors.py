# utils/errors.py
"""Error classification shared by the calculator tools."""

from fastmcp.exceptions import ToolError


class InvalidArgumentError(ToolError, ValueError):
    """Raised when a tool argument violates a precondition.

    Subclasses ToolError so FastMCP reports the message to the client as-is,
    and ValueError so plain Python callers can catch it the usual way.
    """
