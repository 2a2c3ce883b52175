"""Tool-layer exceptions."""

from __future__ import annotations


class ToolValidationError(ValueError):
    """Raised when tool arguments do not match the tool's input contract."""


class UnknownToolError(LookupError):
    """Raised by the dispatcher when no tool is registered under a name."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name
