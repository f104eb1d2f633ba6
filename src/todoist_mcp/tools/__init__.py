"""Command handlers and the dispatcher that routes to them."""

from todoist_mcp.tools.dispatcher import CommandDispatcher

__all__ = [
    "CommandDispatcher",
]
