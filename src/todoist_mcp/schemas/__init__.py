"""Command schemas: the descriptor registry and typed argument objects."""

from todoist_mcp.schemas.commands import (
    COMMANDS,
    CommandDescriptor,
    FieldSpec,
    describe,
    list_all,
)

__all__ = [
    "COMMANDS",
    "CommandDescriptor",
    "FieldSpec",
    "describe",
    "list_all",
]
