"""Core building blocks for todoist-mcp: client, models, validation, rendering."""
