"""Static catalog of the commands exposed to MCP clients.

Each ``CommandDescriptor`` carries the wire name, the description shown to
the calling agent, the field schema used by validation, and the argument
type validation produces. ``CommandDescriptor.input_schema()`` renders the
JSON schema advertised through ``tools/list``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple, Type

from todoist_mcp.schemas.arguments import (
    CreateProjectArgs,
    CreateTaskArgs,
    GetTasksArgs,
    NoArgs,
    ProjectIdArgs,
    TaskNameArgs,
    UpdateProjectArgs,
    UpdateTaskArgs,
)

FIELD_TYPES = ("string", "number", "boolean")

PRIORITY_VALUES: Tuple[int, ...] = (1, 2, 3, 4)
VIEW_STYLE_VALUES: Tuple[str, ...] = ("list", "board")
DEFAULT_TASK_LIMIT = 10


@dataclass(frozen=True)
class FieldSpec:
    """Schema of one argument field.

    Attributes:
        name: Argument key
        type: One of "string", "number", "boolean"
        description: Text shown to the calling agent
        required: Whether the caller must supply the field
        enum: Permitted values, if restricted
        default: Value used when the caller omits the field
    """

    name: str
    type: str
    description: str
    required: bool = False
    enum: Optional[Tuple[Any, ...]] = None
    default: Any = None

    def __post_init__(self) -> None:
        if self.type not in FIELD_TYPES:
            raise ValueError(f"Unsupported field type '{self.type}' for '{self.name}'")

    def to_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class CommandDescriptor:
    """Immutable description of one command."""

    name: str
    description: str
    fields: Tuple[FieldSpec, ...] = ()
    arguments_type: Type[Any] = NoArgs

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.required)

    def input_schema(self) -> Dict[str, Any]:
        """Render the JSON schema for this command's arguments."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {spec.name: spec.to_schema() for spec in self.fields},
        }
        if self.required_fields:
            schema["required"] = list(self.required_fields)
        return schema


def _priority(description: str) -> FieldSpec:
    return FieldSpec("priority", "number", description, enum=PRIORITY_VALUES)


def _view_style() -> FieldSpec:
    return FieldSpec(
        "view_style",
        "string",
        "Display style: 'list' or 'board' (optional)",
        enum=VIEW_STYLE_VALUES,
    )


def _task_name(verb: str) -> FieldSpec:
    return FieldSpec(
        "task_name",
        "string",
        f"Name/content of the task to search for and {verb}",
        required=True,
    )


def _project_id(description: str) -> FieldSpec:
    return FieldSpec("project_id", "string", description, required=True)


COMMANDS: Tuple[CommandDescriptor, ...] = (
    CommandDescriptor(
        name="todoist_create_task",
        description=(
            "Create a new task in Todoist with optional description, "
            "due date, and priority"
        ),
        fields=(
            FieldSpec(
                "content", "string", "The content/title of the task", required=True
            ),
            FieldSpec(
                "description", "string", "Detailed description of the task (optional)"
            ),
            FieldSpec(
                "project_id", "string", "ID of the project to add the task to (optional)"
            ),
            FieldSpec(
                "due_string",
                "string",
                "Natural language due date like 'tomorrow', 'next Monday', "
                "'Jan 23' (optional)",
            ),
            _priority("Task priority from 1 (normal) to 4 (urgent) (optional)"),
        ),
        arguments_type=CreateTaskArgs,
    ),
    CommandDescriptor(
        name="todoist_get_tasks",
        description="Get a list of tasks from Todoist with various filters",
        fields=(
            FieldSpec("project_id", "string", "Filter tasks by project ID (optional)"),
            FieldSpec(
                "filter",
                "string",
                "Natural language filter like 'today', 'tomorrow', 'next week', "
                "'priority 1', 'overdue' (optional)",
            ),
            _priority("Filter by priority level (1-4) (optional)"),
            FieldSpec(
                "limit",
                "number",
                "Maximum number of tasks to return (optional)",
                default=DEFAULT_TASK_LIMIT,
            ),
        ),
        arguments_type=GetTasksArgs,
    ),
    CommandDescriptor(
        name="todoist_update_task",
        description=(
            "Update an existing task in Todoist by searching for it by name "
            "and then updating it"
        ),
        fields=(
            _task_name("update"),
            FieldSpec("content", "string", "New content/title for the task (optional)"),
            FieldSpec(
                "project_id", "string", "New project ID to move the task to (optional)"
            ),
            FieldSpec("description", "string", "New description for the task (optional)"),
            FieldSpec(
                "due_string",
                "string",
                "New due date in natural language like 'tomorrow', "
                "'next Monday' (optional)",
            ),
            _priority("New priority level from 1 (normal) to 4 (urgent) (optional)"),
        ),
        arguments_type=UpdateTaskArgs,
    ),
    CommandDescriptor(
        name="todoist_delete_task",
        description="Delete a task from Todoist by searching for it by name",
        fields=(_task_name("delete"),),
        arguments_type=TaskNameArgs,
    ),
    CommandDescriptor(
        name="todoist_complete_task",
        description="Mark a task as complete by searching for it by name",
        fields=(_task_name("complete"),),
        arguments_type=TaskNameArgs,
    ),
    CommandDescriptor(
        name="todoist_get_projects",
        description="Get all projects from Todoist",
        arguments_type=NoArgs,
    ),
    CommandDescriptor(
        name="todoist_get_project",
        description="Get a specific project by ID",
        fields=(_project_id("ID of the project to retrieve"),),
        arguments_type=ProjectIdArgs,
    ),
    CommandDescriptor(
        name="todoist_create_project",
        description="Create a new project in Todoist",
        fields=(
            FieldSpec("name", "string", "Name of the project", required=True),
            FieldSpec("parent_id", "string", "Parent project ID (optional)"),
            FieldSpec("color", "string", "The color of the project icon (optional)"),
            FieldSpec(
                "is_favorite", "boolean", "Whether the project is a favorite (optional)"
            ),
            _view_style(),
        ),
        arguments_type=CreateProjectArgs,
    ),
    CommandDescriptor(
        name="todoist_update_project",
        description="Update an existing project in Todoist",
        fields=(
            _project_id("ID of the project to update"),
            FieldSpec("name", "string", "New name for the project (optional)"),
            FieldSpec("color", "string", "New color for the project icon (optional)"),
            FieldSpec(
                "is_favorite", "boolean", "Whether the project is a favorite (optional)"
            ),
            _view_style(),
        ),
        arguments_type=UpdateProjectArgs,
    ),
    CommandDescriptor(
        name="todoist_delete_project",
        description="Delete a project and all its tasks",
        fields=(_project_id("ID of the project to delete"),),
        arguments_type=ProjectIdArgs,
    ),
)

_REGISTRY: Dict[str, CommandDescriptor] = {}
for _descriptor in COMMANDS:
    if _descriptor.name in _REGISTRY:
        raise ValueError(f"Duplicate command '{_descriptor.name}'")
    _REGISTRY[_descriptor.name] = _descriptor


def describe(name: str) -> Optional[CommandDescriptor]:
    """Return the descriptor registered under ``name``, or None."""
    return _REGISTRY.get(name)


def list_all() -> Sequence[CommandDescriptor]:
    """Return every registered descriptor in registration order."""
    return COMMANDS


def command_names() -> Tuple[str, ...]:
    return tuple(descriptor.name for descriptor in COMMANDS)
