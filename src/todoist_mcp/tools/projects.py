"""Project command handlers. Projects are always addressed by identifier."""

from __future__ import annotations

from typing import Any, Dict

from todoist_mcp.core.client import TodoistClient
from todoist_mcp.core.rendering import (
    render_deleted_project,
    render_project,
    render_project_list,
)
from todoist_mcp.core.responses import CommandResult, success_result
from todoist_mcp.schemas.arguments import (
    CreateProjectArgs,
    NoArgs,
    ProjectIdArgs,
    UpdateProjectArgs,
)
from todoist_mcp.tools.router import ActionDefinition

_UPDATE_FIELDS = ("name", "color", "is_favorite", "view_style")


def build_project_patch(args: UpdateProjectArgs) -> Dict[str, Any]:
    """Return only the fields the caller supplied.

    ``is_favorite=False`` is a supplied value and is kept.
    """
    return {
        name: getattr(args, name)
        for name in _UPDATE_FIELDS
        if getattr(args, name) is not None
    }


async def handle_get_projects(*, client: TodoistClient, args: NoArgs) -> CommandResult:
    projects = await client.get_projects()
    return success_result(render_project_list(projects), meta={"returned": len(projects)})


async def handle_get_project(*, client: TodoistClient, args: ProjectIdArgs) -> CommandResult:
    project = await client.get_project(args.project_id)
    return success_result(render_project(project))


async def handle_create_project(
    *, client: TodoistClient, args: CreateProjectArgs
) -> CommandResult:
    project = await client.add_project(
        args.name,
        parent_id=args.parent_id,
        color=args.color,
        is_favorite=args.is_favorite,
        view_style=args.view_style,
    )
    return success_result(render_project(project, header="Project created:"))


async def handle_update_project(
    *, client: TodoistClient, args: UpdateProjectArgs
) -> CommandResult:
    project = await client.update_project(args.project_id, **build_project_patch(args))
    return success_result(
        render_project(project, header="Project updated:", include_parent=False)
    )


async def handle_delete_project(
    *, client: TodoistClient, args: ProjectIdArgs
) -> CommandResult:
    await client.delete_project(args.project_id)
    return success_result(render_deleted_project(args.project_id))


PROJECT_ACTIONS = [
    ActionDefinition(
        name="todoist_get_projects",
        handler=handle_get_projects,
        summary="List all projects",
    ),
    ActionDefinition(
        name="todoist_get_project",
        handler=handle_get_project,
        summary="Fetch one project by ID",
    ),
    ActionDefinition(
        name="todoist_create_project",
        handler=handle_create_project,
        summary="Create a project",
    ),
    ActionDefinition(
        name="todoist_update_project",
        handler=handle_update_project,
        summary="Apply a sparse update to a project",
    ),
    ActionDefinition(
        name="todoist_delete_project",
        handler=handle_delete_project,
        summary="Delete a project and its tasks",
    ),
]
