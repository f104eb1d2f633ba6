"""Task command handlers.

Update, delete, and complete locate their target by name in two phases:
a fresh fetch of all active tasks plus a first-match text search, then the
mutating call with the resolved identifier. The mutation never runs when the
search finds nothing.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from todoist_mcp.core.client import RemoteServiceError, TodoistClient
from todoist_mcp.core.models import Task
from todoist_mcp.core.rendering import (
    render_completed_task,
    render_created_task,
    render_deleted_task,
    render_task_list,
    render_updated_task,
)
from todoist_mcp.core.resolver import resolve_by_text
from todoist_mcp.core.responses import (
    CommandResult,
    remote_error_result,
    success_result,
)
from todoist_mcp.schemas.arguments import (
    CreateTaskArgs,
    GetTasksArgs,
    TaskNameArgs,
    UpdateTaskArgs,
)
from todoist_mcp.tools.router import ActionDefinition

logger = logging.getLogger(__name__)

# Optional update fields, in the order they are sent
_UPDATE_FIELDS = ("content", "description", "due_string", "priority", "project_id")


def build_task_patch(args: UpdateTaskArgs) -> Dict[str, Any]:
    """Return only the fields the caller supplied."""
    patch: Dict[str, Any] = {}
    for name in _UPDATE_FIELDS:
        value = getattr(args, name)
        if value is not None:
            patch[name] = value
    return patch


def select_tasks(tasks: List[Task], *, priority: Optional[int], limit: int) -> List[Task]:
    """Apply the priority post-filter, then keep the first ``limit`` tasks.

    A non-positive limit disables truncation.
    """
    selected = tasks
    if priority is not None:
        selected = [task for task in selected if task.priority == priority]
    if limit > 0:
        selected = selected[:limit]
    return selected


async def find_task(client: TodoistClient, task_name: str) -> Task:
    """Fetch every active task and return the first whose content matches.

    Raises:
        TaskNotFound: If nothing matches.
    """
    tasks = await client.get_tasks()
    task = resolve_by_text(task_name, tasks)
    logger.debug("Resolved '%s' to task %s", task_name, task.id)
    return task


async def handle_create_task(*, client: TodoistClient, args: CreateTaskArgs) -> CommandResult:
    task = await client.add_task(
        args.content,
        description=args.description,
        project_id=args.project_id,
        due_string=args.due_string,
        priority=args.priority,
    )
    return success_result(render_created_task(task))


async def handle_get_tasks(*, client: TodoistClient, args: GetTasksArgs) -> CommandResult:
    tasks = await client.get_tasks(project_id=args.project_id, filter=args.filter)
    selected = select_tasks(tasks, priority=args.priority, limit=args.limit)
    return success_result(
        render_task_list(selected),
        meta={"returned": len(selected), "fetched": len(tasks)},
    )


async def handle_update_task(*, client: TodoistClient, args: UpdateTaskArgs) -> CommandResult:
    task = await find_task(client, args.task_name)
    patch = build_task_patch(args)

    try:
        updated = await client.update_task(task.id, **patch)
    except RemoteServiceError as exc:
        logger.warning("Updating task %s failed: %s", task.id, exc)
        return remote_error_result(
            f"Error updating task: {exc}",
            authentication=exc.status_code in (401, 403),
        )

    return success_result(render_updated_task(task.content, updated))


async def handle_delete_task(*, client: TodoistClient, args: TaskNameArgs) -> CommandResult:
    task = await find_task(client, args.task_name)
    await client.delete_task(task.id)
    return success_result(render_deleted_task(task))


async def handle_complete_task(*, client: TodoistClient, args: TaskNameArgs) -> CommandResult:
    task = await find_task(client, args.task_name)
    await client.close_task(task.id)
    return success_result(render_completed_task(task))


TASK_ACTIONS = [
    ActionDefinition(
        name="todoist_create_task",
        handler=handle_create_task,
        summary="Create a task",
    ),
    ActionDefinition(
        name="todoist_get_tasks",
        handler=handle_get_tasks,
        summary="List tasks with server-side and priority filters",
    ),
    ActionDefinition(
        name="todoist_update_task",
        handler=handle_update_task,
        summary="Find a task by name and apply a sparse update",
    ),
    ActionDefinition(
        name="todoist_delete_task",
        handler=handle_delete_task,
        summary="Find a task by name and delete it",
    ),
    ActionDefinition(
        name="todoist_complete_task",
        handler=handle_complete_task,
        summary="Find a task by name and close it",
    ),
]
