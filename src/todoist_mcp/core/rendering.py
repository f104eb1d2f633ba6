"""
Text rendering of tasks and projects for command results.
Every function is pure; optional lines are omitted when the value is empty.
"""

from typing import List, Optional, Sequence

from todoist_mcp.core.models import Project, Task

NO_TASKS_FOUND = "No tasks found matching the criteria"
NO_PROJECTS_FOUND = "No projects found"


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _due_string(task: Task) -> Optional[str]:
    return task.due.string if task.due else None


# Tasks

def render_created_task(task: Task) -> str:
    lines = ["Task created:", f"Title: {task.content}"]
    if task.description:
        lines.append(f"Description: {task.description}")
    if task.project_id:
        lines.append(f"Project ID: {task.project_id}")
    if task.due:
        lines.append(f"Due: {_due_string(task)}")
    if task.priority:
        lines.append(f"Priority: {task.priority}")
    return "\n".join(lines)


def render_updated_task(original_content: str, task: Task) -> str:
    """Render an update, headed by the content the task had before it."""
    lines = [f'Task "{original_content}" updated:', f"New Title: {task.content}"]
    if task.description:
        lines.append(f"New Description: {task.description}")
    if task.project_id:
        lines.append(f"New Project ID: {task.project_id}")
    if task.due:
        lines.append(f"New Due Date: {_due_string(task)}")
    if task.priority:
        lines.append(f"New Priority: {task.priority}")
    return "\n".join(lines)


def render_task_item(task: Task) -> str:
    lines = [f"- {task.content}"]
    if task.description:
        lines.append(f"  Description: {task.description}")
    if task.due:
        lines.append(f"  Due: {_due_string(task)}")
    if task.priority:
        lines.append(f"  Priority: {task.priority}")
    return "\n".join(lines)


def render_task_list(tasks: Sequence[Task]) -> str:
    if not tasks:
        return NO_TASKS_FOUND
    return "\n\n".join(render_task_item(task) for task in tasks)


def render_deleted_task(task: Task) -> str:
    return f'Successfully deleted task: "{task.content}"'


def render_completed_task(task: Task) -> str:
    return f'Successfully completed task: "{task.content}"'


# Projects

def render_project_item(project: Project) -> str:
    lines = [f"- {project.name}", f"  ID: {project.id}"]
    if project.parent_id:
        lines.append(f"  Parent ID: {project.parent_id}")
    lines.append(f"  Color: {project.color}")
    lines.append(f"  Favorite: {_bool(project.is_favorite)}")
    return "\n".join(lines)


def render_project_list(projects: Sequence[Project]) -> str:
    if not projects:
        return NO_PROJECTS_FOUND
    return "\n\n".join(render_project_item(project) for project in projects)


def render_project(
    project: Project,
    header: str = "Project Details:",
    include_parent: bool = True,
) -> str:
    """
    Render a single project under ``header``.

    Args:
        project: Project to render
        header: First line ("Project Details:", "Project created:", ...)
        include_parent: Whether to emit the Parent ID line when set
    """
    lines: List[str] = [header, f"Name: {project.name}", f"ID: {project.id}"]
    if include_parent and project.parent_id:
        lines.append(f"Parent ID: {project.parent_id}")
    lines.append(f"Color: {project.color}")
    lines.append(f"Favorite: {_bool(project.is_favorite)}")
    return "\n".join(lines)


def render_deleted_project(project_id: str) -> str:
    return f"Successfully deleted project with ID: {project_id}"
