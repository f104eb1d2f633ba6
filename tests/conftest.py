"""
Root pytest configuration and shared fixtures.

Provides an in-memory stand-in for the Todoist client that records every
call, plus small builders for task and project payloads.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from todoist_mcp.core.client import RemoteServiceError
from todoist_mcp.core.models import Due, Project, Task
from todoist_mcp.tools.dispatcher import CommandDispatcher


def make_task(
    task_id: str,
    content: str,
    *,
    description: str = "",
    project_id: Optional[str] = None,
    due: Optional[str] = None,
    priority: Optional[int] = None,
) -> Task:
    """Build a Task the way the client would after parsing a payload."""
    return Task(
        id=task_id,
        content=content,
        description=description,
        project_id=project_id,
        due=Due(string=due) if due else None,
        priority=priority,
    )


def make_project(
    project_id: str,
    name: str,
    *,
    color: str = "charcoal",
    parent_id: Optional[str] = None,
    is_favorite: bool = False,
) -> Project:
    return Project(
        id=project_id,
        name=name,
        color=color,
        parent_id=parent_id,
        is_favorite=is_favorite,
    )


class FakeTodoistClient:
    """Records calls and serves canned tasks and projects.

    Set ``fail_on`` to a method name to make that method raise
    ``fail_with`` (a RemoteServiceError by default).
    """

    def __init__(
        self,
        tasks: Optional[List[Task]] = None,
        projects: Optional[List[Project]] = None,
    ):
        self.tasks: List[Task] = list(tasks or [])
        self.projects: List[Project] = list(projects or [])
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_on: Optional[str] = None
        self.fail_with: Exception = RemoteServiceError("Todoist API error 500: boom", status_code=500)
        self._next_id = 1000

    def _record(self, method: str, /, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))
        if self.fail_on == method:
            raise self.fail_with

    def calls_to(self, name: str) -> List[Dict[str, Any]]:
        return [kwargs for called, kwargs in self.calls if called == name]

    def _new_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    # Tasks

    async def add_task(self, content, *, description=None, project_id=None, due_string=None, priority=None):
        self._record(
            "add_task",
            content=content,
            description=description,
            project_id=project_id,
            due_string=due_string,
            priority=priority,
        )
        task = make_task(
            self._new_id(),
            content,
            description=description or "",
            project_id=project_id,
            due=due_string,
            priority=priority,
        )
        self.tasks.append(task)
        return task

    async def get_tasks(self, *, project_id=None, filter=None):
        self._record("get_tasks", project_id=project_id, filter=filter)
        if project_id:
            return [task for task in self.tasks if task.project_id == project_id]
        return list(self.tasks)

    async def update_task(self, task_id, **fields):
        self._record("update_task", task_id=task_id, fields=fields)
        current = next(task for task in self.tasks if task.id == task_id)
        due_string = fields.get("due_string")
        updated = Task(
            id=current.id,
            content=fields.get("content", current.content),
            description=fields.get("description", current.description),
            project_id=fields.get("project_id", current.project_id),
            due=Due(string=due_string) if due_string else current.due,
            priority=fields.get("priority", current.priority),
        )
        self.tasks = [updated if task.id == task_id else task for task in self.tasks]
        return updated

    async def delete_task(self, task_id):
        self._record("delete_task", task_id=task_id)
        self.tasks = [task for task in self.tasks if task.id != task_id]

    async def close_task(self, task_id):
        self._record("close_task", task_id=task_id)
        self.tasks = [task for task in self.tasks if task.id != task_id]

    # Projects

    async def get_projects(self):
        self._record("get_projects")
        return list(self.projects)

    async def get_project(self, project_id):
        self._record("get_project", project_id=project_id)
        for project in self.projects:
            if project.id == project_id:
                return project
        raise RemoteServiceError("Todoist API error 404: Project not found", status_code=404)

    async def add_project(self, name, *, parent_id=None, color=None, is_favorite=None, view_style=None):
        self._record(
            "add_project",
            name=name,
            parent_id=parent_id,
            color=color,
            is_favorite=is_favorite,
            view_style=view_style,
        )
        project = Project(
            id=self._new_id(),
            name=name,
            color=color or "charcoal",
            parent_id=parent_id,
            is_favorite=bool(is_favorite),
            view_style=view_style or "list",
        )
        self.projects.append(project)
        return project

    async def update_project(self, project_id, **fields):
        self._record("update_project", project_id=project_id, fields=fields)
        current = await self.get_project(project_id)
        updated = Project(
            id=current.id,
            name=fields.get("name", current.name),
            color=fields.get("color", current.color),
            parent_id=current.parent_id,
            is_favorite=fields.get("is_favorite", current.is_favorite),
            view_style=fields.get("view_style", current.view_style),
        )
        self.projects = [updated if p.id == project_id else p for p in self.projects]
        return updated

    async def delete_project(self, project_id):
        self._record("delete_project", project_id=project_id)
        self.projects = [p for p in self.projects if p.id != project_id]

    async def aclose(self):
        self._record("aclose")


@pytest.fixture
def sample_tasks() -> List[Task]:
    return [
        make_task("1", "Buy milk", due="tomorrow", priority=1),
        make_task("2", "Update whiteboard notes", description="Sprint board", priority=4),
        make_task("3", "Call the plumber", project_id="p1", priority=4),
    ]


@pytest.fixture
def sample_projects() -> List[Project]:
    return [
        make_project("p1", "Home", color="blue", is_favorite=True),
        make_project("p2", "Errands", parent_id="p1"),
    ]


@pytest.fixture
def fake_client(sample_tasks, sample_projects) -> FakeTodoistClient:
    return FakeTodoistClient(tasks=sample_tasks, projects=sample_projects)


@pytest.fixture
def dispatcher(fake_client) -> CommandDispatcher:
    return CommandDispatcher(fake_client)
