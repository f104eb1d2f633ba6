"""Typed argument objects produced by validation, one per command.

Optional fields default to None, which means "not supplied by the caller".
Update handlers rely on that to build sparse patches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CreateTaskArgs:
    content: str
    description: Optional[str] = None
    project_id: Optional[str] = None
    due_string: Optional[str] = None
    priority: Optional[int] = None


@dataclass(frozen=True)
class GetTasksArgs:
    project_id: Optional[str] = None
    filter: Optional[str] = None
    priority: Optional[int] = None
    limit: int = 10


@dataclass(frozen=True)
class UpdateTaskArgs:
    task_name: str
    content: Optional[str] = None
    project_id: Optional[str] = None
    description: Optional[str] = None
    due_string: Optional[str] = None
    priority: Optional[int] = None


@dataclass(frozen=True)
class TaskNameArgs:
    """Arguments for commands that only locate a task by name."""

    task_name: str


@dataclass(frozen=True)
class NoArgs:
    pass


@dataclass(frozen=True)
class ProjectIdArgs:
    project_id: str


@dataclass(frozen=True)
class CreateProjectArgs:
    name: str
    parent_id: Optional[str] = None
    color: Optional[str] = None
    is_favorite: Optional[bool] = None
    view_style: Optional[str] = None


@dataclass(frozen=True)
class UpdateProjectArgs:
    project_id: str
    name: Optional[str] = None
    color: Optional[str] = None
    is_favorite: Optional[bool] = None
    view_style: Optional[str] = None
