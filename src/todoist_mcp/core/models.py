"""Read-only views of Todoist entities.

Instances are request-scoped snapshots parsed from API responses; the
Todoist service remains the owner of every field, including identifiers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Due:
    """Due date as returned by the service.

    ``string`` is the human form ("tomorrow", "every monday"); the structured
    fields are filled when the service resolved it to a date.
    """

    string: str
    date: Optional[str] = None
    datetime: Optional[str] = None
    is_recurring: bool = False
    timezone: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Due"]:
        if not data:
            return None
        return cls(
            string=str(data.get("string") or data.get("date") or ""),
            date=data.get("date"),
            datetime=data.get("datetime"),
            is_recurring=bool(data.get("is_recurring", False)),
            timezone=data.get("timezone"),
        )


@dataclass(frozen=True)
class Task:
    """A Todoist task."""

    id: str
    content: str
    description: str = ""
    project_id: Optional[str] = None
    due: Optional[Due] = None
    priority: Optional[int] = None
    is_completed: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Create a Task from an API payload.

        Raises:
            KeyError: If the payload has no ``id``.
        """
        priority = data.get("priority")
        return cls(
            id=str(data["id"]),
            content=str(data.get("content") or ""),
            description=str(data.get("description") or ""),
            project_id=_optional_str(data.get("project_id")),
            due=Due.from_dict(data.get("due")),
            priority=int(priority) if priority is not None else None,
            is_completed=bool(data.get("checked", data.get("is_completed", False))),
        )


@dataclass(frozen=True)
class Project:
    """A Todoist project."""

    id: str
    name: str
    color: str = ""
    parent_id: Optional[str] = None
    is_favorite: bool = False
    view_style: str = "list"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """Create a Project from an API payload.

        Raises:
            KeyError: If the payload has no ``id``.
        """
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            color=str(data.get("color") or ""),
            parent_id=_optional_str(data.get("parent_id")),
            is_favorite=bool(data.get("is_favorite", False)),
            view_style=str(data.get("view_style") or "list"),
        )


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)
