"""Locate a task by a fragment of its text.

Matching is a case-insensitive substring test against ``Task.content``.
The first task, in the order the service returned the collection, wins;
there is no ranking between several matches.
"""

from __future__ import annotations

from typing import Iterable

from todoist_mcp.core.models import Task


class TaskNotFound(LookupError):
    """No task content contains the search fragment.

    Attributes:
        fragment: The original (un-lowered) search text
    """

    def __init__(self, fragment: str):
        self.fragment = fragment
        super().__init__(f'Could not find a task matching "{fragment}"')


def resolve_by_text(fragment: str, tasks: Iterable[Task]) -> Task:
    """Return the first task whose content contains ``fragment``.

    Raises:
        TaskNotFound: If no task matches.
    """
    needle = fragment.lower()
    for task in tasks:
        if needle in task.content.lower():
            return task
    raise TaskNotFound(fragment)
