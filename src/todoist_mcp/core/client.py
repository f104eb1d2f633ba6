"""Async client for the Todoist API.

Wraps the Todoist HTTP API (https://developer.todoist.com/api/v1/) with the
subset of task and project operations the command layer needs.

Error handling:
    - 401/403: AuthenticationError (bad or revoked token)
    - other 4xx/5xx: RemoteServiceError carrying the service's message
    - timeouts and connection failures: RemoteServiceError

No call is retried; every failure surfaces to the caller immediately.

Example usage:
    async with TodoistClient(api_token="0123...") as client:
        task = await client.add_task("Buy milk", due_string="tomorrow")
        tasks = await client.get_tasks(filter="today")
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from todoist_mcp.config import DEFAULT_API_BASE_URL, DEFAULT_TIMEOUT
from todoist_mcp.core.models import Project, Task

logger = logging.getLogger(__name__)

# Largest page the list endpoints accept
PAGE_SIZE = 200


class RemoteServiceError(Exception):
    """Raised when the Todoist API rejects or fails a call.

    Attributes:
        message: Human-readable error from the service or transport.
        status_code: HTTP status, or None for transport failures.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(RemoteServiceError):
    """Raised when the API token is missing, invalid, or lacks access."""


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class TodoistClient:
    """Typed async client for Todoist tasks and projects.

    Attributes:
        base_url: API base URL (default: https://api.todoist.com/api/v1)
        timeout: Request timeout in seconds (default: 30.0)
    """

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_token: Todoist API token sent as a bearer credential.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).

        Raises:
            ValueError: If no API token is provided.
        """
        if not api_token:
            raise ValueError("Todoist API token required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
            },
        )

    async def __aenter__(self) -> "TodoistClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def add_task(
        self,
        content: str,
        *,
        description: Optional[str] = None,
        project_id: Optional[str] = None,
        due_string: Optional[str] = None,
        priority: Optional[int] = None,
    ) -> Task:
        """Create a task. Fields left as None are not sent."""
        payload = _drop_none(
            {
                "content": content,
                "description": description,
                "project_id": project_id,
                "due_string": due_string,
                "priority": priority,
            }
        )
        data = await self._request("POST", "/tasks", json=payload)
        return Task.from_dict(data)

    async def get_tasks(
        self,
        *,
        project_id: Optional[str] = None,
        filter: Optional[str] = None,
    ) -> List[Task]:
        """List active tasks in the order the service returns them.

        ``filter`` is a Todoist filter query ("today", "p1 & overdue") and is
        interpreted by the service. The filter endpoint cannot be scoped to a
        project, so when both are given the project scope is applied to the
        filter's results.
        """
        if filter:
            items = await self._paginate("/tasks/filter", {"query": filter})
            tasks = [Task.from_dict(item) for item in items]
            if project_id:
                tasks = [task for task in tasks if task.project_id == project_id]
            return tasks

        params = _drop_none({"project_id": project_id})
        items = await self._paginate("/tasks", params)
        return [Task.from_dict(item) for item in items]

    async def update_task(self, task_id: str, **fields: Any) -> Task:
        """Apply ``fields`` to a task and return the updated task.

        Only the keys present in ``fields`` are sent, so omitted fields keep
        their current values.
        """
        data = await self._request("POST", f"/tasks/{task_id}", json=fields)
        return Task.from_dict(data)

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def close_task(self, task_id: str) -> None:
        """Mark a task as completed."""
        await self._request("POST", f"/tasks/{task_id}/close")

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def get_projects(self) -> List[Project]:
        items = await self._paginate("/projects", {})
        return [Project.from_dict(item) for item in items]

    async def get_project(self, project_id: str) -> Project:
        data = await self._request("GET", f"/projects/{project_id}")
        return Project.from_dict(data)

    async def add_project(
        self,
        name: str,
        *,
        parent_id: Optional[str] = None,
        color: Optional[str] = None,
        is_favorite: Optional[bool] = None,
        view_style: Optional[str] = None,
    ) -> Project:
        """Create a project. Fields left as None are not sent."""
        payload = _drop_none(
            {
                "name": name,
                "parent_id": parent_id,
                "color": color,
                "is_favorite": is_favorite,
                "view_style": view_style,
            }
        )
        data = await self._request("POST", "/projects", json=payload)
        return Project.from_dict(data)

    async def update_project(self, project_id: str, **fields: Any) -> Project:
        """Apply ``fields`` to a project and return the updated project."""
        data = await self._request("POST", f"/projects/{project_id}", json=fields)
        return Project.from_dict(data)

    async def delete_project(self, project_id: str) -> None:
        """Delete a project together with all of its tasks."""
        await self._request("DELETE", f"/projects/{project_id}")

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    async def _paginate(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Follow ``next_cursor`` until the collection is exhausted."""
        items: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        while True:
            page_params = dict(params, limit=PAGE_SIZE)
            if cursor:
                page_params["cursor"] = cursor

            data = await self._request("GET", path, params=page_params)
            if isinstance(data, list):
                # Unpaginated payload
                items.extend(data)
                return items

            if data is None:
                return items

            items.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not cursor:
                return items

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Execute one API call and return the decoded JSON body (or None).

        Raises:
            AuthenticationError: On 401/403.
            RemoteServiceError: On any other failure.
        """
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.TimeoutException as e:
            raise RemoteServiceError(f"Request to Todoist timed out: {e}") from e
        except httpx.RequestError as e:
            raise RemoteServiceError(f"Request to Todoist failed: {e}") from e

        logger.debug(
            "Todoist %s %s -> %s", method, path, response.status_code
        )

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Todoist rejected the API token ({response.status_code}): "
                f"{self._extract_error_message(response)}",
                status_code=response.status_code,
            )

        if response.status_code >= 400:
            raise RemoteServiceError(
                f"Todoist API error {response.status_code}: "
                f"{self._extract_error_message(response)}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(
                f"Todoist returned a non-JSON response for {method} {path}",
                status_code=response.status_code,
            ) from e

    def _extract_error_message(self, response: httpx.Response) -> str:
        """Extract an error message from a failed response."""
        try:
            data = response.json()
        except ValueError:
            return response.text[:200] if response.text else "Unknown error"
        if isinstance(data, dict):
            return str(data.get("error", data.get("message", response.text[:200])))
        return response.text[:200]
