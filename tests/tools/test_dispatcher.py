"""
End-to-end tests for CommandDispatcher against an in-memory Todoist client.

Every test goes through ``dispatch`` exactly as the MCP server does: command
name plus an untyped argument bag in, ``CommandResult`` out.
"""

import pytest

from tests.conftest import FakeTodoistClient, make_project, make_task
from todoist_mcp.core.client import AuthenticationError
from todoist_mcp.schemas.commands import command_names
from todoist_mcp.tools.dispatcher import CommandDispatcher
from todoist_mcp.tools.router import ActionDefinition, ActionRouter
from todoist_mcp.tools.tasks import handle_get_tasks


class TestScenarios:
    @pytest.mark.asyncio
    async def test_create_task_with_only_content(self):
        client = FakeTodoistClient()
        result = await CommandDispatcher(client).dispatch(
            "todoist_create_task", {"content": "Buy milk"}
        )

        assert result.is_error is False
        assert result.text == "Task created:\nTitle: Buy milk"
        assert client.calls_to("add_task") == [
            {
                "content": "Buy milk",
                "description": None,
                "project_id": None,
                "due_string": None,
                "priority": None,
            }
        ]

    @pytest.mark.asyncio
    async def test_delete_task_by_name(self):
        client = FakeTodoistClient(tasks=[make_task("42", "Buy milk")])
        result = await CommandDispatcher(client).dispatch(
            "todoist_delete_task", {"task_name": "milk"}
        )

        assert result.is_error is False
        assert result.text == 'Successfully deleted task: "Buy milk"'
        assert client.calls_to("delete_task") == [{"task_id": "42"}]

    @pytest.mark.asyncio
    async def test_update_project_with_no_fields_sends_empty_patch(self):
        project = make_project("123", "Home", color="blue")
        client = FakeTodoistClient(projects=[project])
        result = await CommandDispatcher(client).dispatch(
            "todoist_update_project", {"project_id": "123"}
        )

        assert result.is_error is False
        assert client.calls_to("update_project") == [{"project_id": "123", "fields": {}}]
        assert result.text == (
            "Project updated:\nName: Home\nID: 123\nColor: blue\nFavorite: false"
        )

    @pytest.mark.asyncio
    async def test_unknown_command_then_valid_request(self, dispatcher):
        result = await dispatcher.dispatch("todoist_frobnicate", {})
        assert result.is_error is True
        assert "todoist_frobnicate" in result.text
        assert result.error_code == "UNKNOWN_COMMAND"

        follow_up = await dispatcher.dispatch("todoist_get_projects", {})
        assert follow_up.is_error is False

    @pytest.mark.asyncio
    async def test_create_project_passes_name_to_client(self):
        client = FakeTodoistClient()
        result = await CommandDispatcher(client).dispatch(
            "todoist_create_project", {"name": "Work", "is_favorite": False}
        )

        assert result.is_error is False, result.text
        assert result.text == (
            "Project created:\nName: Work\nID: 1001\nColor: charcoal\nFavorite: false"
        )
        assert client.calls_to("add_project") == [
            {
                "name": "Work",
                "parent_id": None,
                "color": None,
                "is_favorite": False,
                "view_style": None,
            }
        ]

    @pytest.mark.asyncio
    async def test_command_without_routed_handler_is_unknown(self, fake_client):
        router = ActionRouter(
            tool_name="todoist",
            actions=[ActionDefinition("todoist_get_tasks", handle_get_tasks)],
        )
        dispatcher = CommandDispatcher(fake_client, router=router)

        result = await dispatcher.dispatch("todoist_get_projects", {})

        assert result.is_error is True
        assert result.error_code == "UNKNOWN_COMMAND"
        assert result.text == "Unknown tool: todoist_get_projects"
        assert fake_client.calls == []


class TestValidationGate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name",
        [
            "todoist_create_task",
            "todoist_update_task",
            "todoist_delete_task",
            "todoist_complete_task",
            "todoist_get_project",
            "todoist_create_project",
            "todoist_update_project",
            "todoist_delete_project",
        ],
    )
    async def test_missing_required_field_never_reaches_remote(self, fake_client, name):
        result = await CommandDispatcher(fake_client).dispatch(name, {})

        assert result.is_error is True
        assert result.error_code == "MISSING_REQUIRED"
        assert result.text.startswith(f"Invalid arguments for {name}: ")
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_invalid_enum_rejected(self, dispatcher, fake_client):
        result = await dispatcher.dispatch(
            "todoist_create_task", {"content": "x", "priority": 7}
        )
        assert result.is_error is True
        assert result.error_code == "VALIDATION_ERROR"
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_missing_argument_bag_treated_as_empty(self, dispatcher):
        result = await dispatcher.dispatch("todoist_get_projects", None)
        assert result.is_error is False


class TestGetTasks:
    @pytest.mark.asyncio
    async def test_default_limit_keeps_first_ten_in_order(self):
        tasks = [make_task(str(i), f"Task {i}") for i in range(15)]
        client = FakeTodoistClient(tasks=tasks)
        result = await CommandDispatcher(client).dispatch("todoist_get_tasks", {})

        listed = [line for line in result.text.splitlines() if line.startswith("- ")]
        assert listed == [f"- Task {i}" for i in range(10)]
        assert result.meta["returned"] == 10
        assert result.meta["fetched"] == 15

    @pytest.mark.asyncio
    async def test_priority_post_filter(self, dispatcher):
        result = await dispatcher.dispatch("todoist_get_tasks", {"priority": 4})
        assert result.is_error is False
        assert "- Update whiteboard notes" in result.text
        assert "- Call the plumber" in result.text
        assert "Buy milk" not in result.text

    @pytest.mark.asyncio
    async def test_priority_filter_with_no_matches(self, dispatcher):
        result = await dispatcher.dispatch("todoist_get_tasks", {"priority": 2})
        assert result.is_error is False
        assert result.text == "No tasks found matching the criteria"

    @pytest.mark.asyncio
    async def test_filter_and_project_passed_to_client(self, dispatcher, fake_client):
        await dispatcher.dispatch(
            "todoist_get_tasks", {"project_id": "p1", "filter": "today"}
        )
        assert fake_client.calls_to("get_tasks") == [{"project_id": "p1", "filter": "today"}]

    @pytest.mark.asyncio
    async def test_non_positive_limit_returns_everything(self):
        client = FakeTodoistClient(tasks=[make_task(str(i), f"Task {i}") for i in range(12)])
        result = await CommandDispatcher(client).dispatch("todoist_get_tasks", {"limit": 0})
        assert result.meta["returned"] == 12


class TestNameResolution:
    @pytest.mark.asyncio
    async def test_update_sends_sparse_patch(self, dispatcher, fake_client):
        result = await dispatcher.dispatch(
            "todoist_update_task", {"task_name": "WHITEBOARD", "priority": 1}
        )

        assert result.is_error is False
        assert fake_client.calls_to("update_task") == [
            {"task_id": "2", "fields": {"priority": 1}}
        ]
        assert result.text.startswith('Task "Update whiteboard notes" updated:\n')
        assert "New Priority: 1" in result.text

    @pytest.mark.asyncio
    async def test_resolution_fetches_all_tasks(self, dispatcher, fake_client):
        await dispatcher.dispatch("todoist_complete_task", {"task_name": "plumber"})
        assert fake_client.calls_to("get_tasks") == [{"project_id": None, "filter": None}]
        assert fake_client.calls_to("close_task") == [{"task_id": "3"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name",
        ["todoist_update_task", "todoist_delete_task", "todoist_complete_task"],
    )
    async def test_no_match_skips_mutation(self, dispatcher, fake_client, name):
        result = await dispatcher.dispatch(name, {"task_name": "zzz"})

        assert result.is_error is True
        assert result.text == 'Could not find a task matching "zzz"'
        assert result.error_code == "TASK_NOT_FOUND"
        assert [called for called, _ in fake_client.calls] == ["get_tasks"]

    @pytest.mark.asyncio
    async def test_first_match_wins(self):
        client = FakeTodoistClient(
            tasks=[make_task("1", "Buy milk"), make_task("2", "Buy more milk")]
        )
        await CommandDispatcher(client).dispatch("todoist_delete_task", {"task_name": "milk"})
        assert client.calls_to("delete_task") == [{"task_id": "1"}]


class TestRemoteFailures:
    @pytest.mark.asyncio
    async def test_remote_failure_becomes_error_result(self, dispatcher, fake_client):
        fake_client.fail_on = "get_projects"
        result = await dispatcher.dispatch("todoist_get_projects", {})
        assert result.is_error is True
        assert result.text == "Error: Todoist API error 500: boom"
        assert result.error_code == "REMOTE_ERROR"

    @pytest.mark.asyncio
    async def test_update_failure_after_resolution(self, dispatcher, fake_client):
        fake_client.fail_on = "update_task"
        result = await dispatcher.dispatch(
            "todoist_update_task", {"task_name": "milk", "content": "Buy oat milk"}
        )
        assert result.is_error is True
        assert result.text == "Error updating task: Todoist API error 500: boom"

    @pytest.mark.asyncio
    async def test_authentication_failure(self, dispatcher, fake_client):
        fake_client.fail_on = "get_tasks"
        fake_client.fail_with = AuthenticationError("Todoist rejected the API token (401): Unauthorized", status_code=401)
        result = await dispatcher.dispatch("todoist_delete_task", {"task_name": "milk"})
        assert result.is_error is True
        assert result.error_code == "UNAUTHORIZED"
        assert result.error_type == "authentication"
        assert fake_client.calls_to("delete_task") == []

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, dispatcher, fake_client):
        fake_client.fail_on = "add_project"
        fake_client.fail_with = RuntimeError("kaboom")
        result = await dispatcher.dispatch("todoist_create_project", {"name": "Home"})
        assert result.is_error is True
        assert result.text == "Error: kaboom"
        assert result.error_code == "INTERNAL_ERROR"

    @pytest.mark.asyncio
    async def test_remote_not_found_project(self, dispatcher):
        result = await dispatcher.dispatch("todoist_get_project", {"project_id": "nope"})
        assert result.is_error is True
        assert result.text == "Error: Todoist API error 404: Project not found"


class TestCoverage:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,arguments",
        [
            ("todoist_create_task", {"content": "New"}),
            ("todoist_get_tasks", {}),
            ("todoist_update_task", {"task_name": "milk"}),
            ("todoist_delete_task", {"task_name": "milk"}),
            ("todoist_complete_task", {"task_name": "milk"}),
            ("todoist_get_projects", {}),
            ("todoist_get_project", {"project_id": "p1"}),
            ("todoist_create_project", {"name": "Work"}),
            ("todoist_update_project", {"project_id": "p1", "name": "House"}),
            ("todoist_delete_project", {"project_id": "p2"}),
        ],
    )
    async def test_every_command_succeeds_with_valid_arguments(self, dispatcher, name, arguments):
        result = await dispatcher.dispatch(name, arguments)
        assert result.is_error is False, result.text
        assert result.meta["version"] == "result-v1"

    def test_every_registered_command_has_a_handler(self):
        from todoist_mcp.tools.dispatcher import _COMMAND_ROUTER

        assert set(_COMMAND_ROUTER.allowed_actions()) == set(command_names())
