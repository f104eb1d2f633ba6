"""Command dispatcher: validate, route, and normalize every outcome.

``CommandDispatcher.dispatch`` is the single entry point the transport
calls. It never raises: unknown commands, invalid arguments, unmatched task
names, and remote failures all come back as error-flagged
``CommandResult`` objects.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from todoist_mcp.core.client import AuthenticationError, RemoteServiceError, TodoistClient
from todoist_mcp.core.observability import get_audit_logger, get_metrics, redact_for_logging
from todoist_mcp.core.resolver import TaskNotFound
from todoist_mcp.core.responses import (
    CommandResult,
    ErrorCode,
    ErrorType,
    error_result,
    remote_error_result,
    task_not_found_result,
    unknown_command_result,
    validation_error_result,
)
from todoist_mcp.core.validation import InvalidArguments, UnknownCommand, validate
from todoist_mcp.schemas.commands import command_names
from todoist_mcp.tools.projects import PROJECT_ACTIONS
from todoist_mcp.tools.router import ActionRouter, ActionRouterError
from todoist_mcp.tools.tasks import TASK_ACTIONS

logger = logging.getLogger(__name__)
_metrics = get_metrics()


def _build_router() -> ActionRouter:
    router = ActionRouter(tool_name="todoist", actions=[*TASK_ACTIONS, *PROJECT_ACTIONS])
    routed = set(router.allowed_actions())
    registered = set(command_names())
    if routed != registered:
        missing = ", ".join(sorted(registered - routed)) or "-"
        stray = ", ".join(sorted(routed - registered)) or "-"
        raise RuntimeError(
            f"Handler table out of sync with command registry "
            f"(missing handlers: {missing}; unregistered handlers: {stray})"
        )
    return router


_COMMAND_ROUTER = _build_router()


def _metric(command: str) -> str:
    return f"commands.{command}"


class CommandDispatcher:
    """Stateless request handler bound to one Todoist client."""

    def __init__(self, client: TodoistClient, router: Optional[ActionRouter] = None):
        self._client = client
        self._router = router or _COMMAND_ROUTER

    async def dispatch(self, command_name: str, arguments: Any = None) -> CommandResult:
        """Handle one command end to end and return its result."""
        start = time.perf_counter()
        logger.debug(
            "Dispatching %s with %s", command_name, redact_for_logging(arguments)
        )

        result = await self._run(command_name, arguments)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        status = "error" if result.is_error else "success"
        _metrics.counter(_metric(command_name), labels={"status": status})
        _metrics.timer(_metric(command_name) + ".duration", duration_ms)
        get_audit_logger().tool_invocation(
            command_name,
            success=not result.is_error,
            duration_ms=duration_ms,
            error_code=result.error_code,
        )
        return result

    async def _run(self, command_name: str, arguments: Any) -> CommandResult:
        try:
            args = validate(command_name, arguments)
            return await self._router.dispatch(
                command_name, client=self._client, args=args
            )
        except UnknownCommand:
            logger.warning("Unknown command requested: %s", command_name)
            return unknown_command_result(command_name)
        except ActionRouterError as exc:
            logger.error("No handler routed for %s: %s", command_name, exc)
            return unknown_command_result(command_name)
        except InvalidArguments as exc:
            logger.info("Rejected arguments for %s: %s", command_name, exc)
            return validation_error_result(str(exc), error_code=exc.error_code)
        except TaskNotFound as exc:
            logger.info("No task matched '%s' for %s", exc.fragment, command_name)
            return task_not_found_result(exc.fragment)
        except AuthenticationError as exc:
            logger.error("Todoist authentication failed for %s: %s", command_name, exc)
            return remote_error_result(f"Error: {exc}", authentication=True)
        except RemoteServiceError as exc:
            logger.warning("Todoist call failed for %s: %s", command_name, exc)
            return remote_error_result(f"Error: {exc}")
        except Exception as exc:
            logger.exception("Unexpected error while handling %s", command_name)
            return error_result(
                f"Error: {exc}",
                error_code=ErrorCode.INTERNAL_ERROR,
                error_type=ErrorType.INTERNAL,
            )
