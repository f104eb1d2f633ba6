"""
Standard result contract for command handling.

Every command, successful or not, produces exactly one ``CommandResult``:

    CommandResult(
        text="Task created:\\nTitle: Buy milk",   # rendered, human-readable
        is_error=False,                            # error flag for the caller
        error_code=None,                           # ErrorCode value on failure
        error_type=None,                           # ErrorType value on failure
        meta={"version": "result-v1", "request_id": "req_abc123"},
    )

Key Principle:
    - ``is_error=False`` means the command executed correctly, even if the
      rendered text reports an empty collection.
    - ``is_error=True`` means the command did not complete. ``error_code``
      tells the caller *why* (bad input, unknown command, no matching task,
      remote failure) without parsing the text.
    - No fault raised while handling one command escapes as an exception;
      it is converted to a ``CommandResult`` first.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from todoist_mcp.core.context import get_correlation_id

RESULT_CONTRACT_VERSION = "result-v1"


class ErrorCode(str, Enum):
    """Machine-readable error codes for command results.

    Categories:
        - Validation (input errors)
        - Resource (not found)
        - Access (auth)
        - System (remote, internal)
    """

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED = "MISSING_REQUIRED"
    INVALID_FORMAT = "INVALID_FORMAT"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"

    # Resource errors
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # Access errors
    UNAUTHORIZED = "UNAUTHORIZED"

    # System errors
    REMOTE_ERROR = "REMOTE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorType(str, Enum):
    """Error categories for routing and client-side handling.

    Each type corresponds to an HTTP status code analog.
    """

    VALIDATION = "validation"  # 400 - fix input
    AUTHENTICATION = "authentication"  # 401 - re-authenticate
    NOT_FOUND = "not_found"  # 404 - nothing matched
    REMOTE = "remote"  # 502 - remote service rejected or failed the call
    INTERNAL = "internal"  # 500


@dataclass
class CommandResult:
    """
    Normalized outcome of one command.

    Attributes:
        text: Rendered human-readable payload
        is_error: Whether the command failed
        error_code: Canonical error code when is_error is True
        error_type: Error category when is_error is True
        meta: Result metadata including version identifier
    """

    text: str
    is_error: bool = False
    error_code: Optional[str] = None
    error_type: Optional[str] = None
    meta: Dict[str, Any] = field(
        default_factory=lambda: {"version": RESULT_CONTRACT_VERSION}
    )


def _build_meta(
    *,
    request_id: Optional[str] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Construct result metadata that always includes the contract version.

    The correlation ID of the active request context is used when
    ``request_id`` is not given explicitly.
    """
    meta: Dict[str, Any] = {"version": RESULT_CONTRACT_VERSION}

    effective_request_id = request_id or get_correlation_id() or None
    if effective_request_id:
        meta["request_id"] = effective_request_id
    if extra:
        meta.update(dict(extra))

    return meta


def _enum_value(value: Union[Enum, str]) -> str:
    return value.value if isinstance(value, Enum) else value


def success_result(
    text: str,
    *,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> CommandResult:
    """Create a successful result carrying rendered text."""
    return CommandResult(
        text=text,
        is_error=False,
        meta=_build_meta(request_id=request_id, extra=meta),
    )


def error_result(
    message: str,
    *,
    error_code: Optional[Union[ErrorCode, str]] = None,
    error_type: Optional[Union[ErrorType, str]] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> CommandResult:
    """Create an error-flagged result.

    Args:
        message: Human-readable description of the failure.
        error_code: Canonical error code (default ``INTERNAL_ERROR``).
        error_type: Error category (default ``internal``).
        request_id: Correlation identifier propagated through logs.
        meta: Arbitrary extra metadata to merge into ``meta``.

    Example:
        >>> error_result(
        ...     "Unknown tool: todoist_frobnicate",
        ...     error_code=ErrorCode.UNKNOWN_COMMAND,
        ...     error_type=ErrorType.VALIDATION,
        ... )
    """
    return CommandResult(
        text=message,
        is_error=True,
        error_code=_enum_value(error_code or ErrorCode.INTERNAL_ERROR),
        error_type=_enum_value(error_type or ErrorType.INTERNAL),
        meta=_build_meta(request_id=request_id, extra=meta),
    )


# ---------------------------------------------------------------------------
# Specialized Error Helpers
# ---------------------------------------------------------------------------


def unknown_command_result(name: str) -> CommandResult:
    """Result for a command name absent from the registry."""
    return error_result(
        f"Unknown tool: {name}",
        error_code=ErrorCode.UNKNOWN_COMMAND,
        error_type=ErrorType.VALIDATION,
    )


def validation_error_result(
    message: str,
    *,
    error_code: Union[ErrorCode, str] = ErrorCode.VALIDATION_ERROR,
) -> CommandResult:
    """Result for an argument bag that failed validation (HTTP 400 analog)."""
    return error_result(
        message,
        error_code=error_code,
        error_type=ErrorType.VALIDATION,
    )


def task_not_found_result(fragment: str) -> CommandResult:
    """Result for a name search that matched no task.

    Not a system fault: the caller asked for something that is not there.
    """
    return error_result(
        f'Could not find a task matching "{fragment}"',
        error_code=ErrorCode.TASK_NOT_FOUND,
        error_type=ErrorType.NOT_FOUND,
        meta={"search_text": fragment},
    )


def remote_error_result(
    message: str,
    *,
    authentication: bool = False,
) -> CommandResult:
    """Result for a call the remote service rejected or failed."""
    if authentication:
        return error_result(
            message,
            error_code=ErrorCode.UNAUTHORIZED,
            error_type=ErrorType.AUTHENTICATION,
        )
    return error_result(
        message,
        error_code=ErrorCode.REMOTE_ERROR,
        error_type=ErrorType.REMOTE,
    )
