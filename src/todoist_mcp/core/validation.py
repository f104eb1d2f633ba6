"""Schema-driven validation of untyped argument bags.

``validate`` checks a caller-supplied mapping against a command's
``FieldSpec`` list and returns the command's typed argument object. On
failure it raises ``InvalidArguments`` listing every offending field, so the
caller can fix all of them in one round trip.

Validation is shallow: it checks presence, primitive type, and enumerated
values. It does not check that referenced identifiers exist remotely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from todoist_mcp.core.responses import ErrorCode
from todoist_mcp.schemas.commands import CommandDescriptor, FieldSpec, describe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationIssue:
    """One field-level validation failure."""

    field: str
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return self.message


class UnknownCommand(LookupError):
    """Raised when a command name is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidArguments(ValueError):
    """Raised when an argument bag does not satisfy a command's schema.

    Attributes:
        command: Name of the command being validated
        issues: Every field-level failure found
    """

    def __init__(self, command: str, issues: List[ValidationIssue]):
        self.command = command
        self.issues = list(issues)
        detail = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"Invalid arguments for {command}: {detail}")

    @property
    def error_code(self) -> ErrorCode:
        """MISSING_REQUIRED when that is the only kind of failure."""
        if self.issues and all(
            issue.code == ErrorCode.MISSING_REQUIRED for issue in self.issues
        ):
            return ErrorCode.MISSING_REQUIRED
        return ErrorCode.VALIDATION_ERROR


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_field(spec: FieldSpec, value: Any) -> Tuple[Optional[Any], Optional[ValidationIssue]]:
    """Type- and enum-check one supplied value.

    Returns the normalized value or an issue. Numbers are normalized to
    ``int``: every numeric field in the catalog is integral.
    """
    if spec.type == "string":
        if not isinstance(value, str):
            return None, ValidationIssue(
                spec.name,
                ErrorCode.INVALID_FORMAT,
                f"'{spec.name}' must be a string, got {type(value).__name__}",
            )
        normalized: Any = value
    elif spec.type == "boolean":
        if not isinstance(value, bool):
            return None, ValidationIssue(
                spec.name,
                ErrorCode.INVALID_FORMAT,
                f"'{spec.name}' must be a boolean, got {type(value).__name__}",
            )
        normalized = value
    else:
        if not _is_number(value):
            return None, ValidationIssue(
                spec.name,
                ErrorCode.INVALID_FORMAT,
                f"'{spec.name}' must be a number, got {type(value).__name__}",
            )
        if isinstance(value, float) and not value.is_integer():
            return None, ValidationIssue(
                spec.name,
                ErrorCode.INVALID_FORMAT,
                f"'{spec.name}' must be a whole number, got {value}",
            )
        normalized = int(value)

    if spec.enum is not None and normalized not in spec.enum:
        allowed = ", ".join(str(option) for option in spec.enum)
        return None, ValidationIssue(
            spec.name,
            ErrorCode.VALIDATION_ERROR,
            f"'{spec.name}' must be one of: {allowed} (got {value!r})",
        )

    return normalized, None


def validate_descriptor(descriptor: CommandDescriptor, arguments: Any) -> Any:
    """Validate ``arguments`` against ``descriptor`` and build its typed args.

    A missing argument bag (None) is treated as empty. JSON ``null`` values
    count as "not supplied". Keys not declared by the schema are ignored.

    Raises:
        InvalidArguments: If any field fails validation.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidArguments(
            descriptor.name,
            [
                ValidationIssue(
                    "arguments",
                    ErrorCode.INVALID_FORMAT,
                    f"arguments must be an object, got {type(arguments).__name__}",
                )
            ],
        )

    issues: List[ValidationIssue] = []
    values: Dict[str, Any] = {}

    for spec in descriptor.fields:
        value = arguments.get(spec.name)
        if value is None:
            if spec.required:
                issues.append(
                    ValidationIssue(
                        spec.name,
                        ErrorCode.MISSING_REQUIRED,
                        f"missing required field '{spec.name}'",
                    )
                )
            elif spec.default is not None:
                values[spec.name] = spec.default
            continue

        normalized, issue = _check_field(spec, value)
        if issue is not None:
            issues.append(issue)
        else:
            values[spec.name] = normalized

    if issues:
        raise InvalidArguments(descriptor.name, issues)

    extra = set(arguments) - {spec.name for spec in descriptor.fields}
    if extra:
        logger.debug(
            "Ignoring undeclared arguments for %s: %s",
            descriptor.name,
            ", ".join(sorted(extra)),
        )

    return descriptor.arguments_type(**values)


def validate(command_name: str, arguments: Any) -> Any:
    """Validate an argument bag for the named command.

    Returns:
        The command's typed argument object (e.g. ``CreateTaskArgs``).

    Raises:
        UnknownCommand: If no command is registered under ``command_name``.
        InvalidArguments: If the bag fails the command's schema.
    """
    descriptor = describe(command_name)
    if descriptor is None:
        raise UnknownCommand(command_name)
    return validate_descriptor(descriptor, arguments)
