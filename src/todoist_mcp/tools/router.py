"""Action routing table shared by the command handlers.

An ``ActionRouter`` maps action names to handlers once, at import time, so
dispatch is a dictionary lookup rather than a chain of name comparisons.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class ActionDefinition:
    """One routable action.

    Attributes:
        name: Action name used for dispatch
        handler: Callable invoked with the dispatch keyword arguments
        summary: Short human description
    """

    name: str
    handler: Callable[..., Any]
    summary: Optional[str] = None


class ActionRouterError(ValueError):
    """Raised when an action is missing or not registered.

    Attributes:
        action: The requested action (may be None)
        allowed_actions: Names the router accepts
    """

    def __init__(self, message: str, *, action: Optional[str], allowed_actions: List[str]):
        self.action = action
        self.allowed_actions = allowed_actions
        super().__init__(message)


class ActionRouter:
    """Dispatch table from action name to handler."""

    def __init__(self, tool_name: str, actions: Sequence[ActionDefinition]):
        if not actions:
            raise ValueError(f"Router '{tool_name}' requires at least one action")

        self.tool_name = tool_name
        self._actions: Dict[str, ActionDefinition] = {}
        for definition in actions:
            if definition.name in self._actions:
                raise ValueError(
                    f"Duplicate action '{definition.name}' for router '{tool_name}'"
                )
            self._actions[definition.name] = definition

    def allowed_actions(self) -> List[str]:
        return list(self._actions)

    def dispatch(self, action: Optional[str], **kwargs: Any) -> Any:
        """Invoke the handler registered for ``action``.

        Returns whatever the handler returns (a coroutine for async handlers).

        Raises:
            ActionRouterError: If ``action`` is empty or unknown.
        """
        if not action:
            raise ActionRouterError(
                f"Router '{self.tool_name}' requires an action",
                action=action,
                allowed_actions=self.allowed_actions(),
            )

        definition = self._actions.get(action)
        if definition is None:
            raise ActionRouterError(
                f"Unsupported action '{action}' for router '{self.tool_name}'",
                action=action,
                allowed_actions=self.allowed_actions(),
            )

        return definition.handler(**kwargs)
