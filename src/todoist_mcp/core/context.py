"""Request context for correlating log records with a single command.

Each inbound command runs inside one request context. The context holds a
correlation ID and a start timestamp in ``contextvars`` so that log records
and responses emitted anywhere during the command share the same ID.

Usage:
    from todoist_mcp.core.context import (
        async_request_context,
        get_correlation_id,
    )

    async with async_request_context() as ctx:
        print(ctx.correlation_id)  # e.g., "req_a1b2c3d4e5f6"
"""

from __future__ import annotations

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

__all__ = [
    "correlation_id_var",
    "start_time_var",
    "RequestContext",
    "generate_correlation_id",
    "sync_request_context",
    "async_request_context",
    "get_correlation_id",
    "get_start_time",
]

# -----------------------------------------------------------------------------
# Context Variables
# -----------------------------------------------------------------------------

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

start_time_var: ContextVar[float] = ContextVar("start_time", default=0.0)


def generate_correlation_id(prefix: str = "req") -> str:
    """Generate a unique correlation ID with optional prefix.

    Format: {prefix}_{12_hex_chars}
    Example: "req_a1b2c3d4e5f6"
    """
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass
class RequestContext:
    """Snapshot of the current request context.

    Attributes:
        correlation_id: Unique request identifier
        command: Name of the command being handled, if known
        start_time: Request start timestamp
    """

    correlation_id: str = ""
    command: Optional[str] = None
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds elapsed since the request started."""
        if self.start_time <= 0:
            return 0.0
        return (time.time() - self.start_time) * 1000


@contextmanager
def sync_request_context(
    *,
    correlation_id: Optional[str] = None,
    command: Optional[str] = None,
) -> Generator[RequestContext, None, None]:
    """Set up context variables for the duration of the with block.

    Args:
        correlation_id: Request ID (auto-generated if None)
        command: Command name recorded on the snapshot

    Yields:
        RequestContext snapshot
    """
    corr_id = correlation_id or generate_correlation_id()
    start = time.time()

    token_corr = correlation_id_var.set(corr_id)
    token_start = start_time_var.set(start)

    try:
        yield RequestContext(correlation_id=corr_id, command=command, start_time=start)
    finally:
        correlation_id_var.reset(token_corr)
        start_time_var.reset(token_start)


class _AsyncContextManager:
    """Wrapper to make the request context usable with ``async with``."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        command: Optional[str] = None,
    ):
        self.correlation_id = correlation_id
        self.command = command
        self._sync_cm: Optional[Any] = None

    async def __aenter__(self) -> RequestContext:
        self._sync_cm = sync_request_context(
            correlation_id=self.correlation_id,
            command=self.command,
        )
        return self._sync_cm.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._sync_cm:
            self._sync_cm.__exit__(exc_type, exc_val, exc_tb)
        return False


def async_request_context(
    *,
    correlation_id: Optional[str] = None,
    command: Optional[str] = None,
) -> _AsyncContextManager:
    """Create an async context manager for request context.

    Example:
        async with async_request_context(command="todoist_get_tasks") as ctx:
            await dispatcher.dispatch(...)
            logger.info(f"Completed request {ctx.correlation_id}")
    """
    return _AsyncContextManager(correlation_id=correlation_id, command=command)


def get_correlation_id() -> str:
    """Get the current correlation ID (empty string outside a request)."""
    return correlation_id_var.get()


def get_start_time() -> float:
    """Get the current request start time (0.0 outside a request)."""
    return start_time_var.get()
