"""
Observability utilities for todoist-mcp.

Provides log-backed metrics, audit logging, and redaction of sensitive
values before they are written to a log. Everything here emits through the
standard ``logging`` tree so it inherits the handler set up by
``configure_logging``.

Example:
    from todoist_mcp.core.observability import audit_log, get_metrics

    audit_log("tool_invocation", tool="todoist_get_tasks", success=True)
    get_metrics().timer("command.duration", 12.5, labels={"command": "todoist_get_tasks"})
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from todoist_mcp.core.context import get_correlation_id

logger = logging.getLogger(__name__)


# =============================================================================
# Redaction
# =============================================================================

SENSITIVE_PATTERNS: List[Tuple[str, str]] = [
    (r"(?i)bearer\s+[a-zA-Z0-9._\-]{8,}", "BEARER_TOKEN"),
    (r"\b[a-f0-9]{40}\b", "API_TOKEN"),
]
"""Patterns for detecting sensitive data in free text.

Todoist API tokens are 40 hex characters.
"""

_SENSITIVE_KEYS = frozenset(
    {
        "token",
        "api_token",
        "api_key",
        "access_token",
        "authorization",
        "password",
        "secret",
    }
)


def redact_sensitive_data(data: Any, *, max_depth: int = 10) -> Any:
    """Recursively redact sensitive data from strings, dicts, and lists.

    Values under sensitive key names are replaced entirely; strings are
    scanned for token-shaped substrings.

    Example:
        >>> redact_sensitive_data({"api_token": "abc", "content": "Buy milk"})
        {'api_token': '[REDACTED:API_TOKEN]', 'content': 'Buy milk'}
    """
    if max_depth <= 0:
        return "[MAX_DEPTH_EXCEEDED]"

    if isinstance(data, str):
        result = data
        for pattern, label in SENSITIVE_PATTERNS:
            result = re.sub(pattern, f"[REDACTED:{label}]", result)
        return result

    if isinstance(data, dict):
        redacted = {}
        for key, value in data.items():
            key_lower = str(key).lower().replace("-", "_")
            if key_lower in _SENSITIVE_KEYS:
                redacted[key] = f"[REDACTED:{key_lower.upper()}]"
            else:
                redacted[key] = redact_sensitive_data(value, max_depth=max_depth - 1)
        return redacted

    if isinstance(data, (list, tuple)):
        items = [redact_sensitive_data(item, max_depth=max_depth - 1) for item in data]
        return type(data)(items) if isinstance(data, tuple) else items

    return data


def redact_for_logging(data: Any) -> str:
    """Redact and serialize data for logging."""
    redacted = redact_sensitive_data(data)
    try:
        return json.dumps(redacted, default=str)
    except (TypeError, ValueError):
        return str(redacted)


# =============================================================================
# Metrics
# =============================================================================


class MetricType(Enum):
    """Types of metrics that can be emitted."""

    COUNTER = "counter"
    TIMER = "timer"


@dataclass
class Metric:
    """Structured metric data."""

    name: str
    value: Union[int, float]
    metric_type: MetricType
    labels: Dict[str, str] = field(default_factory=dict)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "type": self.metric_type.value,
            "labels": self.labels,
            "timestamp": self.timestamp,
        }


class MetricsCollector:
    """Collects metrics and emits them as structured log records."""

    def __init__(self, prefix: str = "todoist_mcp"):
        self.prefix = prefix
        self._logger = logging.getLogger(f"{__name__}.metrics")

    def emit(self, metric: Metric) -> None:
        self._logger.debug(
            f"METRIC: {self.prefix}.{metric.name}", extra={"metric": metric.to_dict()}
        )

    def counter(
        self, name: str, value: int = 1, labels: Optional[Dict[str, str]] = None
    ) -> None:
        """Emit a counter metric."""
        self.emit(
            Metric(
                name=name,
                value=value,
                metric_type=MetricType.COUNTER,
                labels=labels or {},
            )
        )

    def timer(
        self, name: str, duration_ms: float, labels: Optional[Dict[str, str]] = None
    ) -> None:
        """Emit a timer metric (duration in milliseconds)."""
        self.emit(
            Metric(
                name=name,
                value=duration_ms,
                metric_type=MetricType.TIMER,
                labels=labels or {},
            )
        )


_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    """Get the global metrics collector."""
    return _metrics


# =============================================================================
# Audit
# =============================================================================


class AuditEventType(Enum):
    """Types of audit events."""

    SERVER_START = "server_start"
    SERVER_STOP = "server_stop"
    TOOL_INVOCATION = "tool_invocation"
    CONFIG_ERROR = "config_error"


@dataclass
class AuditEvent:
    """Structured audit event."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.correlation_id is None:
            self.correlation_id = get_correlation_id() or None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        return result


class AuditLogger:
    """Audit events go to a dedicated logger for easy filtering."""

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.audit")

    def log(self, event: AuditEvent) -> None:
        self._logger.info(
            f"AUDIT: {event.event_type.value}", extra={"audit": event.to_dict()}
        )

    def tool_invocation(
        self,
        tool_name: str,
        success: bool = True,
        duration_ms: Optional[float] = None,
        **details: Any,
    ) -> None:
        """Log a command invocation."""
        self.log(
            AuditEvent(
                event_type=AuditEventType.TOOL_INVOCATION,
                details={
                    "tool": tool_name,
                    "success": success,
                    "duration_ms": duration_ms,
                    **details,
                },
            )
        )


_audit = AuditLogger()


def get_audit_logger() -> AuditLogger:
    """Get the global audit logger."""
    return _audit


def audit_log(event_type: str, **details: Any) -> None:
    """
    Convenience function for audit logging.

    Args:
        event_type: Type of event (server_start, server_stop,
                    tool_invocation, config_error)
        **details: Additional details to include in the audit log
    """
    try:
        event_enum = AuditEventType(event_type)
    except ValueError:
        event_enum = AuditEventType.TOOL_INVOCATION
        details["original_event_type"] = event_type

    _audit.log(AuditEvent(event_type=event_enum, details=details))
