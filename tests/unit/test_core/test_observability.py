"""Tests for redaction, audit events, and log-backed metrics."""

import json
import logging

from todoist_mcp.core.context import sync_request_context
from todoist_mcp.core.observability import (
    AuditEvent,
    AuditEventType,
    audit_log,
    get_audit_logger,
    get_metrics,
    redact_for_logging,
    redact_sensitive_data,
)

_TOKEN = "0123456789abcdef0123456789abcdef01234567"


class TestRedaction:
    def test_sensitive_keys_replaced(self):
        redacted = redact_sensitive_data({"api_token": "abc", "content": "Buy milk"})
        assert redacted == {"api_token": "[REDACTED:API_TOKEN]", "content": "Buy milk"}

    def test_token_shaped_strings_scrubbed(self):
        assert redact_sensitive_data(f"token is {_TOKEN}") == "token is [REDACTED:API_TOKEN]"
        assert "[REDACTED:BEARER_TOKEN]" in redact_sensitive_data(f"Bearer {_TOKEN}")

    def test_nested_structures(self):
        data = {"items": [{"Authorization": "Bearer x"}, ("a", _TOKEN)]}
        redacted = redact_sensitive_data(data)
        assert redacted["items"][0] == {"Authorization": "[REDACTED:AUTHORIZATION]"}
        assert redacted["items"][1] == ("a", "[REDACTED:API_TOKEN]")

    def test_depth_limit(self):
        assert redact_sensitive_data({"a": 1}, max_depth=0) == "[MAX_DEPTH_EXCEEDED]"

    def test_redact_for_logging_serializes(self):
        assert json.loads(redact_for_logging({"content": "Buy milk"})) == {"content": "Buy milk"}
        assert redact_for_logging(None) == "null"


class TestAudit:
    def test_event_picks_up_correlation_id(self):
        with sync_request_context(correlation_id="req_audit"):
            event = AuditEvent(event_type=AuditEventType.SERVER_START)
        assert event.to_dict()["correlation_id"] == "req_audit"

    def test_tool_invocation_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="todoist_mcp.core.observability.audit")
        get_audit_logger().tool_invocation("todoist_get_tasks", success=True, duration_ms=1.5)
        record = caplog.records[-1]
        assert record.getMessage() == "AUDIT: tool_invocation"
        assert record.audit["details"]["tool"] == "todoist_get_tasks"
        assert record.audit["details"]["success"] is True

    def test_unknown_event_type_falls_back(self, caplog):
        caplog.set_level(logging.INFO, logger="todoist_mcp.core.observability.audit")
        audit_log("custom_event", detail="x")
        details = caplog.records[-1].audit["details"]
        assert details["original_event_type"] == "custom_event"


class TestMetrics:
    def test_counter_and_timer_emitted(self, caplog):
        caplog.set_level(logging.DEBUG, logger="todoist_mcp.core.observability.metrics")
        metrics = get_metrics()
        metrics.counter("commands.todoist_get_tasks", labels={"status": "success"})
        metrics.timer("commands.todoist_get_tasks.duration", 3.2)

        emitted = [record.metric for record in caplog.records if hasattr(record, "metric")]
        assert emitted[-2]["type"] == "counter"
        assert emitted[-2]["labels"] == {"status": "success"}
        assert emitted[-1]["type"] == "timer"
        assert emitted[-1]["value"] == 3.2
