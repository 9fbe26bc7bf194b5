"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from datetime import date

from swimcoach.logging_config import JSONFormatter, log_plan_event, plan_context, setup_logging
from swimcoach.models import AthleteProfile
from swimcoach.services.planner import generate_session_plan


def test_json_formatter_outputs_valid_json():
    formatter = JSONFormatter()
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="test.py",
        lineno=1, msg="hello %s", args=("world",), exc_info=None
    )
    result = formatter.format(record)
    parsed = json.loads(result)
    assert parsed["message"] == "hello world"
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "test"
    assert "timestamp" in parsed


def test_json_formatter_includes_exception():
    formatter = JSONFormatter()
    try:
        raise ValueError("test error")
    except ValueError:
        import sys
        exc_info = sys.exc_info()
    record = logging.LogRecord(
        name="test", level=logging.ERROR, pathname="test.py",
        lineno=1, msg="fail", args=(), exc_info=exc_info
    )
    result = formatter.format(record)
    parsed = json.loads(result)
    assert parsed["exception"]["type"] == "ValueError"
    assert parsed["exception"]["message"] == "test error"


def test_setup_logging_idempotent():
    root = logging.getLogger()
    initial_count = len(root.handlers)
    setup_logging()
    setup_logging()
    # Should not add duplicate handlers
    assert len(root.handlers) <= initial_count + 1


def test_json_formatter_collects_context_fields():
    formatter = JSONFormatter()
    record = logging.LogRecord(
        name="swimcoach.services.plan_validator", level=logging.INFO, pathname="v.py",
        lineno=3, msg="plan_validation_warning", args=(), exc_info=None
    )
    record.ctx_template_id = "6w-8x100-steady"
    record.other = "ignored"
    parsed = json.loads(formatter.format(record))
    assert parsed["context"] == {"ctx_template_id": "6w-8x100-steady"}


def _plan():
    return generate_session_plan(AthleteProfile(), [], today=date(2026, 10, 19))


def test_plan_context_describes_decision():
    plan = _plan()
    ctx = plan_context(plan, requested_m=2000)
    assert ctx["ctx_template_id"] == plan.derived_from_template.template_id
    assert ctx["ctx_phase"] == "BUILD"
    assert ctx["ctx_readiness"] == "READY"
    assert ctx["ctx_generation"] == 0
    assert ctx["ctx_requested_m"] == 2000


def test_log_plan_event_respects_level(caplog):
    log = logging.getLogger("swimcoach.test")
    plan = _plan()
    with caplog.at_level(logging.INFO, logger="swimcoach.test"):
        log_plan_event(log, "plan_generated", plan)
        log_plan_event(log, "plan_shown", plan, level=logging.INFO)
    assert [r.getMessage() for r in caplog.records] == ["plan_shown"]
    parsed = json.loads(JSONFormatter().format(caplog.records[0]))
    assert parsed["context"]["ctx_session_type"] == "pool"
