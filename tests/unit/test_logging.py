"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from app.utils.logging import (
    JSONFormatter,
    get_logger,
    log_api_call,
    log_error_with_context,
    log_pr_event,
    log_stage_transition,
    setup_logging,
)


@pytest.fixture
def captured():
    """Attach a JSON handler to a fresh logger and return (adapter, stream)."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())

    adapter = get_logger("test.logging")
    adapter.logger.handlers = [handler]
    adapter.logger.setLevel(logging.DEBUG)
    adapter.logger.propagate = False

    yield adapter, stream

    adapter.logger.handlers = []
    adapter.logger.propagate = True


def records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_json_formatter(captured):
    """Test JSON formatter produces valid JSON output."""
    logger, stream = captured

    logger.info("Test message", extra={"owner": "octo", "pr_number": 7, "files": 3})

    log_data = records(stream)[0]
    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logging"
    assert log_data["message"] == "Test message"
    assert log_data["owner"] == "octo"
    assert log_data["pr_number"] == 7
    assert log_data["context"] == {"files": 3}
    assert log_data["source"]["function"] == "test_json_formatter"


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", owner="octo", pr_number=7)

    assert logger.extra["owner"] == "octo"
    assert logger.extra["pr_number"] == 7


def test_with_context_does_not_mutate_parent():
    parent = get_logger("test_module", owner="octo")
    child = parent.with_context(pr_number=7)

    assert child.extra == {"owner": "octo", "pr_number": 7}
    assert parent.extra == {"owner": "octo"}


def test_adapter_context_is_injected(captured):
    logger, stream = captured

    logger.with_context(repo="repo", stage="collect").info("hello")

    log_data = records(stream)[0]
    assert log_data["repo"] == "repo"
    assert log_data["stage"] == "collect"


def test_log_pr_event(captured):
    """Test PR event logging."""
    logger, stream = captured

    log_pr_event(logger, owner="octo", repo="repo", pr_number=7, action="opened")

    log_data = records(stream)[0]
    assert log_data["message"] == "Processing PR #7 in octo/repo"
    assert log_data["repo"] == "repo"
    assert log_data["context"]["action"] == "opened"


def test_log_stage_transition(captured):
    logger, stream = captured

    log_stage_transition(logger, pr_number=7, stage="generate", status="started")

    log_data = records(stream)[0]
    assert log_data["message"] == "Pipeline stage started: generate"
    assert log_data["stage"] == "generate"


def test_log_api_call_success_and_failure(captured):
    logger, stream = captured

    log_api_call(logger, service="github", endpoint="pulls.files", method="GET", duration_ms=12.3456)
    log_api_call(logger, service="openai", endpoint="chat.completions", method="POST", error="timeout")

    ok, failed = records(stream)
    assert ok["level"] == "INFO"
    assert ok["context"]["duration_ms"] == 12.35
    assert failed["level"] == "ERROR"
    assert failed["context"]["error"] == "timeout"


def test_log_error_with_context(captured):
    logger, stream = captured

    try:
        raise ValueError("bad value")
    except ValueError as e:
        log_error_with_context(logger, "Something failed", e, pr_number=7)

    log_data = records(stream)[0]
    assert log_data["level"] == "ERROR"
    assert log_data["pr_number"] == 7
    assert log_data["error"]["type"] == "ValueError"
    assert log_data["error"]["message"] == "bad value"
    assert "Traceback" in log_data["error"]["stack_trace"]


def test_setup_logging_installs_json_handler():
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level

    try:
        setup_logging("debug")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("github").level == logging.WARNING
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
