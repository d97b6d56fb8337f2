from __future__ import annotations

import io
import json
import logging

import pytest

from guided_chat.observability.logging import (
    configure_logging,
    get_logger,
    log_flow_event,
    short_id,
)


@pytest.fixture()
def log_stream():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    stream = io.StringIO()
    configure_logging("DEBUG", "guided_chat", stream=stream)
    yield stream
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def _records(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_short_id():
    assert short_id("0123456789abcdef") == "01234567..."
    assert short_id(None) is None
    assert short_id("") is None


def test_flow_event_is_json_with_standard_fields(log_stream):
    logger = get_logger("guided_chat.tests")

    log_flow_event(logger, "step_activated", "0123456789abcdef", step_id="welcome", delay_ms=500)

    [record] = _records(log_stream)
    assert record["message"] == "step_activated"
    assert record["event"] == "step_activated"
    assert record["conversation_id"] == "01234567..."
    assert record["step_id"] == "welcome"
    assert record["delay_ms"] == 500
    assert record["service"] == "guided_chat"
    assert record["level"] == "DEBUG"


def test_plain_log_gets_empty_conversation(log_stream):
    get_logger("guided_chat.tests").info("Chat session closed", extra={"discarded": 2})

    [record] = _records(log_stream)
    assert record["conversation_id"] is None
    assert record["discarded"] == 2
    assert record["correlation_id"] == ""
