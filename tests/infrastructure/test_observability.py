"""Structured Logging — JSON formatter output and idempotent setup."""

import json
import logging

from community_rest.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "community_rest.audit", logging.INFO, __file__, 1, "member update", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    line = JSONFormatter().format(_record(
        resource="member", entity_id=42, operation="update",
        previous={"id": 42, "name": "Jane"},
    ))
    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "community_rest.audit"
    assert payload["message"] == "member update"
    assert payload["entity_id"] == 42
    assert payload["previous"] == {"id": 42, "name": "Jane"}
    assert "caller_id" not in payload


def test_setup_logging_is_idempotent():
    before = len(logging.root.handlers)
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    named = [h for h in logging.root.handlers if h.get_name() == "community_rest"]
    assert len(named) == 1
    assert len(logging.root.handlers) <= before + 1
    logging.root.removeHandler(named[0])
