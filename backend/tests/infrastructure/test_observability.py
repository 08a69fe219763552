"""JSONFormatter — structured log lines with optional extra fields."""

import json
import logging

from taskhive.infrastructure.observability import (
    JSONFormatter, mask_email, setup_logging,
)


def _record(msg="hello", **extra):
    record = logging.LogRecord(
        "taskhive.test", logging.INFO, __file__, 1, msg, None, None,
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_base_fields_present():
    line = json.loads(JSONFormatter().format(_record()))
    assert line["level"] == "INFO"
    assert line["logger"] == "taskhive.test"
    assert line["message"] == "hello"
    assert "timestamp" in line


def test_extra_fields_surface_when_set():
    line = json.loads(JSONFormatter().format(
        _record(user_id="u1", error_code="AUTHENTICATION_FAILED"),
    ))
    assert line["user_id"] == "u1"
    assert line["error_code"] == "AUTHENTICATION_FAILED"
    assert "attempt" not in line


def test_email_extra_is_masked():
    line = json.loads(JSONFormatter().format(_record(email="alice@example.com")))
    assert line["email"] == "a***@example.com"


def test_mask_email_without_at_sign():
    assert mask_email("not-an-email") == "***"


def test_timestamp_is_record_creation_time():
    record = _record()
    record.created = 0
    line = json.loads(JSONFormatter().format(record))
    assert line["timestamp"].startswith("1970-01-01T00:00:00")


def test_setup_logging_replaces_its_handler():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("INFO", "text")
        assert first not in root.handlers
        assert second in root.handlers
        assert root.level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for h in list(root.handlers):
            if h not in before:
                root.removeHandler(h)
        root.setLevel(level)
