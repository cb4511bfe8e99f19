"""
Tests for structured logging: context scoping and record formatting.
"""

import json
import logging

from toollender.shared.utils.logging import (
    ContextualFormatter,
    JSONFormatter,
    correlation_id_var,
    get_logger,
    log_context,
    user_id_var,
)


def make_record(message="Local cache write failed", **extra_fields):
    record = logging.LogRecord("toollender.cache", logging.WARNING, __file__, 1, message, None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


def test_log_context_sets_and_restores_ids():
    with log_context(user_id="u1"):
        assert user_id_var.get() == "u1"
        assert correlation_id_var.get()

    assert user_id_var.get() == ""
    assert correlation_id_var.get() == ""


def test_log_context_keeps_given_correlation_id():
    with log_context(correlation_id="req-7"):
        assert correlation_id_var.get() == "req-7"
        assert user_id_var.get() == ""


def test_json_records_carry_context_and_fields():
    with log_context(user_id="u1", correlation_id="req-7"):
        payload = json.loads(JSONFormatter().format(make_record(cache_key="tools")))

    assert payload["message"] == "Local cache write failed"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "toollender.cache"
    assert payload["service"] == "toollender"
    assert payload["user_id"] == "u1"
    assert payload["correlation_id"] == "req-7"
    assert payload["extra"] == {"cache_key": "tools"}


def test_json_records_outside_a_context_have_no_ids():
    payload = json.loads(JSONFormatter().format(make_record()))

    assert "user_id" not in payload
    assert "correlation_id" not in payload
    assert "extra" not in payload


def test_text_records_append_fields():
    line = ContextualFormatter("%(levelname)s %(message)s").format(make_record(cache_key="tools"))

    assert line == "WARNING Local cache write failed | cache_key=tools"


def test_keyword_arguments_become_extra_fields(caplog):
    with caplog.at_level(logging.WARNING, logger="toollender.tests"):
        get_logger("toollender.tests").warning("Server read failed", cache_key="tools", exc_info=False)

    [record] = caplog.records
    assert record.extra_fields == {"cache_key": "tools"}
    assert record.getMessage() == "Server read failed"
