import json
import logging

from cmdb.shared.infrastructure.logging import ContextFilter, CustomJsonFormatter, correlation_id_var


def _format(**extra):
    record = logging.LogRecord("cmdb.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    ContextFilter("staging").filter(record)
    return json.loads(CustomJsonFormatter("%(message)s").format(record))


def test_json_log_carries_context():
    token = correlation_id_var.set("corr-1")
    try:
        entry = _format()
    finally:
        correlation_id_var.reset(token)

    assert entry["message"] == "hello"
    assert entry["correlation_id"] == "corr-1"
    assert entry["environment"] == "staging"
    assert "timestamp" in entry


def test_sensitive_fields_are_redacted():
    entry = _format(password="hunter2", api_key="k", access_token="t", username="admin")
    assert entry["password"] == "***REDACTED***"
    assert entry["api_key"] == "***REDACTED***"
    assert entry["access_token"] == "***REDACTED***"
    assert entry["username"] == "admin"
