"""
Name: JSON Logger Tests

Responsibilities:
  - Ensure sensitive keys are redacted
  - Ensure request context is merged into each record
"""

import json
import logging
import sys

import pytest

from identity_api.context import clear_context, set_request_context
from identity_api.crosscutting.logger import JSONFormatter

pytestmark = pytest.mark.unit


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="identity-api",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="evento",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_sensitive_keys_are_redacted():
    payload = json.loads(
        JSONFormatter().format(
            _record(password="secret1", details={"password_hash": "h", "ok": 1})
        )
    )

    assert payload["password"] == "***REDACTADO***"
    assert payload["details"] == {"password_hash": "***REDACTADO***", "ok": 1}


def test_request_context_is_included():
    set_request_context(request_id="req-1", method="GET", path="/users")
    try:
        payload = json.loads(JSONFormatter().format(_record()))
    finally:
        clear_context()

    assert payload["request_id"] == "req-1"
    assert payload["message"] == "evento"


def test_credential_shaped_values_are_redacted_under_any_key():
    payload = json.loads(
        JSONFormatter().format(
            _record(
                stored="$argon2id$v=19$m=65536,t=3,p=4$c2FsdA$aGFzaA",
                header="Bearer abc.def.ghi",
                jwt="eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiIxIn0.c2ln",
                fields=["fullName", "username"],
            )
        )
    )

    assert payload["stored"] == "***REDACTADO***"
    assert payload["header"] == "***REDACTADO***"
    assert payload["jwt"] == "***REDACTADO***"
    assert payload["fields"] == ["fullName", "username"]


def test_exception_is_attached():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(JSONFormatter().format(record))

    assert payload["exception"]["type"] == "RuntimeError"
    assert any("boom" in line for line in payload["exception"]["stacktrace"])
