import json
import logging
import sys

from ectd_engine.logging_setup import JsonFormatter


def _record(msg, **extra):
    record = logging.LogRecord("ectd_engine.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_shape_and_extra_fields():
    payload = json.loads(JsonFormatter().format(_record("Submission generation started", documents=4)))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "ectd_engine.test"
    assert payload["message"] == "Submission generation started"
    assert payload["documents"] == 4
    assert "ts" in payload


def test_contact_details_redacted_in_messages():
    payload = json.loads(JsonFormatter().format(_record("Contact mailto:jane.smith@sample.com tel:+1(555)123-4567")))
    assert "jane.smith" not in payload["message"]
    assert "555" not in payload["message"]
    assert "[REDACTED_EMAIL]" in payload["message"]
    assert "[REDACTED_PHONE]" in payload["message"]


def test_contact_details_redacted_in_extra_dicts():
    contact = {"firstName": "Jane", "email": "jane@sample.com", "phone": "+1 555 123 4567", "nested": {"fax": "1"}}
    payload = json.loads(JsonFormatter().format(_record("Contact", contact=contact)))
    assert payload["contact"]["firstName"] == "Jane"
    assert payload["contact"]["email"] == "[REDACTED]"
    assert payload["contact"]["phone"] == "[REDACTED]"
    assert payload["contact"]["nested"]["fax"] == "[REDACTED]"


def test_redaction_can_be_disabled():
    payload = json.loads(JsonFormatter(redact=False).format(_record("jane@sample.com")))
    assert payload["message"] == "jane@sample.com"


def test_exception_info_included():
    try:
        raise ValueError("bad value")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
    payload = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad value" in payload["exc_info"]
