import json
import logging

from club_attendance.core.logging_utils import JsonFormatter


def test_json_formatter_keeps_extra_fields():
    record = logging.LogRecord("club", logging.INFO, __file__, 10, "Business event: %s", ("checked_in",), None)
    record.event = "checked_in"
    record.details = {"status": "present"}

    entry = json.loads(JsonFormatter().format(record))

    assert entry["message"] == "Business event: checked_in"
    assert entry["level"] == "INFO"
    assert entry["event"] == "checked_in"
    assert entry["details"] == {"status": "present"}


def test_json_formatter_stringifies_unserializable_values():
    record = logging.LogRecord("club", logging.WARNING, __file__, 10, "x", (), None)
    record.when = object()

    entry = json.loads(JsonFormatter().format(record))

    assert entry["when"].startswith("<object object")
