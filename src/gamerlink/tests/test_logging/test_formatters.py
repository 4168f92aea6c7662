# src/gamerlink/tests/test_logging/test_formatters.py
import json
import logging
import sys
import uuid

from gamerlink.core.logging.formatters import ColorFormatter, JsonFormatter


def make_record(**extra):
    rec = logging.LogRecord("gamerlink", logging.INFO, __file__, 10, "hello %s", ("tester",), None)
    for key, value in extra.items():
        setattr(rec, key, value)
    return rec


def test_json_formatter_basic_fields():
    rec = make_record(custom="value", request_id="req-1")

    data = json.loads(JsonFormatter(env="testing", service="svc").format(rec))

    assert data["message"] == "hello tester"
    assert data["level"] == "INFO"
    assert data["service"] == "svc"
    assert data["env"] == "testing"
    assert data["request_id"] == "req-1"
    assert data["custom"] == "value"
    assert "timestamp" in data
    assert "version" in data


def test_json_formatter_defaults_service_name():
    data = json.loads(JsonFormatter().format(make_record()))

    assert data["service"] == "gamerlink-api"
    assert data["request_id"] == "-"


def test_json_formatter_stringifies_uuid_extras():
    message_id = uuid.uuid4()

    data = json.loads(JsonFormatter().format(make_record(to_user_id=message_id)))

    assert data["to_user_id"] == str(message_id)


def test_json_formatter_leaves_out_record_internals():
    data = json.loads(JsonFormatter().format(make_record()))

    for internal in ("args", "msg", "levelno", "created", "thread", "processName"):
        assert internal not in data


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        rec = logging.LogRecord("gamerlink", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    data = json.loads(JsonFormatter().format(rec))

    assert "ValueError: boom" in data["exc_info"]


def test_color_formatter_line_shape():
    rec = make_record(request_id="rid-9")

    line = ColorFormatter().format(rec)

    assert ColorFormatter.COLOR_CODES["INFO"] in line
    assert "| rid-9" in line
    assert line.endswith("hello tester")
