import io
import json
import logging

from tacacs_node.utils.logger import configure, get_logger, logging_context


def _capture(level=logging.DEBUG):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    configure(level=level, handlers=[handler])
    return stream


def _records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


def test_structured_fields_rendered_as_json():
    stream = _capture()
    log = get_logger("tacacs_node.test")
    log.info("config_set", event="tacacs_node.node.config_set", attribute="timeout")

    (record,) = _records(stream)
    assert record["message"] == "config_set"
    assert record["event"] == "tacacs_node.node.config_set"
    assert record["attribute"] == "timeout"
    assert record["level"] == "INFO"
    assert record["service"] == "tacacs_node"


def test_bound_context_and_static_context_are_merged():
    stream = _capture()
    log = get_logger("tacacs_node.test", device="sw1")
    with logging_context(command="show"):
        log.warning("hello")
    log.warning("outside")

    inside, outside = _records(stream)
    assert inside["device"] == "sw1"
    assert inside["command"] == "show"
    assert outside["device"] == "sw1"
    assert "command" not in outside


def test_exception_details_included():
    stream = _capture()
    log = get_logger("tacacs_node.test")
    try:
        raise ValueError("boom")
    except ValueError:
        log.error("failed", exc_info=True)

    (record,) = _records(stream)
    assert record["error"]["type"] == "ValueError"
    assert record["error"]["message"] == "boom"


def test_level_names_accepted():
    stream = _capture(level="warning")
    log = get_logger("tacacs_node.test")
    log.info("dropped")
    log.warning("kept")
    assert [r["message"] for r in _records(stream)] == ["kept"]
