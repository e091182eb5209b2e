import json
import logging

from trimmove.logging_setup import JsonFormatter, setup_logging


def test_json_formatter_includes_event_and_context():
    record = logging.LogRecord("trimmove.mover", logging.WARNING, __file__, 1, "Move failed", None, None)
    record.event = "move_failed"
    record.context = {"source": "/v/a.mp4"}
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["message"] == "Move failed"
    assert payload["event"] == "move_failed"
    assert payload["context"] == {"source": "/v/a.mp4"}


def test_setup_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(tmp_path / "logs")
        logging.getLogger("trimmove.test").info("hello", extra={"event": "test"})
        for handler in root.handlers:
            handler.flush()
        line = (tmp_path / "logs" / "trimmove.log").read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["event"] == "test"
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
