"""Structured logging configuration."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path


class JsonFormatter(logging.Formatter):
    """Simple JSON log formatter."""

    def format(self, record):
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.__dict__.get("event"):
            payload["event"] = record.__dict__["event"]
        if record.__dict__.get("context"):
            payload["context"] = record.__dict__["context"]
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(logs_dir=None, level=logging.INFO):
    """Log to stdout, and to logs_dir/trimmove.log when a directory is given."""
    formatter = JsonFormatter()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if logs_dir is not None:
        logs_dir = Path(logs_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logs_dir / "trimmove.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
