from pathlib import Path

import pytest

from trimmove.models import OperationStatus
from trimmove.mover import MoveScheduler


class FakeHost:
    """Stands in for the media player: a fixed list of files, advanced one at a time."""

    def __init__(self, paths):
        self.paths = [str(p) for p in paths]
        self.index = 0
        self.position_us = 0
        self.advanced = 0
        self.paused = False
        self.pauses = 0

    def current_uri(self):
        if self.index < len(self.paths):
            return Path(self.paths[self.index]).as_uri()
        return ""

    def position_microseconds(self):
        return self.position_us

    def advance(self):
        self.advanced += 1
        self.index += 1

    def is_playing(self):
        return self.index < len(self.paths) and not self.paused

    def pause(self):
        self.pauses += 1
        self.paused = True


class FakeExecutor:
    def __init__(self, status=OperationStatus.COMPLETED):
        self.status = status
        self.calls = []

    def __call__(self, source, start, end, output):
        self.calls.append((source, start, end, output))
        if self.status == OperationStatus.COMPLETED:
            Path(output).write_bytes(b"clip")
        return self.status


@pytest.fixture
def make_video(tmp_path):
    def _make(name):
        path = tmp_path / name
        path.write_bytes(b"video")
        return path
    return _make


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def scheduler():
    return MoveScheduler(grace_seconds=0, backoff_seconds=0, sleep=lambda s: None)
