import subprocess

import pytest

from trimmove import ffmpeg_utils
from trimmove.models import OperationStatus


class FakePopen:
    returncode = 0
    instances = []

    def __init__(self, cmd, **kwargs):
        self.cmd = cmd
        FakePopen.instances.append(self)

    def communicate(self):
        return "", "boom" if self.returncode else ""


@pytest.fixture
def fake_popen(monkeypatch):
    FakePopen.instances = []
    FakePopen.returncode = 0
    monkeypatch.setattr(ffmpeg_utils.subprocess, "Popen", FakePopen)
    return FakePopen


def test_build_cut_command_stream_copies_the_range():
    cmd = ffmpeg_utils.build_cut_command("in.mp4", 1.5, 3.5, "out.mp4")
    assert cmd[0] == "ffmpeg"
    assert cmd[cmd.index("-ss") + 1] == "1.500"
    assert cmd[cmd.index("-t") + 1] == "2.000"
    assert cmd[cmd.index("-i") + 1] == "in.mp4"
    assert cmd[cmd.index("-c") + 1] == "copy"
    assert cmd[-1] == "out.mp4"


def test_cut_completed_on_zero_exit(fake_popen):
    assert ffmpeg_utils.cut("in.mp4", 0, 10, "out.mp4", ffmpeg_path="/opt/ffmpeg") == OperationStatus.COMPLETED
    assert fake_popen.instances[0].cmd[0] == "/opt/ffmpeg"


def test_cut_failed_on_nonzero_exit(fake_popen):
    fake_popen.returncode = 1
    assert ffmpeg_utils.cut("in.mp4", 0, 10, "out.mp4") == OperationStatus.FAILED


def test_cut_failed_when_ffmpeg_cannot_start(monkeypatch):
    def _raise(*args, **kwargs):
        raise FileNotFoundError("ffmpeg")
    monkeypatch.setattr(ffmpeg_utils.subprocess, "Popen", _raise)
    assert ffmpeg_utils.cut("in.mp4", 0, 10, "out.mp4") == OperationStatus.FAILED


def test_is_ffmpeg_available(monkeypatch):
    monkeypatch.setattr(ffmpeg_utils.subprocess, "run", lambda *a, **k: subprocess.CompletedProcess(a, 0))
    assert ffmpeg_utils.is_ffmpeg_available()

    def _missing(*args, **kwargs):
        raise FileNotFoundError("ffmpeg")
    monkeypatch.setattr(ffmpeg_utils.subprocess, "run", _missing)
    assert not ffmpeg_utils.is_ffmpeg_available()


def test_probe_duration(monkeypatch, tmp_path):
    video = tmp_path / "a.mp4"
    video.write_bytes(b"x")
    out = '{"format": {"duration": "12.500000"}}'
    monkeypatch.setattr(ffmpeg_utils.subprocess, "run", lambda *a, **k: subprocess.CompletedProcess(a, 0, stdout=out))
    assert ffmpeg_utils.probe_duration(str(video)) == 12.5
    monkeypatch.setattr(ffmpeg_utils.subprocess, "run", lambda *a, **k: subprocess.CompletedProcess(a, 0, stdout="{}"))
    assert ffmpeg_utils.probe_duration(str(video)) is None
    assert ffmpeg_utils.probe_duration(str(tmp_path / "missing.mp4")) is None
